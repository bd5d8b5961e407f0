from __future__ import annotations

from typing import Any

from jewels.events.bus import EVENT_MOUSE_PRESS, EVENT_MOUSE_PRESS_RAW, EventBus
from jewels.utils.input_throttle import MouseThrottle


class MouseThrottleSystem:
    """Turns raw window presses into debounced EVENT_MOUSE_PRESS events tagged with a press_id."""

    def __init__(self, event_bus: EventBus, *, throttle: MouseThrottle | None = None) -> None:
        self.event_bus = event_bus
        self.throttle = throttle or MouseThrottle()
        self.event_bus.subscribe(EVENT_MOUSE_PRESS_RAW, self.on_mouse_press_raw)

    def on_mouse_press_raw(self, sender: Any, **payload: Any) -> None:
        try:
            x, y = float(payload['x']), float(payload['y'])
            button = int(payload['button'])
        except (KeyError, TypeError, ValueError):
            return
        if not self.throttle.allow(x, y, button):
            return
        self.event_bus.emit(
            EVENT_MOUSE_PRESS,
            **{**payload, 'x': x, 'y': y, 'button': button, 'press_id': self.throttle.last_sequence},
        )
