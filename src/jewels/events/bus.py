"""Publish/subscribe glue between systems, plus the names of every game event.

Handlers are called as ``handler(sender, **payload)``; the comment beside each
event name lists its payload keys.
"""
from typing import Callable, Dict

from blinker import Signal


class EventBus:
    """Named blinker signals created on first subscription."""

    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn: Callable) -> None:
        # Systems are often constructed without being stored, so hold strong references.
        self._signals.setdefault(name, Signal(name)).connect(fn, weak=False)

    def unsubscribe(self, name: str, fn: Callable) -> None:
        sig = self._signals.get(name)
        if sig is not None:
            sig.disconnect(fn)

    def emit(self, name: str, **payload) -> None:
        sig = self._signals.get(name)
        if sig is not None:
            sig.send(self, **payload)


# Frame clock
EVENT_TICK = "tick"                                    # dt (seconds)

# Pointer input
EVENT_MOUSE_PRESS_RAW = "mouse_press_raw"              # x, y, button, modifiers
EVENT_MOUSE_PRESS = "mouse_press"                      # x, y, button, modifiers, press_id
EVENT_TILE_CLICK = "tile_click"                        # row, col

# Selection and swapping
EVENT_TILE_SELECTED = "tile_selected"                  # row, col
EVENT_TILE_DESELECTED = "tile_deselected"              # reason, prev_row, prev_col
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"          # src, dst
EVENT_TILE_SWAP_DO = "tile_swap_do"                    # src, dst
EVENT_TILE_SWAP_FINALIZE = "tile_swap_finalize"        # src, dst

# Board resolution
EVENT_MATCH_FOUND = "match_found"                      # positions, size, bombs, reason
EVENT_MATCH_CLEARED = "match_cleared"                  # positions, types [(r, c, type)], reason
EVENT_GRAVITY_APPLIED = "gravity_applied"              # cascades (columns that moved)
EVENT_REFILL_COMPLETED = "refill_completed"            # new_tiles
EVENT_CASCADE_STEP = "cascade_step"                    # depth, positions, reason
EVENT_CASCADE_COMPLETE = "cascade_complete"            # depth

# Bombs
EVENT_BOMB_CREATED = "bomb_created"                    # row, col, run_length
EVENT_BOMB_ACTIVATE_REQUEST = "bomb_activate_request"  # row, col, trigger
EVENT_BOMB_DETONATED = "bomb_detonated"                # row, col, positions

# Animation
EVENT_ANIMATION_START = "animation_start"              # kind ('fade' | 'fall' | 'refill'), items
EVENT_ANIMATION_COMPLETE = "animation_complete"        # kind, items

# Score
EVENT_SCORE_CHANGED = "score_changed"                  # value, delta
