"""Entry point for the Jewels match-three game.

Sets up logging, the ECS world, event bus, systems, and the Arcade window.
"""
import logging

from arcade import Window, run, set_background_color, color
from rich.logging import RichHandler

from jewels.world import create_world
from jewels.constants import GRID_ROWS, GRID_COLS
from jewels.events.bus import EventBus, EVENT_TICK, EVENT_MOUSE_PRESS_RAW
from jewels.systems.animation import AnimationSystem
from jewels.systems.board import BoardSystem
from jewels.systems.bomb import BombSystem
from jewels.systems.input import InputSystem
from jewels.systems.match_resolution import MatchResolutionSystem
from jewels.systems.mouse_throttle_system import MouseThrottleSystem
from jewels.systems.render import RenderSystem
from jewels.systems.score import ScoreSystem

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=[RichHandler()]
    )


class JewelsWindow(Window):
    def __init__(self):
        super().__init__(800, 800, "Jewels", resizable=True)
        self.set_update_rate(1/60)
        self.event_bus = EventBus()
        self.world = create_world(self.event_bus)

        # Input systems
        self.mouse_throttle_system = MouseThrottleSystem(self.event_bus)
        self.input_system = InputSystem(self.event_bus, self, self.world)

        # Board and animation systems
        self.board_system = BoardSystem(self.world, self.event_bus, rows=GRID_ROWS, cols=GRID_COLS)
        self.animation_system = AnimationSystem(self.world, self.event_bus)
        self.match_resolution_system = MatchResolutionSystem(self.world, self.event_bus)
        self.bomb_system = BombSystem(self.world, self.event_bus)
        self.score_system = ScoreSystem(self.world, self.event_bus)

        # Interface systems
        self.render_system = RenderSystem(self.world, self.event_bus, self)

        set_background_color(color.BLACK)

    def on_resize(self, width: int, height: int):
        # Arcade may fire a resize before __init__ has built the render system.
        if hasattr(self, 'render_system'):
            self.render_system.notify_resize(width, height)
        return super().on_resize(width, height)

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(
            EVENT_MOUSE_PRESS_RAW,
            x=x,
            y=y,
            button=button,
            modifiers=modifiers,
        )


def main():
    configure_logging()
    JewelsWindow()
    logger.info("Starting Jewels on a %dx%d board", GRID_ROWS, GRID_COLS)
    run()

if __name__ == "__main__":
    main()
