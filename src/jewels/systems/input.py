import logging

from jewels.events.bus import (
    EventBus,
    EVENT_MOUSE_PRESS,
    EVENT_TILE_CLICK,
)
from jewels.constants import GRID_COLS, GRID_ROWS
from jewels.systems.board_ops import board_dimensions
from jewels.ui.layout import cell_at_point

logger = logging.getLogger(__name__)

LEFT_BUTTON = 1


class InputSystem:
    """Translates pointer presses into tile clicks using the current board geometry."""

    def __init__(self, event_bus: EventBus, window, world=None):
        self.event_bus = event_bus
        self.window = window
        self.world = world  # optional; board size falls back to GRID_ROWS x GRID_COLS
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        button = kwargs.get('button')
        if x is None or y is None:
            return
        # Other buttons are handled by systems listening to EVENT_MOUSE_PRESS directly.
        if button != LEFT_BUTTON:
            return
        rows, cols = self._dimensions()
        cell = cell_at_point(x, y, self.window.width, self.window.height, rows, cols)
        if cell is None:
            return
        row, col = cell
        logger.debug("Press at (%.0f, %.0f) -> tile %s", x, y, cell)
        self.event_bus.emit(EVENT_TILE_CLICK, row=row, col=col)

    def _dimensions(self):
        if self.world is not None:
            dims = board_dimensions(self.world)
            if dims:
                return dims
        return GRID_ROWS, GRID_COLS
