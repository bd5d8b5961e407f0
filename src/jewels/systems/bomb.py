import logging

from esper import World

from jewels.constants import BOMB_RADIUS
from jewels.events.bus import EVENT_BOMB_ACTIVATE_REQUEST, EVENT_BOMB_DETONATED, EventBus
from jewels.systems.board_ops import blast_area, is_bomb_at
from jewels.systems.cascade_state_utils import board_busy

logger = logging.getLogger(__name__)


class BombSystem:
    """Sets off bombs: everything within BOMB_RADIUS (Chebyshev) of the bomb is cleared.

    The bomb itself and any other bomb caught in the blast are removed without chaining.
    """

    def __init__(self, world: World, event_bus: EventBus, radius: int = BOMB_RADIUS):
        self.world = world
        self.event_bus = event_bus
        self.radius = radius
        self.event_bus.subscribe(EVENT_BOMB_ACTIVATE_REQUEST, self.on_activate_request)

    def on_activate_request(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        if board_busy(self.world):
            return
        if not is_bomb_at(self.world, (row, col)):
            return
        positions = blast_area(self.world, row, col, self.radius)
        logger.info("Bomb at %s detonated (%s), clearing %d tiles", (row, col), kwargs.get('trigger'), len(positions))
        self.event_bus.emit(EVENT_BOMB_DETONATED, row=row, col=col, positions=positions)
