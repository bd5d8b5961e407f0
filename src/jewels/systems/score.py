import logging

from esper import World

from jewels.components.score import Score
from jewels.constants import POINTS_PER_TILE
from jewels.events.bus import EVENT_MATCH_CLEARED, EVENT_SCORE_CHANGED, EventBus

logger = logging.getLogger(__name__)


class ScoreSystem:
    """Awards POINTS_PER_TILE for every tile cleared by a match or a bomb."""

    def __init__(self, world: World, event_bus: EventBus, points_per_tile: int = POINTS_PER_TILE):
        self.world = world
        self.event_bus = event_bus
        self.points_per_tile = points_per_tile
        self.event_bus.subscribe(EVENT_MATCH_CLEARED, self.on_match_cleared)

    def on_match_cleared(self, sender, **kwargs):
        positions = kwargs.get('positions') or []
        if not positions:
            return
        score = self._score()
        delta = self.points_per_tile * len(positions)
        score.value += delta
        logger.debug("Score +%d -> %d", delta, score.value)
        self.event_bus.emit(EVENT_SCORE_CHANGED, value=score.value, delta=delta)

    def _score(self) -> Score:
        for _, score in self.world.get_component(Score):
            return score
        ent = self.world.create_entity(Score())
        return self.world.component_for_entity(ent, Score)

    @property
    def value(self) -> int:
        return self._score().value
