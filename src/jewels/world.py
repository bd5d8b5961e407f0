import random
from typing import Dict, Tuple

from esper import World
from .events.bus import EventBus
from jewels.components.cascade_state import CascadeState
from jewels.components.score import Score
from jewels.components.tile_type_registry import TileTypeRegistry
from jewels.components.tile_types import TileTypes
from jewels.constants import BOMB_COLOR, BOMB_TYPE, JEWEL_COLORS


def create_world(
    event_bus: EventBus,
    *,
    rng: random.Random | None = None,
    palette: Dict[str, Tuple[int, int, int]] | None = None,
) -> World:
    """Create the ECS world with its singleton resources.

    The board itself is created by BoardSystem; this only registers the tile
    type definitions, the score and the cascade state.
    """
    world = World()
    setattr(world, "random", rng or random.Random())

    colors = dict(palette or JEWEL_COLORS)
    types = dict(colors)
    types[BOMB_TYPE] = BOMB_COLOR
    world.create_entity(
        TileTypeRegistry(),
        TileTypes(types=types, spawnable=list(colors.keys())),
    )
    world.create_entity(Score())
    world.create_entity(CascadeState())
    return world
