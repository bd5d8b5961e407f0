import random

import pytest

from jewels.components.tile_state import TilePhase, TileState
from jewels.constants import BOMB_TYPE, JEWEL_COLORS
from jewels.events.bus import EventBus
from jewels.systems.board import BoardSystem
from jewels.systems.board_ops import active_tile_type_map, board_is_full, find_runs
from jewels.world import create_world


@pytest.mark.parametrize("seed", range(25))
def test_initial_board_has_no_runs(seed):
    bus = EventBus()
    world = create_world(bus, rng=random.Random(seed))
    BoardSystem(world, bus, 10, 10)
    assert find_runs(world) == []


def test_initial_board_is_full_of_idle_colour_tiles():
    bus = EventBus()
    world = create_world(bus, rng=random.Random(3))
    BoardSystem(world, bus, 10, 10)
    assert board_is_full(world)
    types = active_tile_type_map(world)
    assert len(types) == 100
    assert set(types.values()) <= set(JEWEL_COLORS)
    assert BOMB_TYPE not in types.values()
    assert all(state.phase is TilePhase.IDLE for _, state in world.get_component(TileState))


def test_same_seed_gives_same_board():
    layouts = []
    for _ in range(2):
        bus = EventBus()
        world = create_world(bus, rng=random.Random(11))
        BoardSystem(world, bus, 6, 8)
        layouts.append(active_tile_type_map(world))
    assert layouts[0] == layouts[1]
