from jewels.components.animation_swap import SwapAnimation
from jewels.components.tile_state import TilePhase, TileState
from jewels.events.bus import (
    EVENT_MATCH_FOUND,
    EVENT_TILE_CLICK,
    EVENT_TILE_SWAP_DO,
    EVENT_TILE_SWAP_FINALIZE,
)
from jewels.systems.board_ops import get_entity_at, find_runs
from jewels.systems.cascade_state_utils import board_busy
from tests.helpers import build_game, drive, settle


def _phase(world, pos):
    ent = get_entity_at(world, *pos)
    return world.component_for_entity(ent, TileState).phase


def test_swap_without_match_still_commits():
    game = build_game()
    finalized = {}
    found = []
    game.bus.subscribe(EVENT_TILE_SWAP_FINALIZE, lambda sender, **kw: finalized.update(kw))
    game.bus.subscribe(EVENT_MATCH_FOUND, lambda sender, **kw: found.append(kw))
    # red <-> green along the bottom row forms nothing
    game.bus.emit(EVENT_TILE_CLICK, row=0, col=0)
    game.bus.emit(EVENT_TILE_CLICK, row=0, col=1)
    settle(game.bus, game.world)
    assert finalized == {'src': (0, 0), 'dst': (0, 1)}
    assert found == []
    assert game.board.type_at(0, 0) == 'green'
    assert game.board.type_at(0, 1) == 'red'
    assert find_runs(game.world) == []
    assert not board_busy(game.world)


def test_swap_tiles_are_swapping_until_commit():
    game = build_game()
    do_events = []
    game.bus.subscribe(EVENT_TILE_SWAP_DO, lambda sender, **kw: do_events.append(kw))
    game.bus.emit(EVENT_TILE_CLICK, row=0, col=0)
    game.bus.emit(EVENT_TILE_CLICK, row=0, col=1)
    assert _phase(game.world, (0, 0)) is TilePhase.SWAPPING
    assert _phase(game.world, (0, 1)) is TilePhase.SWAPPING
    assert _phase(game.world, (0, 2)) is TilePhase.IDLE
    drive(game.bus, 3)
    swaps = list(game.world.get_component(SwapAnimation))
    assert len(swaps) == 1 and 0.0 < swaps[0][1].progress < 1.0
    # types stay put until the animation reaches the end
    assert game.board.type_at(0, 0) == 'red'
    assert do_events == []
    drive(game.bus, 12)
    assert do_events == [{'src': (0, 0), 'dst': (0, 1)}]
    assert list(game.world.get_component(SwapAnimation)) == []
    assert _phase(game.world, (0, 0)) is TilePhase.IDLE
    assert _phase(game.world, (0, 1)) is TilePhase.IDLE


def test_swap_without_board_listener_times_out():
    from jewels.events.bus import EventBus, EVENT_TILE_SWAP_REQUEST
    from jewels.systems.animation import AnimationSystem
    from jewels.world import create_world

    bus = EventBus()
    world = create_world(bus)
    AnimationSystem(world, bus)
    bus.emit(EVENT_TILE_SWAP_REQUEST, src=(0, 0), dst=(0, 1))
    drive(bus, 20)
    assert list(world.get_component(SwapAnimation)) == []
