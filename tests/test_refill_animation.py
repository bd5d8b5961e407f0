from jewels.components.animation_fall import FallAnimation
from jewels.components.animation_refill import RefillAnimation
from jewels.components.tile_state import TilePhase, TileState
from jewels.events.bus import EVENT_ANIMATION_COMPLETE, EVENT_ANIMATION_START, EventBus
from jewels.systems.animation import AnimationSystem
from jewels.systems.board import BoardSystem
from jewels.systems.board_ops import get_entity_at
from jewels.world import create_world
from tests.helpers import drive


def _setup():
    bus = EventBus()
    world = create_world(bus)
    BoardSystem(world, bus, 4, 4)
    AnimationSystem(world, bus)
    done = []
    bus.subscribe(EVENT_ANIMATION_COMPLETE, lambda sender, **kw: done.append(kw))
    return bus, world, done


def _phase(world, pos):
    return world.component_for_entity(get_entity_at(world, *pos), TileState).phase


def test_refill_animation_runs_and_completes():
    bus, world, done = _setup()
    bus.emit(EVENT_ANIMATION_START, kind='refill', items=[(3, 0), (3, 1)])
    assert len(list(world.get_component(RefillAnimation))) == 2
    assert _phase(world, (3, 0)) is TilePhase.FALLING
    drive(bus, 5)
    assert done == []
    drive(bus, 20)
    assert len(done) == 1 and done[0]['kind'] == 'refill'
    assert sorted(done[0]['items']) == [(3, 0), (3, 1)]
    assert list(world.get_component(RefillAnimation)) == []
    assert _phase(world, (3, 0)) is TilePhase.IDLE


def test_fall_group_completes_together():
    bus, world, done = _setup()
    moves = [{'from': (2, 0), 'to': (1, 0)}, {'from': (3, 0), 'to': (2, 0)}]
    bus.emit(EVENT_ANIMATION_START, kind='fall', items=moves)
    assert _phase(world, (1, 0)) is TilePhase.FALLING
    assert _phase(world, (3, 0)) is TilePhase.IDLE
    drive(bus, 30)
    assert len(done) == 1 and done[0]['kind'] == 'fall'
    assert sorted(done[0]['items'], key=lambda item: item['to']) == sorted(moves, key=lambda item: item['to'])
    assert list(world.get_component(FallAnimation)) == []
    assert _phase(world, (2, 0)) is TilePhase.IDLE


def test_unknown_animation_kind_is_ignored():
    bus, world, done = _setup()
    bus.emit(EVENT_ANIMATION_START, kind='sparkle', items=[(0, 0)])
    drive(bus, 10)
    assert done == []
