from jewels.events.bus import EventBus, EVENT_MATCH_CLEARED, EVENT_SCORE_CHANGED
from jewels.rendering.score_renderer import score_text
from jewels.systems.score import ScoreSystem
from jewels.world import create_world


def test_score_adds_ten_per_cleared_tile():
    bus = EventBus()
    world = create_world(bus)
    score = ScoreSystem(world, bus)
    changes = []
    bus.subscribe(EVENT_SCORE_CHANGED, lambda sender, **kw: changes.append(kw))

    bus.emit(EVENT_MATCH_CLEARED, positions=[(0, 0), (0, 1), (0, 2)], reason='swap')
    bus.emit(EVENT_MATCH_CLEARED, positions=[(1, c) for c in range(5)], reason='cascade')

    assert score.value == 80
    assert changes == [{'value': 30, 'delta': 30}, {'value': 80, 'delta': 50}]
    assert score_text(world) == "Score: 80"


def test_empty_clear_does_not_change_score():
    bus = EventBus()
    world = create_world(bus)
    score = ScoreSystem(world, bus)
    changes = []
    bus.subscribe(EVENT_SCORE_CHANGED, lambda sender, **kw: changes.append(kw))
    bus.emit(EVENT_MATCH_CLEARED, positions=[], reason='swap')
    assert score.value == 0
    assert changes == []
    assert score_text(world) == "Score: 0"


def test_points_per_tile_is_configurable():
    bus = EventBus()
    world = create_world(bus)
    score = ScoreSystem(world, bus, points_per_tile=25)
    bus.emit(EVENT_MATCH_CLEARED, positions=[(2, 2), (3, 2), (4, 2)], reason='swap')
    assert score.value == 75
