from jewels.components.tile_state import TilePhase, TileState
from jewels.events.bus import (
    EVENT_ANIMATION_START,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EVENT_TICK,
    EVENT_TILE_CLICK,
)
from jewels.systems.board_ops import board_is_full, find_runs
from jewels.systems.cascade_state_utils import board_busy, get_or_create_cascade_state
from tests.helpers import build_game, settle

# Bottom row reads red red purple red yellow; swapping (0,2) and (0,3)
# lines up three reds at columns 0..2 and nothing else.
THREE_IN_ROW = {(0, 1): 'red', (0, 3): 'red'}

# Same bottom row with purples at (1,1) and (1,2). Once the reds clear, those
# purples drop beside the purple swapped into (0,3) and make a second run.
FALLING_INTO_RUN = {(0, 1): 'red', (0, 3): 'red', (1, 1): 'purple', (1, 2): 'purple'}


def _swap(game, src, dst):
    game.bus.emit(EVENT_TILE_CLICK, row=src[0], col=src[1])
    game.bus.emit(EVENT_TILE_CLICK, row=dst[0], col=dst[1])


def test_swap_into_three_clears_drops_and_refills():
    game = build_game(overrides=THREE_IN_ROW)
    assert find_runs(game.world) == []
    found, cleared, gravity, refills = [], [], [], []
    game.bus.subscribe(EVENT_MATCH_FOUND, lambda s, **kw: found.append(kw))
    game.bus.subscribe(EVENT_MATCH_CLEARED, lambda s, **kw: cleared.append(kw))
    game.bus.subscribe(EVENT_GRAVITY_APPLIED, lambda s, **kw: gravity.append(kw))
    game.bus.subscribe(EVENT_REFILL_COMPLETED, lambda s, **kw: refills.append(kw))
    _swap(game, (0, 3), (0, 2))
    settle(game.bus, game.world)

    assert found[0]['positions'] == [(0, 0), (0, 1), (0, 2)]
    assert found[0]['reason'] == 'swap'
    assert found[0]['bombs'] == []
    assert cleared[0]['positions'] == [(0, 0), (0, 1), (0, 2)]
    assert cleared[0]['types'] == [(0, 0, 'red'), (0, 1, 'red'), (0, 2, 'red')]
    assert gravity[0]['cascades'] == 3
    assert refills[0]['new_tiles'] == [(9, 0), (9, 1), (9, 2)]
    assert board_is_full(game.world)
    assert find_runs(game.world) == []


def test_tiles_above_cleared_cells_fall_one_row():
    game = build_game(overrides=THREE_IN_ROW, refills=('blue', 'green', 'blue'))
    before = {(r, c): game.board.type_at(r, c) for r in range(1, 10) for c in range(3)}
    cleared = []
    game.bus.subscribe(EVENT_MATCH_CLEARED, lambda s, **kw: cleared.append(kw))
    _swap(game, (0, 3), (0, 2))
    settle(game.bus, game.world)
    assert len(cleared) == 1
    for (r, c), type_name in before.items():
        assert game.board.type_at(r - 1, c) == type_name
    assert [game.board.type_at(9, c) for c in range(3)] == ['blue', 'green', 'blue']


def test_cascade_events_and_completion():
    game = build_game(overrides=THREE_IN_ROW)
    steps, completes, fades = [], [], []
    game.bus.subscribe(EVENT_CASCADE_STEP, lambda s, **kw: steps.append(kw))
    game.bus.subscribe(EVENT_CASCADE_COMPLETE, lambda s, **kw: completes.append(kw))
    game.bus.subscribe(
        EVENT_ANIMATION_START,
        lambda s, **kw: fades.append(kw['items']) if kw.get('kind') == 'fade' else None,
    )
    _swap(game, (0, 3), (0, 2))
    settle(game.bus, game.world)
    assert [step['depth'] for step in steps] == list(range(1, len(steps) + 1))
    assert len(completes) == 1
    assert completes[0]['depth'] == len(steps)
    assert fades[0] == [(0, 0), (0, 1), (0, 2)]
    state = get_or_create_cascade_state(game.world)
    assert not state.active and state.depth == 0


def test_existing_run_is_cleared_after_any_swap():
    # A run already on the board is picked up by the scan after an unrelated swap.
    game = build_game(overrides={(5, 1): 'red', (5, 2): 'red'})
    runs = find_runs(game.world)
    assert runs == [[(5, 0), (5, 1), (5, 2)]]
    cleared = []
    game.bus.subscribe(EVENT_MATCH_CLEARED, lambda s, **kw: cleared.append(kw))
    _swap(game, (0, 8), (0, 9))
    settle(game.bus, game.world)
    assert cleared and set(cleared[0]['positions']) >= {(5, 0), (5, 1), (5, 2)}
    assert find_runs(game.world) == []


def test_phases_during_cascade():
    game = build_game(overrides=THREE_IN_ROW)
    _swap(game, (0, 3), (0, 2))
    seen = set()
    for _ in range(3000):
        game.bus.emit(EVENT_TICK, dt=0.02)
        seen |= {state.phase for _, state in game.world.get_component(TileState)}
        if not board_busy(game.world):
            break
    assert TilePhase.CLEARING in seen
    assert TilePhase.FALLING in seen
    assert all(state.phase is TilePhase.IDLE for _, state in game.world.get_component(TileState))


def test_falling_tiles_form_second_cascade_step():
    game = build_game(
        overrides=FALLING_INTO_RUN,
        refills=('blue', 'green', 'blue', 'yellow', 'red', 'purple'),
    )
    assert find_runs(game.world) == []
    steps, completes, cleared = [], [], []
    game.bus.subscribe(EVENT_CASCADE_STEP, lambda s, **kw: steps.append(kw))
    game.bus.subscribe(EVENT_CASCADE_COMPLETE, lambda s, **kw: completes.append(kw))
    game.bus.subscribe(EVENT_MATCH_CLEARED, lambda s, **kw: cleared.append(kw['positions']))
    _swap(game, (0, 3), (0, 2))
    settle(game.bus, game.world)

    assert [s['depth'] for s in steps] == [1, 2]
    assert completes == [{'depth': 2}]
    assert cleared == [[(0, 0), (0, 1), (0, 2)], [(0, 1), (0, 2), (0, 3)]]
    assert [game.board.type_at(9, c) for c in range(4)] == ['blue', 'yellow', 'red', 'purple']
    assert board_is_full(game.world)
    assert find_runs(game.world) == []
