import logging
from typing import List, Sequence, Tuple
from esper import World
from jewels.events.bus import (EventBus, EVENT_TILE_SWAP_FINALIZE, EVENT_MATCH_FOUND,
                               EVENT_MATCH_CLEARED, EVENT_GRAVITY_APPLIED, EVENT_REFILL_COMPLETED,
                               EVENT_CASCADE_STEP, EVENT_CASCADE_COMPLETE, EVENT_ANIMATION_START,
                               EVENT_ANIMATION_COMPLETE, EVENT_BOMB_CREATED, EVENT_BOMB_DETONATED,
                               EVENT_TICK)
from jewels.systems.board_ops import (clear_tiles_with_cascade, convert_to_bomb, refill_inactive_tiles,
                                      resolve_matches)
from jewels.systems.cascade_state_utils import get_or_create_cascade_state

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class MatchResolutionSystem:
    """Runs the clear -> drop -> refill -> rescan pipeline after swaps and bomb blasts.

    Each pass that finds matches is one cascade step; the chain ends with
    EVENT_CASCADE_COMPLETE once a scan after a refill comes up empty.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_TILE_SWAP_FINALIZE, self.on_swap_finalize)
        self.event_bus.subscribe(EVENT_BOMB_DETONATED, self.on_bomb_detonated)
        self.event_bus.subscribe(EVENT_ANIMATION_COMPLETE, self.on_animation_complete)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.pending_match_positions: List[Position] = []
        self._pending_reason = "swap"
        self._pending_rescans = 0

    def on_swap_finalize(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        # The selected tile now sits at dst, so it gets first claim on a bomb.
        self._resolve(reason="swap", candidates=(dst, src))

    def on_bomb_detonated(self, sender, **kwargs):
        positions = kwargs.get('positions') or []
        if not positions:
            return
        state = get_or_create_cascade_state(self.world)
        state.active = True
        state.depth = 1
        state.source = "bomb"
        self._start_clear(sorted(positions), reason="bomb", depth=1)

    def _resolve(self, reason: str, candidates: Sequence[Position] = ()):
        state = get_or_create_cascade_state(self.world)
        outcome = resolve_matches(self.world, candidates)
        if not outcome:
            if state.active:
                self._complete_cascade()
            return
        for pos in outcome.bombs:
            if convert_to_bomb(self.world, pos):
                run_length = max((len(run) for run in outcome.runs if pos in run), default=0)
                logger.info("Bomb created at %s from a run of %d", pos, run_length)
                self.event_bus.emit(EVENT_BOMB_CREATED, row=pos[0], col=pos[1], run_length=run_length)
        if state.active:
            depth = state.depth + 1
        else:
            depth = 1
            state.active = True
            state.source = reason
        state.depth = depth
        self.event_bus.emit(
            EVENT_MATCH_FOUND,
            positions=outcome.clear,
            size=len(outcome.clear),
            bombs=list(outcome.bombs),
            reason=reason,
        )
        self._start_clear(outcome.clear, reason=reason, depth=depth)

    def _start_clear(self, positions: List[Position], reason: str, depth: int):
        self.pending_match_positions = positions
        self._pending_reason = reason
        logger.debug("Cascade step %d (%s): clearing %d tiles", depth, reason, len(positions))
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=depth, positions=positions, reason=reason)
        self.event_bus.emit(EVENT_ANIMATION_START, kind='fade', items=positions)

    def _complete_cascade(self):
        state = get_or_create_cascade_state(self.world)
        depth = state.depth
        state.active = False
        state.depth = 0
        state.source = None
        logger.debug("Cascade complete after %d step(s)", depth)
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=depth)

    def on_animation_complete(self, sender, **kwargs):
        kind = kwargs.get('kind')
        items = kwargs.get('items', [])
        if kind == 'fade':
            positions = items or self.pending_match_positions
            self._after_fade(positions)
        elif kind == 'fall':
            self._after_fall(items)
        elif kind == 'refill':
            self._pending_rescans += 1

    def on_tick(self, sender, **kwargs):
        # Rescans wait for the next tick so the refill animation fully unwinds first.
        if not self._pending_rescans:
            return
        pending = self._pending_rescans
        self._pending_rescans = 0
        for _ in range(pending):
            self._resolve(reason="cascade")

    def _after_fade(self, positions):
        if not positions:
            return
        # Deterministic ordering for events/tests
        positions = sorted(positions)
        typed, moves, cascades, new_tiles = clear_tiles_with_cascade(self.world, positions)
        self.pending_match_positions = []
        self.event_bus.emit(
            EVENT_MATCH_CLEARED,
            positions=[(row, col) for row, col, _ in typed],
            types=sorted(typed),
            reason=self._pending_reason,
        )
        if moves:
            fall_payload = [
                {'from': move.source, 'to': move.target, 'type_name': move.type_name}
                for move in moves
            ]
            self.event_bus.emit(EVENT_GRAVITY_APPLIED, cascades=cascades)
            self.event_bus.emit(EVENT_ANIMATION_START, kind='fall', items=fall_payload)
            return
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, cascades=0)
        if new_tiles:
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=new_tiles)
            self.event_bus.emit(EVENT_ANIMATION_START, kind='refill', items=new_tiles)
        else:
            self._pending_rescans += 1

    def _after_fall(self, items):
        new_tiles = refill_inactive_tiles(self.world)
        if new_tiles:
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=new_tiles)
            self.event_bus.emit(EVENT_ANIMATION_START, kind='refill', items=new_tiles)
        else:
            self._pending_rescans += 1
