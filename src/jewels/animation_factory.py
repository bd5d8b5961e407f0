from typing import Iterable, List, Tuple

from esper import World

from jewels.components.animation_fade import FadeAnimation
from jewels.components.animation_fall import FallAnimation
from jewels.components.animation_refill import RefillAnimation
from jewels.components.animation_swap import SwapAnimation
from jewels.components.duration import Duration
from jewels.components.board_position import BoardPosition
from jewels.components.tile_state import TilePhase, TileState
from jewels.constants import FADE_DURATION, FALL_DURATION, REFILL_DURATION, SWAP_DURATION

Cell = Tuple[int, int]


def set_tile_phase(
    world: World,
    positions: Iterable[Cell],
    phase: TilePhase,
    *,
    only_from: TilePhase | None = None,
) -> None:
    """Set the TileState phase of the cells at positions.

    With only_from, cells currently in another phase are left alone, so finishing one
    animation never resets a phase that a newer animation already claimed.
    """
    wanted = set(positions)
    if not wanted:
        return
    for ent, (pos, state) in world.get_components(BoardPosition, TileState):
        if (pos.row, pos.col) not in wanted:
            continue
        if only_from is not None and state.phase is not only_from:
            continue
        state.phase = phase


class AnimationFactory:
    """Spawns animation entities and marks the tiles they move with the matching phase."""

    def __init__(self, world: World):
        self.world = world

    def _spawn(self, component, duration: float) -> int:
        return self.world.create_entity(component, Duration(duration))

    def create_swap(self, src: Cell, dst: Cell, duration: float = SWAP_DURATION) -> int:
        ent = self._spawn(SwapAnimation(src=src, dst=dst), duration)
        set_tile_phase(self.world, (src, dst), TilePhase.SWAPPING)
        return ent

    def create_fade_group(self, positions: List[Cell], duration: float = FADE_DURATION) -> List[int]:
        ents = [self._spawn(FadeAnimation(pos=pos), duration) for pos in positions]
        set_tile_phase(self.world, positions, TilePhase.CLEARING)
        return ents

    def create_fall_group(self, moves: List[dict], duration: float = FALL_DURATION) -> List[int]:
        # moves carry 'from'/'to' cells as emitted with EVENT_GRAVITY_APPLIED
        ents = [self._spawn(FallAnimation(src=m['from'], dst=m['to']), duration) for m in moves]
        set_tile_phase(self.world, [m['to'] for m in moves], TilePhase.FALLING)
        return ents

    def create_refill_group(self, positions: List[Cell], duration: float = REFILL_DURATION) -> List[int]:
        ents = [self._spawn(RefillAnimation(pos=pos), duration) for pos in positions]
        set_tile_phase(self.world, positions, TilePhase.FALLING)
        return ents
