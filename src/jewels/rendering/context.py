from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from esper import World

from jewels.components.animation_fade import FadeAnimation
from jewels.components.animation_fall import FallAnimation
from jewels.components.animation_refill import RefillAnimation
from jewels.components.animation_swap import SwapAnimation
from jewels.components.board_position import BoardPosition

Cell = Tuple[int, int]


@dataclass(slots=True)
class AnimationIndex:
    """Running animations keyed by the cell they draw into."""

    swaps: Dict[Cell, SwapAnimation] = field(default_factory=dict)
    falls: Dict[Cell, FallAnimation] = field(default_factory=dict)  # keyed by destination
    refills: Dict[Cell, RefillAnimation] = field(default_factory=dict)
    fades: Dict[Cell, FadeAnimation] = field(default_factory=dict)

    @classmethod
    def collect(cls, world: World) -> AnimationIndex:
        index = cls()
        for _, swap in world.get_component(SwapAnimation):
            index.swaps[swap.src] = swap
            index.swaps[swap.dst] = swap
        index.falls = {fall.dst: fall for _, fall in world.get_component(FallAnimation)}
        index.refills = {refill.pos: refill for _, refill in world.get_component(RefillAnimation)}
        index.fades = {fade.pos: fade for _, fade in world.get_component(FadeAnimation)}
        return index


@dataclass(slots=True)
class RenderContext:
    """Geometry and animation lookups for one frame."""

    world: World
    window_width: int
    window_height: int
    rows: int
    cols: int
    tile_size: int
    board_left: float
    board_bottom: float
    cells: Dict[Cell, Tuple[int, float, float]]  # (row, col) -> (entity, centre x, centre y)
    animations: AnimationIndex

    @property
    def board_width(self) -> float:
        return self.cols * self.tile_size

    @property
    def board_height(self) -> float:
        return self.rows * self.tile_size

    @property
    def board_top(self) -> float:
        return self.board_bottom + self.board_height

    def center(self, cell: Cell) -> Tuple[float, float]:
        _, x, y = self.cells[cell]
        return x, y


def build_render_context(
    world: World,
    window_width: int,
    window_height: int,
    rows: int,
    cols: int,
    tile_size: int,
    board_left: float,
    board_bottom: float,
) -> RenderContext:
    half = tile_size / 2
    cells = {
        (pos.row, pos.col): (
            entity,
            board_left + pos.col * tile_size + half,
            board_bottom + pos.row * tile_size + half,
        )
        for entity, pos in world.get_component(BoardPosition)
    }
    return RenderContext(
        world=world,
        window_width=window_width,
        window_height=window_height,
        rows=rows,
        cols=cols,
        tile_size=tile_size,
        board_left=board_left,
        board_bottom=board_bottom,
        cells=cells,
        animations=AnimationIndex.collect(world),
    )
