from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

from jewels.components.active_switch import ActiveSwitch
from jewels.components.tile import TileType
from jewels.constants import BOMB_TYPE

if TYPE_CHECKING:
    from jewels.components.tile_types import TileTypes
    from jewels.rendering.context import RenderContext
    from jewels.systems.render import RenderSystem

SELECTION_COLOR = (255, 255, 255)
SELECTION_WIDTH = 3
# Refilled tiles start this many tile heights above their cell.
REFILL_DROP = 1.2


def ease_in_out(p: float) -> float:
    if p < 0.5:
        return 2 * p * p
    return -2 * p * p + 4 * p - 1


def _lerp(a: Tuple[float, float], b: Tuple[float, float], p: float) -> Tuple[float, float]:
    return a[0] + (b[0] - a[0]) * p, a[1] + (b[1] - a[1]) * p


class BoardRenderer:
    """Draws jewels as filled squares and bombs as black circles, applying animation offsets."""

    def __init__(self, render_system: RenderSystem, padding: int = 2):
        self._rs = render_system
        self._padding = padding

    def _draw_center(self, ctx: RenderContext, cell) -> Tuple[float, float]:
        """Where the tile in cell is drawn this frame, following whichever animation moves it."""
        anims = ctx.animations
        x, y = ctx.center(cell)
        swap = anims.swaps.get(cell)
        if swap is not None:
            # Types are exchanged only when the swap commits, so each cell still
            # shows its own tile while it travels towards the partner cell.
            other = swap.dst if cell == swap.src else swap.src
            x, y = _lerp(ctx.center(cell), ctx.center(other), swap.progress)
        fall = anims.falls.get(cell)
        if fall is not None:
            x, y = _lerp(ctx.center(fall.src), ctx.center(fall.dst), ease_in_out(fall.linear))
        refill = anims.refills.get(cell)
        if refill is not None:
            start = (x, y + ctx.tile_size * REFILL_DROP)
            x, y = _lerp(start, (x, y), ease_in_out(refill.linear))
        return x, y

    def render(self, arcade, ctx: RenderContext, registry: TileTypes, headless: bool) -> None:
        rs = self._rs
        world = ctx.world
        layout: dict = {}
        outline = None
        size = max(ctx.tile_size - self._padding, 4)
        half = size / 2

        for cell, (ent, _, _) in ctx.cells.items():
            try:
                if not world.component_for_entity(ent, ActiveSwitch).active:
                    continue
                type_name = world.component_for_entity(ent, TileType).type_name
            except KeyError:
                continue
            is_bomb = type_name == BOMB_TYPE
            x, y = self._draw_center(ctx, cell)
            fade = ctx.animations.fades.get(cell)
            alpha = fade.alpha if fade is not None else 1.0
            layout[cell] = {"entity": ent, "center": (x, y), "size": size, "alpha": alpha, "bomb": is_bomb}
            if rs.selected == cell:
                outline = (x, y, is_bomb)
            if headless:
                continue
            fill = (*registry.background_for(type_name), int(255 * alpha))
            if is_bomb:
                arcade.draw_circle_filled(x, y, half, fill)
            else:
                arcade.draw_lrbt_rectangle_filled(x - half, x + half, y - half, y + half, fill)

        rs._last_tile_layout = layout
        if headless or outline is None:
            return
        x, y, is_bomb = outline
        if is_bomb:
            arcade.draw_circle_outline(x, y, half, SELECTION_COLOR, SELECTION_WIDTH)
        else:
            arcade.draw_lrbt_rectangle_outline(x - half, x + half, y - half, y + half, SELECTION_COLOR, SELECTION_WIDTH)
