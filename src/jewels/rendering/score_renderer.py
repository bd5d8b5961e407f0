from __future__ import annotations

from typing import TYPE_CHECKING

from jewels.components.score import Score
from jewels.constants import SCORE_BAR_HEIGHT

if TYPE_CHECKING:
    from esper import World
    from jewels.rendering.context import RenderContext

FONT_SIZE = 20


def score_text(world: World) -> str:
    for _, score in world.get_component(Score):
        return f"Score: {score.value}"
    return "Score: 0"


class ScoreRenderer:
    """Draws the score line centred in the bar above the board."""

    def __init__(self, world: World):
        self.world = world

    def render(self, arcade, ctx: RenderContext) -> None:
        text = score_text(self.world)
        x = ctx.window_width / 2
        y = ctx.board_top + SCORE_BAR_HEIGHT / 2
        arcade.draw_text(
            text,
            x,
            y,
            arcade.color.WHITE,
            FONT_SIZE,
            anchor_x="center",
            anchor_y="center",
        )
