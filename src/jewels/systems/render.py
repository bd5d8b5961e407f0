from jewels.events.bus import (EventBus, EVENT_TILE_SELECTED, EVENT_TILE_DESELECTED,
                               EVENT_TILE_SWAP_REQUEST, EVENT_TILE_SWAP_FINALIZE)
from jewels.components.tile_types import TileTypes
from jewels.rendering.context import RenderContext, build_render_context
from jewels.rendering.board_renderer import BoardRenderer
from jewels.rendering.score_renderer import ScoreRenderer
from jewels.systems.board_ops import board_dimensions, get_tile_registry
from jewels.constants import GRID_ROWS, GRID_COLS, TILE_PADDING
from jewels.ui.layout import compute_board_geometry
from esper import World


class RenderSystem:
    def __init__(self, world: World, event_bus: EventBus, window):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self.event_bus.subscribe(EVENT_TILE_SELECTED, self.on_tile_selected)
        self.event_bus.subscribe(EVENT_TILE_DESELECTED, self.on_tile_deselected)
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)
        self.event_bus.subscribe(EVENT_TILE_SWAP_FINALIZE, self.on_swap_finalize)
        self.selected = None
        self._tile_size, self._board_left, self._board_bottom = self._geometry()
        self._render_ctx: RenderContext | None = None
        self._last_tile_layout: dict[tuple[int, int], dict] = {}
        self._board_renderer = BoardRenderer(self, padding=TILE_PADDING)
        self._score_renderer = ScoreRenderer(self.world)

    def notify_resize(self, width: int, height: int):
        self._tile_size, self._board_left, self._board_bottom = self._geometry()

    def _dimensions(self):
        return board_dimensions(self.world) or (GRID_ROWS, GRID_COLS)

    def _geometry(self):
        rows, cols = self._dimensions()
        return compute_board_geometry(self.window.width, self.window.height, rows, cols)

    def on_tile_selected(self, sender, **kwargs):
        self.selected = (kwargs.get('row'), kwargs.get('col'))

    def on_tile_deselected(self, sender, **kwargs):
        self.selected = None

    def on_swap_request(self, sender, **kwargs):
        # Clear selection immediately when a swap begins
        self.selected = None

    def on_swap_finalize(self, sender, **kwargs):
        self.selected = None

    def process(self):
        # Local import keeps tests headless without creating a window.
        import arcade
        # Headless safeguard: without an active Arcade window skip draw calls but still build the layout cache.
        headless = False
        try:
            arcade.get_window()
        except Exception:
            headless = True
        # Board size may change after construction (tests build small boards), so refresh every frame.
        self.notify_resize(self.window.width, self.window.height)
        rows, cols = self._dimensions()
        ctx = build_render_context(
            world=self.world,
            window_width=self.window.width,
            window_height=self.window.height,
            rows=rows,
            cols=cols,
            tile_size=self._tile_size,
            board_left=self._board_left,
            board_bottom=self._board_bottom,
        )
        self._render_ctx = ctx
        self._board_renderer.render(arcade, ctx, self._registry(), headless=headless)
        if not headless:
            self._score_renderer.render(arcade, ctx)

    def tile_layout(self) -> dict[tuple[int, int], dict]:
        """Per-cell draw data from the last process() call."""
        return dict(self._last_tile_layout)

    @property
    def tile_size(self) -> int:
        return self._tile_size

    def _registry(self) -> TileTypes:
        return get_tile_registry(self.world)
