import logging
from time import monotonic
from typing import Callable, Dict, Optional, Tuple
from esper import World
from jewels.events.bus import (EventBus, EVENT_TILE_CLICK, EVENT_TILE_SELECTED, EVENT_TILE_DESELECTED,
                               EVENT_TILE_SWAP_REQUEST, EVENT_TILE_SWAP_FINALIZE, EVENT_TILE_SWAP_DO,
                               EVENT_MOUSE_PRESS, EVENT_BOMB_ACTIVATE_REQUEST)
from jewels.components.active_switch import ActiveSwitch
from jewels.components.board import Board
from jewels.components.board_position import BoardPosition
from jewels.components.tile import TileType
from jewels.components.tile_state import TileState
from jewels.constants import DOUBLE_CLICK_THRESHOLD, GRID_COLS, GRID_ROWS
from jewels.systems.board_ops import (choose_spawn_type, get_entity_at, get_tile_registry, is_adjacent,
                                      is_bomb_at, swap_tile_types, world_rng)
from jewels.systems.cascade_state_utils import board_busy

logger = logging.getLogger(__name__)

# Arcade uses 4 for the right mouse button (arcade.MOUSE_BUTTON_RIGHT)
RIGHT_BUTTON = 4


class BoardSystem:
    """Owns the grid: populates it, tracks the selection and turns clicks into swaps or bomb activations."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rows: int = GRID_ROWS,
        cols: int = GRID_COLS,
        *,
        clock: Callable[[], float] | None = None,
        double_click_threshold: float = DOUBLE_CLICK_THRESHOLD,
    ):
        self.world = world
        self.event_bus = event_bus
        self.board_entity = self.world.create_entity()
        self.world.add_component(self.board_entity, Board(rows=rows, cols=cols))
        self.selected: Optional[Tuple[int,int]] = None
        self._clock = clock or monotonic
        self.double_click_threshold = double_click_threshold
        self._last_bomb_click: Optional[Tuple[Tuple[int,int], float]] = None
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_TILE_SWAP_DO, self.on_swap_do)
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self._init_board()

    def _init_board(self):
        board: Board = self.world.component_for_entity(self.board_entity, Board)
        choices = get_tile_registry(self.world).spawnable_types()
        rng = world_rng(self.world)
        placed: Dict[Tuple[int,int], str] = {}
        for r in range(board.rows):
            for c in range(board.cols):
                type_name = choose_spawn_type(placed, (r, c), choices, rng)
                placed[(r, c)] = type_name
                self.world.create_entity(
                    BoardPosition(row=r, col=c),
                    TileType(type_name=type_name),
                    ActiveSwitch(active=True),
                    TileState(),
                )
        logger.debug("Populated %dx%d board", board.rows, board.cols)

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        # Input is ignored while anything on the board is moving.
        if board_busy(self.world):
            return
        pos = (row, col)
        if is_bomb_at(self.world, pos) and self._bomb_clicked(pos):
            return
        if self.selected is None:
            self._select(pos)
        elif self.selected == pos:
            self._deselect(reason='reclick')
        elif is_adjacent(self.selected, pos):
            src = self.selected
            self.selected = None
            if is_bomb_at(self.world, src):
                self._activate_bomb(src, trigger='neighbor_click')
                return
            logger.debug("Swap requested %s -> %s", src, pos)
            # Animation system plays the swap; the board commits it on EVENT_TILE_SWAP_DO.
            self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=pos)
        else:
            self._select(pos)

    def _bomb_clicked(self, pos: Tuple[int,int]) -> bool:
        """Handle a click on a bomb; return True when it set the bomb off."""
        now = self._clock()
        last = self._last_bomb_click
        self._last_bomb_click = (pos, now)
        if last is not None and last[0] == pos and (now - last[1]) < self.double_click_threshold:
            self._activate_bomb(pos, trigger='double_click')
            return True
        if self.selected == pos:
            self._activate_bomb(pos, trigger='selected_click')
            return True
        return False

    def _activate_bomb(self, pos: Tuple[int,int], trigger: str):
        self.selected = None
        self._last_bomb_click = None
        self.event_bus.emit(EVENT_TILE_DESELECTED, reason='bomb', prev_row=pos[0], prev_col=pos[1])
        self.event_bus.emit(EVENT_BOMB_ACTIVATE_REQUEST, row=pos[0], col=pos[1], trigger=trigger)

    def _select(self, pos: Tuple[int,int]):
        self.selected = pos
        self.event_bus.emit(EVENT_TILE_SELECTED, row=pos[0], col=pos[1])

    def _deselect(self, reason: str):
        prev = self.selected
        if prev is None:
            return
        self.selected = None
        self.event_bus.emit(EVENT_TILE_DESELECTED, reason=reason, prev_row=prev[0], prev_col=prev[1])

    def on_mouse_press(self, sender, **kwargs):
        # Right-click always clears the current selection.
        if kwargs.get('button') != RIGHT_BUTTON:
            return
        self._deselect(reason='right_click')

    def on_swap_do(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        # The swap commits whether or not it forms a match.
        swap_tile_types(self.world, src, dst)
        self.event_bus.emit(EVENT_TILE_SWAP_FINALIZE, src=src, dst=dst)

    def _get_entity_at(self, row: int, col: int):
        return get_entity_at(self.world, row, col)

    def type_at(self, row: int, col: int) -> str | None:
        ent = self._get_entity_at(row, col)
        if ent is None:
            return None
        return self.world.component_for_entity(ent, TileType).type_name
