from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from esper import World

from jewels.components.active_switch import ActiveSwitch
from jewels.components.board import Board
from jewels.components.board_position import BoardPosition
from jewels.components.tile import TileType
from jewels.components.tile_type_registry import TileTypeRegistry
from jewels.components.tile_types import TileTypes
from jewels.constants import BOMB_MATCH, BOMB_RADIUS, BOMB_TYPE, MIN_MATCH

Position = Tuple[int, int]
TypeEntry = Tuple[int, int, str]


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    type_name: str


@dataclass(slots=True)
class MatchOutcome:
    """Result of a match scan: cells to clear and cells converted into bombs."""

    clear: List[Position] = field(default_factory=list)
    bombs: List[Position] = field(default_factory=list)
    runs: List[List[Position]] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.clear or self.bombs)


def get_tile_registry(world: World) -> TileTypes:
    for entity, _ in world.get_component(TileTypeRegistry):
        return world.component_for_entity(entity, TileTypes)
    raise RuntimeError("TileTypes definitions not found")


def board_dimensions(world: World) -> Tuple[int, int] | None:
    for _, board in world.get_component(Board):
        return board.rows, board.cols
    return None


def get_entity_at(world: World, row: int, col: int) -> int | None:
    for entity, position in world.get_component(BoardPosition):
        if position.row == row and position.col == col:
            return entity
    return None


def position_entity_map(world: World) -> Dict[Position, int]:
    return {(pos.row, pos.col): entity for entity, pos in world.get_component(BoardPosition)}


def is_adjacent(a: Position, b: Position) -> bool:
    ar, ac = a
    br, bc = b
    return abs(ar - br) + abs(ac - bc) == 1


def active_tile_type_map(world: World) -> Dict[Position, str]:
    """Return mapping of active tile positions to their type names."""
    mapping: Dict[Position, str] = {}
    for entity, position in world.get_component(BoardPosition):
        try:
            switch: ActiveSwitch = world.component_for_entity(entity, ActiveSwitch)
            if not switch.active:
                continue
            tile: TileType = world.component_for_entity(entity, TileType)
        except KeyError:
            continue
        mapping[(position.row, position.col)] = tile.type_name
    return mapping


def tile_type_at(world: World, pos: Position) -> str | None:
    entity = get_entity_at(world, pos[0], pos[1])
    if entity is None:
        return None
    try:
        if not world.component_for_entity(entity, ActiveSwitch).active:
            return None
        return world.component_for_entity(entity, TileType).type_name
    except KeyError:
        return None


def is_bomb_at(world: World, pos: Position) -> bool:
    return tile_type_at(world, pos) == BOMB_TYPE


def choose_spawn_type(
    placed: Dict[Position, str],
    pos: Position,
    choices: Sequence[str],
    rng: random.Random,
) -> str:
    """Pick a type for pos that does not complete a run of three with already placed tiles.

    Tiles are placed bottom-up, left-to-right, so only the two cells to the left and
    the two cells below can combine with pos.
    """
    row, col = pos
    available = list(choices)
    left1 = placed.get((row, col - 1))
    left2 = placed.get((row, col - 2))
    if left1 is not None and left1 == left2:
        available = [t for t in available if t != left1]
    down1 = placed.get((row - 1, col))
    down2 = placed.get((row - 2, col))
    if down1 is not None and down1 == down2:
        available = [t for t in available if t != down1]
    if not available:
        available = list(choices)
    return rng.choice(available)


def swap_tile_types(world: World, src: Position, dst: Position) -> bool:
    """Swap the TileType values for two active tile entities."""

    src_entity = get_entity_at(world, src[0], src[1])
    dst_entity = get_entity_at(world, dst[0], dst[1])
    if src_entity is None or dst_entity is None:
        return False
    try:
        src_switch: ActiveSwitch = world.component_for_entity(src_entity, ActiveSwitch)
        dst_switch: ActiveSwitch = world.component_for_entity(dst_entity, ActiveSwitch)
        if not (src_switch.active and dst_switch.active):
            return False
        src_tile: TileType = world.component_for_entity(src_entity, TileType)
        dst_tile: TileType = world.component_for_entity(dst_entity, TileType)
    except KeyError:
        return False
    src_tile.type_name, dst_tile.type_name = dst_tile.type_name, src_tile.type_name
    return True


def _scan_line(types: Dict[Position, str], line: Iterable[Position]) -> List[List[Position]]:
    runs: List[List[Position]] = []
    run: List[Position] = []
    last_type = None
    for pos in line:
        tval = types.get(pos)
        if tval == BOMB_TYPE:
            tval = None
        if tval is not None and tval == last_type:
            run.append(pos)
        else:
            if len(run) >= MIN_MATCH:
                runs.append(run)
            run = [pos] if tval is not None else []
            last_type = tval
    if len(run) >= MIN_MATCH:
        runs.append(run)
    return runs


def find_runs(world: World) -> List[List[Position]]:
    """Return every horizontal and vertical run of MIN_MATCH or more same-coloured tiles.

    Bombs and empty cells break runs. Rows are scanned before columns.
    """
    types = active_tile_type_map(world)
    dims = board_dimensions(world)
    if not dims or not types:
        return []
    rows, cols = dims
    runs: List[List[Position]] = []
    for r in range(rows):
        runs.extend(_scan_line(types, ((r, c) for c in range(cols))))
    for c in range(cols):
        runs.extend(_scan_line(types, ((r, c) for r in range(rows))))
    return runs


def find_all_matches(world: World) -> List[List[Position]]:
    """Detect all runs and merge the ones sharing a cell into groups."""
    matches = find_runs(world)
    if not matches:
        return []
    groups = [set(m) for m in matches]
    merged: List[Set[Position]] = []
    while groups:
        first = groups.pop()
        changed = True
        while changed:
            changed = False
            for g in groups[:]:
                if first & g:
                    first |= g
                    groups.remove(g)
                    changed = True
        merged.append(first)
    return [sorted(list(group)) for group in merged]


def resolve_matches(world: World, candidates: Sequence[Position] = ()) -> MatchOutcome:
    """Scan the board and decide which cells clear and which become bombs.

    A run of BOMB_MATCH or more containing one of ``candidates`` turns that
    candidate into a bomb instead of clearing it. Earlier candidates win when a
    run holds more than one, and a cell is converted at most once.
    """
    runs = find_runs(world)
    if not runs:
        return MatchOutcome()
    bombs: List[Position] = []
    for run in runs:
        if len(run) < BOMB_MATCH:
            continue
        for candidate in candidates:
            if candidate in run:
                if candidate not in bombs:
                    bombs.append(candidate)
                break
    matched = {pos for run in runs for pos in run}
    clear = sorted(matched - set(bombs))
    return MatchOutcome(clear=clear, bombs=bombs, runs=runs)


def convert_to_bomb(world: World, pos: Position) -> bool:
    entity = get_entity_at(world, pos[0], pos[1])
    if entity is None:
        return False
    try:
        switch: ActiveSwitch = world.component_for_entity(entity, ActiveSwitch)
        tile: TileType = world.component_for_entity(entity, TileType)
    except KeyError:
        return False
    if not switch.active:
        return False
    tile.type_name = BOMB_TYPE
    return True


def blast_area(world: World, row: int, col: int, radius: int = BOMB_RADIUS) -> List[Position]:
    """Active cells within Chebyshev distance ``radius`` of (row, col), clipped to the board."""
    types = active_tile_type_map(world)
    return [
        (r, c)
        for r in range(row - radius, row + radius + 1)
        for c in range(col - radius, col + radius + 1)
        if (r, c) in types
    ]


def clear_tiles_with_cascade(world: World, positions: List[Position], *, refill: bool = True):
    """Clear tiles at positions, apply gravity/refill, and return board change metadata.

    Returns (typed, moves, cascades, new_tiles). When tiles fall, refilling is left
    to the caller so the fall can be animated first.
    """
    if not positions:
        return [], [], 0, []
    typed: List[TypeEntry] = []
    for row, col in positions:
        entity = get_entity_at(world, row, col)
        if entity is None:
            continue
        tile_switch: ActiveSwitch = world.component_for_entity(entity, ActiveSwitch)
        if not tile_switch.active:
            continue
        tile_type: TileType = world.component_for_entity(entity, TileType)
        typed.append((row, col, tile_type.type_name))
        tile_switch.active = False
    moves, cascades = compute_gravity_moves(world)
    new_tiles: List[Position] = []
    if moves:
        apply_gravity_moves(world, moves)
    elif refill:
        new_tiles = refill_inactive_tiles(world)
    return typed, moves, cascades, new_tiles


def compute_gravity_moves(world: World) -> Tuple[List[GravityMove], int]:
    dims = board_dimensions(world)
    if dims is None:
        return [], 0
    rows, cols = dims
    entities = position_entity_map(world)
    moves: List[GravityMove] = []
    cascades = 0
    for col in range(cols):
        filled_rows: List[int] = []
        for row in range(rows):
            entity = entities.get((row, col))
            if entity is None:
                continue
            tile_switch: ActiveSwitch = world.component_for_entity(entity, ActiveSwitch)
            if tile_switch.active:
                filled_rows.append(row)
        column_moved = False
        for target_index, original_row in enumerate(filled_rows):
            if original_row == target_index:
                continue
            entity = entities[(original_row, col)]
            tile_type = world.component_for_entity(entity, TileType)
            moves.append(GravityMove(source=(original_row, col), target=(target_index, col), type_name=tile_type.type_name))
            column_moved = True
        if column_moved:
            cascades += 1
    return moves, cascades


def apply_gravity_moves(world: World, moves: List[GravityMove]) -> None:
    entities = position_entity_map(world)
    for move in moves:
        src_entity = entities.get(move.source)
        dst_entity = entities.get(move.target)
        if src_entity is None or dst_entity is None:
            continue
        src_switch: ActiveSwitch = world.component_for_entity(src_entity, ActiveSwitch)
        dst_switch: ActiveSwitch = world.component_for_entity(dst_entity, ActiveSwitch)
        if not src_switch.active:
            continue
        src_tile: TileType = world.component_for_entity(src_entity, TileType)
        dst_tile: TileType = world.component_for_entity(dst_entity, TileType)
        dst_tile.type_name = src_tile.type_name
        dst_switch.active = True
        src_switch.active = False


def refill_inactive_tiles(world: World) -> List[Position]:
    """Give every empty cell a random spawnable type. Refills may form new matches."""
    spawned: List[Position] = []
    registry = get_tile_registry(world)
    choices = registry.spawnable_types()
    rng = world_rng(world)
    for entity, position in sorted(
        world.get_component(BoardPosition), key=lambda item: (item[1].row, item[1].col)
    ):
        tile_switch: ActiveSwitch = world.component_for_entity(entity, ActiveSwitch)
        if tile_switch.active:
            continue
        tile_type: TileType = world.component_for_entity(entity, TileType)
        tile_type.type_name = rng.choice(choices)
        tile_switch.active = True
        spawned.append((position.row, position.col))
    return spawned


def board_is_full(world: World) -> bool:
    """True when every cell of the board holds exactly one active tile."""
    dims = board_dimensions(world)
    if dims is None:
        return False
    rows, cols = dims
    seen: Set[Position] = set()
    for entity, position in world.get_component(BoardPosition):
        key = (position.row, position.col)
        if key in seen:
            return False
        seen.add(key)
        try:
            if not world.component_for_entity(entity, ActiveSwitch).active:
                return False
        except KeyError:
            return False
    return len(seen) == rows * cols


def world_rng(world: World) -> random.Random:
    candidate = getattr(world, "random", None)
    if isinstance(candidate, random.Random):
        return candidate
    return random.Random()
