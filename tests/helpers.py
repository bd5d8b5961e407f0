from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Tuple

from esper import World

from jewels.components.active_switch import ActiveSwitch
from jewels.components.tile import TileType
from jewels.events.bus import EventBus, EVENT_TICK
from jewels.systems.animation import AnimationSystem
from jewels.systems.board import BoardSystem
from jewels.systems.board_ops import get_entity_at
from jewels.systems.bomb import BombSystem
from jewels.systems.cascade_state_utils import board_busy
from jewels.systems.match_resolution import MatchResolutionSystem
from jewels.systems.score import ScoreSystem
from jewels.world import create_world

COLORS = ['red', 'blue', 'green', 'yellow', 'purple']


class ScriptedRandom(random.Random):
    """Random whose choice() hands out queued picks before falling back to the seed."""

    def queue(self, *picks: str) -> "ScriptedRandom":
        self.picks = list(picks)
        return self

    def choice(self, seq):
        picks = getattr(self, "picks", None)
        if picks:
            return picks.pop(0)
        return super().choice(seq)


class DummyWindow:
    def __init__(self, width=800, height=800):
        self.width = width
        self.height = height


class FakeClock:
    def __init__(self) -> None:
        self.value = 0.0

    def advance(self, amount: float) -> None:
        self.value += amount

    def __call__(self) -> float:
        return self.value


@dataclass
class Game:
    bus: EventBus
    world: World
    board: BoardSystem
    clock: FakeClock
    score: ScoreSystem


def pattern_type(row: int, col: int) -> str:
    """Colour layout with no two equal neighbours in any row or column."""
    return COLORS[(row + 2 * col) % len(COLORS)]


def set_types(world: World, overrides: Dict[Tuple[int, int], str]) -> None:
    for (row, col), type_name in overrides.items():
        ent = get_entity_at(world, row, col)
        assert ent is not None, f"no cell at {(row, col)}"
        world.component_for_entity(ent, TileType).type_name = type_name
        world.component_for_entity(ent, ActiveSwitch).active = True


def apply_pattern(world: World, rows: int, cols: int, overrides: Dict[Tuple[int, int], str] | None = None) -> None:
    layout = {(r, c): pattern_type(r, c) for r in range(rows) for c in range(cols)}
    layout.update(overrides or {})
    set_types(world, layout)


def build_game(rows: int = 10, cols: int = 10, seed: int = 7, overrides=None, pattern: bool = True,
               refills=()) -> Game:
    bus = EventBus()
    world = create_world(bus, rng=random.Random(seed))
    clock = FakeClock()
    board = BoardSystem(world, bus, rows, cols, clock=clock)
    AnimationSystem(world, bus)
    MatchResolutionSystem(world, bus)
    BombSystem(world, bus)
    score = ScoreSystem(world, bus)
    if pattern:
        apply_pattern(world, rows, cols, overrides)
    if refills:
        # population is done, so later choice() calls are refills
        world.random = ScriptedRandom(seed).queue(*refills)
    return Game(bus=bus, world=world, board=board, clock=clock, score=score)


def drive(bus, ticks, dt=0.02):
    for _ in range(ticks):
        bus.emit(EVENT_TICK, dt=dt)


def settle(bus, world, max_ticks=3000, dt=0.02) -> int:
    """Tick until the board is idle again; return the number of ticks used."""
    for tick in range(1, max_ticks + 1):
        bus.emit(EVENT_TICK, dt=dt)
        if not board_busy(world):
            return tick
    raise AssertionError("board did not settle")
