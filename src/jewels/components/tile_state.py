from dataclasses import dataclass
from enum import Enum, auto


class TilePhase(Enum):
    IDLE = auto()
    SWAPPING = auto()
    FALLING = auto()
    CLEARING = auto()


@dataclass(slots=True)
class TileState:
    """What a cell's tile is doing right now; input waits for every cell to be IDLE."""
    phase: TilePhase = TilePhase.IDLE
