from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class RefillAnimation:
    """A freshly spawned tile sliding into pos from above the board."""
    pos: Tuple[int, int]
    linear: float = 0.0
