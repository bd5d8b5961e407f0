from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class FallAnimation:
    """A tile dropping from src to dst after the cells below it were cleared."""
    src: Tuple[int, int]
    dst: Tuple[int, int]
    linear: float = 0.0
