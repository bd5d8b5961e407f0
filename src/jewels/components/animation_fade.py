from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class FadeAnimation:
    """A matched tile fading out; alpha runs from 1 down to 0."""
    pos: Tuple[int, int]
    alpha: float = 1.0
