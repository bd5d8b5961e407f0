from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class CascadeState:
    """Tracks a board resolution chain (swap, bomb blast and the cascades they trigger)."""

    active: bool = False
    depth: int = 0
    source: Optional[str] = None
