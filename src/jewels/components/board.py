from dataclasses import dataclass

@dataclass(slots=True)
class Board:
    """Grid dimensions, carried by the single board entity."""
    rows: int
    cols: int
