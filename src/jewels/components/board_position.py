from dataclasses import dataclass

@dataclass(slots=True)
class BoardPosition:
    """Grid cell coordinates. Row 0 is the bottom row.

    Cell entities keep their position for the whole game; tiles move by copying
    TileType into another cell.
    """
    row: int
    col: int
