from dataclasses import dataclass

@dataclass(slots=True)
class TileType:
    """Name of the tile in a cell: a jewel colour or the bomb type.

    Colours are looked up through the TileTypes registry at draw time.
    """
    type_name: str
