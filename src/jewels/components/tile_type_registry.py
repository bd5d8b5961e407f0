from dataclasses import dataclass

@dataclass(slots=True)
class TileTypeRegistry:
    """Tag for the single entity that also carries TileTypes."""
