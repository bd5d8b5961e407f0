from dataclasses import dataclass, field
from typing import Dict, List, Tuple

RGB = Tuple[int, int, int]


@dataclass(slots=True)
class TileTypes:
    """Palette of every drawable tile type and the subset that may spawn at random.

    The bomb is registered here so it can be drawn, but is left out of
    ``spawnable`` and therefore only appears through a 5-run.
    """
    types: Dict[str, RGB]
    spawnable: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        # dict.fromkeys keeps first-seen order while dropping repeats
        known = [name for name in dict.fromkeys(self.spawnable) if name in self.types]
        self.spawnable = known or list(self.types)

    def background_for(self, type_name: str) -> RGB:
        return self.types[type_name]

    def spawnable_types(self) -> List[str]:
        return list(self.spawnable)
