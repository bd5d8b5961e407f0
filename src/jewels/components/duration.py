from dataclasses import dataclass

@dataclass(slots=True)
class Duration:
    """Length in seconds of the animation on the same entity."""
    value: float
