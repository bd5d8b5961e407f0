from dataclasses import dataclass

@dataclass(slots=True)
class ActiveSwitch:
    """False once the cell's tile is cleared and until it is refilled."""
    active: bool = True
