from dataclasses import dataclass

@dataclass(slots=True)
class Score:
    """Singleton component holding the running score for the session."""
    value: int = 0
