from dataclasses import dataclass

@dataclass(slots=True)
class Visibility:
    """Whether the visual is drawn at all (dealt/in play vs. parked)."""
    active: bool = False
