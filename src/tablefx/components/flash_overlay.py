from dataclasses import dataclass

@dataclass(slots=True)
class FlashOverlay:
    """Table-wide tint shown briefly when a winner is celebrated."""
    width: float = 0.0
    height: float = 0.0
