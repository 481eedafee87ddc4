from dataclasses import dataclass

@dataclass(slots=True)
class SeatStatus:
    """Per-seat flags read from the rules engine on each phase transition."""
    seat: int
    folded: bool = False
    all_in: bool = False
    active: bool = True
