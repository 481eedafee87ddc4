from dataclasses import dataclass

@dataclass(slots=True)
class SeatPanel:
    """Tag for a seat's name plate entity; its Transform is pulsed on a win."""
    seat: int
    name: str = ""
