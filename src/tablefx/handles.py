from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

Point = Tuple[float, float]


@dataclass(slots=True)
class SeatHandles:
    """Entity handles and resting positions for one seat."""
    seat: int
    hole_cards: List[int]
    hole_positions: List[Point]
    panel: Optional[int] = None
    panel_position: Point = (0.0, 0.0)


@dataclass(slots=True)
class HandleRegistry:
    """Every visual the dealer may animate, resolved once when the table is built.

    Systems receive this by reference instead of searching the world for card
    components at animation time.
    """
    seats: List[SeatHandles] = field(default_factory=list)
    community_cards: List[int] = field(default_factory=list)
    community_positions: List[Point] = field(default_factory=list)
    deck_position: Point = (0.0, 0.0)
    pot_chip: Optional[int] = None
    pot_position: Point = (0.0, 0.0)
    flash: Optional[int] = None
    stack_marker: Optional[int] = None

    def seat(self, index: int) -> SeatHandles | None:
        if 0 <= index < len(self.seats):
            return self.seats[index]
        return None

    @property
    def seat_count(self) -> int:
        return len(self.seats)

    def hole_cards(self) -> list[int]:
        return [card for seat in self.seats for card in seat.hole_cards]

    def all_cards(self) -> list[int]:
        return self.hole_cards() + list(self.community_cards)
