"""Ordering contracts for the table's dealing sequences.

These are pure templates: they say which slots move and in which order for a
given phase, and never look at the world.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence as Seq

from tablefx.components.seat_status import SeatStatus
from tablefx.components.table_phase import GamePhase
from tablefx.constants import HOLE_CARDS_PER_SEAT


@dataclass(frozen=True, slots=True)
class StreetContract:
    """Community slots dealt and revealed when a street opens."""
    phase: GamePhase
    slots: tuple[int, ...]
    name: str


STREETS: dict[GamePhase, StreetContract] = {
    GamePhase.FLOP: StreetContract(GamePhase.FLOP, (0, 1, 2), "flop"),
    GamePhase.TURN: StreetContract(GamePhase.TURN, (3,), "turn"),
    GamePhase.RIVER: StreetContract(GamePhase.RIVER, (4,), "river"),
}


def street_for_phase(phase: GamePhase) -> StreetContract | None:
    return STREETS.get(phase)


def hole_card_order(seats: Iterable[int], cards_per_seat: int = HOLE_CARDS_PER_SEAT) -> list[tuple[int, int]]:
    """Round-robin deal order as (seat, card_index) pairs.

    Every seat receives card 0 before any seat receives card 1.
    """
    seat_list = list(seats)
    return [(seat, card_index) for card_index in range(cards_per_seat) for seat in seat_list]


def seats_in_hand(statuses: Seq[SeatStatus] | None, seat_count: int) -> list[int]:
    """Seats that should receive hole cards; all seats when no statuses are known."""
    if not statuses:
        return list(range(seat_count))
    return [s.seat for s in statuses if s.active and not s.folded and 0 <= s.seat < seat_count]


def showdown_seats(statuses: Seq[SeatStatus] | None, seat_count: int) -> list[int]:
    """Seats whose cards are revealed at showdown, in seat order. Folded seats are skipped."""
    if not statuses:
        return list(range(seat_count))
    folded = {s.seat for s in statuses if s.folded}
    return [seat for seat in range(seat_count) if seat not in folded]


# Which dealing request a phase transition triggers.
PHASE_REQUESTS: dict[GamePhase, str] = {
    GamePhase.PRE_FLOP: "hole_cards",
    GamePhase.FLOP: "street",
    GamePhase.TURN: "street",
    GamePhase.RIVER: "street",
    GamePhase.SHOWDOWN: "showdown",
}
