"""Pure face-up/face-down rules shared by the dealer and display refreshes."""
from __future__ import annotations

from typing import Any

from tablefx.components.table_phase import GamePhase

# Number of community cards face up once each phase has been reached.
_REVEALED_COMMUNITY_CARDS: dict[GamePhase, int] = {
    GamePhase.NOT_STARTED: 0,
    GamePhase.PRE_FLOP: 0,
    GamePhase.FLOP: 3,
    GamePhase.TURN: 4,
    GamePhase.RIVER: 5,
    GamePhase.SHOWDOWN: 5,
    GamePhase.COMPLETE: 5,
}

_SHOWDOWN_PHASES = frozenset({GamePhase.SHOWDOWN, GamePhase.COMPLETE})


def revealed_count(phase: Any) -> int:
    if not isinstance(phase, GamePhase):
        return 0
    return _REVEALED_COMMUNITY_CARDS.get(phase, 0)


def visible(index: int, phase: Any) -> bool:
    """Return True when community card ``index`` (0-4) is face up in ``phase``.

    Unknown phases and out-of-range indices resolve to face-down.
    """
    if not isinstance(index, int) or isinstance(index, bool):
        return False
    if index < 0:
        return False
    return index < revealed_count(phase)


def hole_cards_visible(seat: int, phase: Any, *, human_seat: int | None = None, folded: bool = False) -> bool:
    """Face state for a seat's hole cards.

    At showdown every seat still in the hand shows its cards; otherwise only
    the human seat sees its own hand.
    """
    if folded:
        return False
    if isinstance(phase, GamePhase) and phase in _SHOWDOWN_PHASES:
        return True
    return human_seat is not None and seat == human_seat
