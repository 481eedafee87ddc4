"""Game phase resource mirrored from the rules engine."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class GamePhase(Enum):
    """Phases of a hand as reported by the rules engine."""
    NOT_STARTED = auto()
    PRE_FLOP = auto()
    FLOP = auto()
    TURN = auto()
    RIVER = auto()
    SHOWDOWN = auto()
    COMPLETE = auto()


@dataclass
class TablePhase:
    """Singleton component storing the phase last announced for the table."""
    phase: GamePhase = GamePhase.NOT_STARTED
    human_seat: Optional[int] = None
