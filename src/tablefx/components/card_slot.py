from dataclasses import dataclass
from typing import Literal, Optional

SlotKind = Literal["hole", "community"]

@dataclass(frozen=True, slots=True)
class CardSlot:
    kind: SlotKind
    index: int
    seat: Optional[int] = None
