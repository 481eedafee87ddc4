from dataclasses import dataclass
from typing import Optional

@dataclass(slots=True)
class CardFace:
    """Card identity shown when face up; the back is drawn otherwise."""
    card: Optional[str] = None
    face_up: bool = False
