from dataclasses import dataclass

@dataclass(slots=True)
class FloatingLabel:
    """Short text that drifts and fades over the table, e.g. a stack increase."""
    text: str = ""
