from dataclasses import dataclass

@dataclass(slots=True)
class PotChip:
    """Tag for the chip stack visual that travels to the winner at settlement."""
    label: str = ""
