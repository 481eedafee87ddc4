from dataclasses import dataclass

@dataclass(slots=True)
class Transform:
    """Animatable visual state of a card, chip or seat panel.

    rotation is the in-plane tilt/spin in degrees; flip_angle is the rotation
    about the vertical flip axis (90 means edge-on, face hidden).
    """
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    flip_angle: float = 0.0
    scale: float = 1.0
    opacity: float = 1.0
