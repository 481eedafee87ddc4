"""Easing functions supplied to clips as plain values."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Easing(Protocol):
    """Maps normalized time t in [0, 1] to eased progress in [0, 1]."""

    def evaluate(self, t: float) -> float:
        ...


def _clamp01(t: float) -> float:
    if t <= 0.0:
        return 0.0
    if t >= 1.0:
        return 1.0
    return t


@dataclass(frozen=True, slots=True)
class Linear:
    def evaluate(self, t: float) -> float:
        return _clamp01(t)


@dataclass(frozen=True, slots=True)
class EaseInOut:
    """Hermite smoothstep with flat tangents at both ends."""

    def evaluate(self, t: float) -> float:
        t = _clamp01(t)
        return t * t * (3.0 - 2.0 * t)


@dataclass(frozen=True, slots=True)
class EaseIn:
    def evaluate(self, t: float) -> float:
        t = _clamp01(t)
        return t * t


@dataclass(frozen=True, slots=True)
class EaseOut:
    def evaluate(self, t: float) -> float:
        t = _clamp01(t)
        return 1.0 - (1.0 - t) * (1.0 - t)


@dataclass(frozen=True, slots=True)
class SineInOut:
    def evaluate(self, t: float) -> float:
        t = _clamp01(t)
        return 0.5 - 0.5 * math.cos(math.pi * t)


LINEAR = Linear()
EASE_IN_OUT = EaseInOut()
EASE_IN = EaseIn()
EASE_OUT = EaseOut()
SINE_IN_OUT = SineInOut()

_EASINGS: dict[str, Easing] = {
    "linear": LINEAR,
    "ease_in_out": EASE_IN_OUT,
    "ease_in": EASE_IN,
    "ease_out": EASE_OUT,
    "sine_in_out": SINE_IN_OUT,
}


def get_easing(name: str) -> Easing:
    try:
        return _EASINGS[name]
    except KeyError as exc:
        raise KeyError(f"Easing '{name}' is not registered") from exc


def register_easing(name: str, easing: Easing) -> None:
    if name in _EASINGS:
        raise ValueError(f"Easing '{name}' already registered")
    if not isinstance(easing, Easing):
        raise ValueError(f"Easing '{name}' does not provide evaluate(t)")
    _EASINGS[name] = easing
