from __future__ import annotations

from dataclasses import dataclass, fields

from tablefx.constants import (
    CELEBRATION_PULSE_DURATION,
    CELEBRATION_SCALE,
    DEAL_ARC_HEIGHT,
    DEAL_DURATION,
    DEAL_SPIN_DEGREES,
    DEAL_STAGGER,
    DEAL_TO_FLIP_GAP,
    FLIP_DURATION,
    FOLD_DURATION,
    FOLD_POST_DELAY,
    FOLD_TILT_DEGREES,
    POT_SCALE_SWELL,
    POT_TRANSFER_DURATION,
    PULSE_DURATION,
    PULSE_SCALE,
    REVEAL_GAP,
    STACK_MARKER_DURATION,
    STACK_MARKER_RISE,
    STREET_SETTLE_DELAY,
    WINNER_FLASH_DURATION,
    WINNER_FLASH_OPACITY,
)


@dataclass(frozen=True, slots=True)
class DealTimings:
    """Named timing and shape parameters for every table animation.

    Defaults reproduce the table client's tuned values; tests and plot.py
    build variants with ``DealTimings(fold_post_delay=0.25)`` etc.
    """

    deal_duration: float = DEAL_DURATION
    deal_stagger: float = DEAL_STAGGER
    deal_arc_height: float = DEAL_ARC_HEIGHT
    deal_spin_degrees: float = DEAL_SPIN_DEGREES
    flip_duration: float = FLIP_DURATION
    deal_to_flip_gap: float = DEAL_TO_FLIP_GAP
    street_settle_delay: float = STREET_SETTLE_DELAY
    reveal_gap: float = REVEAL_GAP
    fold_duration: float = FOLD_DURATION
    fold_post_delay: float = FOLD_POST_DELAY
    fold_tilt_degrees: float = FOLD_TILT_DEGREES
    pulse_scale: float = PULSE_SCALE
    pulse_duration: float = PULSE_DURATION
    pot_transfer_duration: float = POT_TRANSFER_DURATION
    pot_scale_swell: float = POT_SCALE_SWELL
    celebration_scale: float = CELEBRATION_SCALE
    celebration_pulse_duration: float = CELEBRATION_PULSE_DURATION
    flash_duration: float = WINNER_FLASH_DURATION
    flash_opacity: float = WINNER_FLASH_OPACITY
    stack_marker_duration: float = STACK_MARKER_DURATION
    stack_marker_rise: float = STACK_MARKER_RISE

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value < 0:
                raise ValueError(f"Timing '{f.name}' must be non-negative, got {value}")
        for name in ("deal_duration", "flip_duration", "fold_duration", "pulse_duration",
                     "pot_transfer_duration", "celebration_pulse_duration",
                     "flash_duration", "stack_marker_duration"):
            if getattr(self, name) <= 0:
                raise ValueError(f"Timing '{name}' must be positive")


DEFAULT_TIMINGS = DealTimings()
