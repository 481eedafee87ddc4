"""Derived trajectories for table visuals, expressed as clip definitions."""
from __future__ import annotations

import math
from typing import Callable, Mapping, Tuple

from esper import World

from tablefx.animation.clip import FaceSource, FlipClip, TweenClip
from tablefx.animation.easing import EASE_IN_OUT, LINEAR, Easing
from tablefx.components.card_face import CardFace
from tablefx.components.transform import Transform
from tablefx.components.visibility import Visibility
from tablefx.dealing.timings import DEFAULT_TIMINGS, DealTimings

Point = Tuple[float, float]


def arc_envelope(height: float, spin: float = 0.0) -> Callable[[float, float], Mapping[str, float]]:
    """Vertical sine arc, zero at both ends and ``height`` halfway, plus a full-turn spin.

    Follows the eased time so the arc peaks where the card is mid-path.
    """

    def envelope(t: float, eased: float) -> Mapping[str, float]:
        offsets = {"y": math.sin(eased * math.pi) * height}
        if spin:
            offsets["rotation"] = spin * eased
        return offsets

    return envelope


def swell_envelope(amount: float) -> Callable[[float, float], Mapping[str, float]]:
    """Scale bump peaking mid-flight (pot chips grow while travelling).

    Follows normalized time; only the position is eased.
    """

    def envelope(t: float, eased: float) -> Mapping[str, float]:
        return {"scale": math.sin(t * math.pi) * amount}

    return envelope


def _set_active(world: World, entity: int, active: bool) -> None:
    try:
        world.component_for_entity(entity, Visibility).active = active
    except KeyError:
        world.add_component(entity, Visibility(active=active))


def prepare_for_deal(world: World, entity: int, transform: Transform) -> None:
    """Make a parked card visible and upright before it leaves the deck."""
    _set_active(world, entity, True)
    transform.rotation = 0.0
    transform.flip_angle = 0.0
    transform.scale = 1.0
    transform.opacity = 1.0


def activate(world: World, entity: int, transform: Transform) -> None:
    _set_active(world, entity, True)


def set_face(world: World, entity: int, face_up: bool) -> None:
    try:
        world.component_for_entity(entity, CardFace).face_up = face_up
    except KeyError:
        pass


def park(world: World, entity: int) -> None:
    """Hide a visual and restore full opacity so the slot can be dealt again."""
    _set_active(world, entity, False)
    set_face(world, entity, False)
    try:
        transform = world.component_for_entity(entity, Transform)
    except KeyError:
        return
    transform.opacity = 1.0
    transform.rotation = 0.0
    transform.flip_angle = 0.0
    transform.scale = 1.0


class MotionPlanner:
    """Builds parameterized clips for every table motion from one timing set."""

    def __init__(
        self,
        timings: DealTimings = DEFAULT_TIMINGS,
        *,
        deal_easing: Easing = EASE_IN_OUT,
        flip_easing: Easing = EASE_IN_OUT,
        fold_easing: Easing = LINEAR,
        pot_easing: Easing = EASE_IN_OUT,
    ) -> None:
        self.timings = timings
        self.deal_easing = deal_easing
        self.flip_easing = flip_easing
        self.fold_easing = fold_easing
        self.pot_easing = pot_easing

    def deal(self, card: int | None, deck: Point, target: Point, *, face_up: bool = False) -> TweenClip:
        t = self.timings

        def on_begin(world: World, entity: int, transform: Transform) -> None:
            prepare_for_deal(world, entity, transform)
            set_face(world, entity, face_up)

        return TweenClip(
            card,
            t.deal_duration,
            end={"x": target[0], "y": target[1], "rotation": 0.0},
            start={"x": deck[0], "y": deck[1], "rotation": 0.0},
            easing=self.deal_easing,
            envelope=arc_envelope(t.deal_arc_height, t.deal_spin_degrees),
            on_begin=on_begin,
            kind="deal",
        )

    def flip(self, card: int | None, face_up: FaceSource = True) -> FlipClip:
        return FlipClip(card, self.timings.flip_duration, face_up, self.flip_easing)

    def fold(self, card: int | None, collapse_point: Point) -> TweenClip:
        t = self.timings
        return TweenClip(
            card,
            t.fold_duration,
            end={
                "x": collapse_point[0],
                "y": collapse_point[1],
                "rotation": t.fold_tilt_degrees,
                "opacity": 0.0,
            },
            start={"opacity": 1.0},
            easing=self.fold_easing,
            kind="fold",
        )

    def pulse(self, target: int | None, scale: float | None = None, duration: float | None = None) -> list[TweenClip]:
        """Scale up then back to 1; run the pair in a sequential step."""
        t = self.timings
        peak = t.pulse_scale if scale is None else scale
        half = t.pulse_duration if duration is None else duration
        return [
            TweenClip(target, half, end={"scale": peak}, start={"scale": 1.0}, kind="pulse"),
            TweenClip(target, half, end={"scale": 1.0}, start={"scale": peak}, kind="pulse"),
        ]

    def celebrate(self, panel: int | None) -> list[TweenClip]:
        t = self.timings
        return self.pulse(panel, t.celebration_scale, t.celebration_pulse_duration)

    def pot_transfer(self, chip: int | None, origin: Point, destination: Point) -> TweenClip:
        t = self.timings
        return TweenClip(
            chip,
            t.pot_transfer_duration,
            end={"x": destination[0], "y": destination[1], "scale": 1.0},
            start={"x": origin[0], "y": origin[1], "scale": 1.0},
            easing=self.pot_easing,
            envelope=swell_envelope(t.pot_scale_swell),
            on_begin=activate,
            kind="pot",
        )

    def flash(self, overlay: int | None) -> TweenClip:
        """Winner flash: the overlay shows at ``flash_opacity`` and fades out linearly."""
        t = self.timings
        return TweenClip(
            overlay,
            t.flash_duration,
            end={"opacity": 0.0},
            start={"opacity": t.flash_opacity},
            on_begin=activate,
            kind="flash",
        )

    def stack_marker(self, marker: int | None, origin: Point) -> TweenClip:
        t = self.timings
        return TweenClip(
            marker,
            t.stack_marker_duration,
            end={"x": origin[0], "y": origin[1] + t.stack_marker_rise, "opacity": 0.0},
            start={"x": origin[0], "y": origin[1], "opacity": 1.0},
            on_begin=activate,
            kind="stack",
        )
