"""Timed interpolations of a single visual's Transform.

A clip is created by the motion planner, begun by the animation system when
its step starts and advanced once per tick until it reaches its duration.
"""
from __future__ import annotations

from typing import Callable, Iterable, Mapping, Union

from esper import World

from tablefx.animation.easing import LINEAR, Easing
from tablefx.components.card_face import CardFace
from tablefx.components.transform import Transform
from tablefx.utils.logging_utils import get_logger

logger = get_logger(__name__)

PROPERTIES = ("x", "y", "rotation", "flip_angle", "scale", "opacity")

BeginHook = Callable[[World, int, Transform], None]
CompleteHook = Callable[["Clip"], None]
Envelope = Callable[[float, float], Mapping[str, float]]
FaceSource = Union[bool, Callable[[], bool]]


def _check_properties(values: Mapping[str, float], what: str) -> None:
    unknown = [name for name in values if name not in PROPERTIES]
    if unknown:
        raise ValueError(f"Unknown {what} properties: {', '.join(unknown)}")


class Clip:
    """Base clip: owns elapsed time, completion and target resolution.

    Subclasses implement ``_apply`` (write the value at normalized time t) and
    ``_apply_end`` (write the exact end value).
    """

    kind = "clip"

    def __init__(
        self,
        target: int | None,
        duration: float,
        easing: Easing = LINEAR,
        *,
        on_complete: CompleteHook | Iterable[CompleteHook] | None = None,
    ) -> None:
        if duration <= 0:
            raise ValueError(f"Clip duration must be positive, got {duration}")
        self.target = target
        self.duration = float(duration)
        self.easing = easing
        self.elapsed = 0.0
        self.skipped = False
        self._world: World | None = None
        self._transform: Transform | None = None
        self._started = False
        self._done = False
        if on_complete is None:
            self._on_complete: list[CompleteHook] = []
        elif callable(on_complete):
            self._on_complete = [on_complete]
        else:
            self._on_complete = list(on_complete)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} target={self.target} {self.elapsed:.3f}/{self.duration:.3f}>"

    @property
    def started(self) -> bool:
        return self._started

    @property
    def done(self) -> bool:
        return self._done

    @property
    def progress(self) -> float:
        if self._done:
            return 1.0
        return self.elapsed / self.duration

    @property
    def remaining(self) -> float:
        if self._done:
            return 0.0
        return max(0.0, self.duration - self.elapsed)

    @property
    def transform(self) -> Transform | None:
        return self._transform

    def add_complete_hook(self, hook: CompleteHook) -> None:
        self._on_complete.append(hook)

    def begin(self, world: World) -> bool:
        """Resolve the target and write the start value.

        Returns False when the target is missing; the clip is then complete.
        """
        if self._started:
            return not self.skipped
        self._started = True
        transform: Transform | None = None
        if self.target is not None:
            try:
                transform = world.component_for_entity(self.target, Transform)
            except KeyError:
                transform = None
        if transform is None:
            logger.warning("Skipping %s clip: target %r has no Transform", self.kind, self.target)
            self.skipped = True
            self.elapsed = self.duration
            self._retire()
            return False
        self._world = world
        self._transform = transform
        self._on_begin(world, self.target, transform)
        self._apply(0.0)
        return True

    def advance(self, dt: float) -> float:
        """Move the clip forward by dt seconds and return progress in [0, 1]."""
        if self._done:
            if self._transform is not None:
                self._apply_end()
            return 1.0
        if self._transform is None:
            # Never begun; nothing to write to.
            return self.progress
        if dt > 0:
            self.elapsed = min(self.duration, self.elapsed + dt)
        if self.elapsed >= self.duration:
            self.finish()
            return 1.0
        t = self.elapsed / self.duration
        self._apply(t)
        return t

    def drop(self) -> bool:
        """Retire a clip that has not begun; its target is never written.

        Returns False when the clip already started.
        """
        if self._started:
            return False
        self._started = True
        self.skipped = True
        self.elapsed = self.duration
        self._retire()
        return True

    def finish(self) -> None:
        """Snap to the end value and retire. Safe to call repeatedly."""
        if self._done:
            return
        self.elapsed = self.duration
        if self._transform is not None:
            self._apply_end()
        self._retire()

    def _retire(self) -> None:
        self._done = True
        hooks, self._on_complete = self._on_complete, []
        for hook in hooks:
            hook(self)

    def _on_begin(self, world: World, target: int, transform: Transform) -> None:
        pass

    def _apply(self, t: float) -> None:
        raise NotImplementedError

    def _apply_end(self) -> None:
        raise NotImplementedError


class TweenClip(Clip):
    """Interpolates any subset of Transform properties.

    ``start`` defaults to the target's values when the clip begins. An optional
    ``envelope`` adds offsets on top of the interpolation while in flight (the
    deal arc, the pot swell); it is not applied to the end value. It is
    called with both the normalized time and the eased time.
    """

    kind = "tween"

    def __init__(
        self,
        target: int | None,
        duration: float,
        end: Mapping[str, float],
        *,
        start: Mapping[str, float] | None = None,
        easing: Easing = LINEAR,
        envelope: Envelope | None = None,
        on_begin: BeginHook | None = None,
        on_complete: CompleteHook | Iterable[CompleteHook] | None = None,
        kind: str | None = None,
    ) -> None:
        super().__init__(target, duration, easing, on_complete=on_complete)
        if not end:
            raise ValueError("TweenClip needs at least one end property")
        _check_properties(end, "end")
        if start is not None:
            _check_properties(start, "start")
        self.end = {name: float(value) for name, value in end.items()}
        self._start_override = dict(start) if start is not None else None
        self.start: dict[str, float] = {}
        if start is not None:
            self.start = {name: float(start.get(name, 0.0)) for name in self.end}
        self.envelope = envelope
        self._begin_hook = on_begin
        if kind:
            self.kind = kind

    def _on_begin(self, world: World, target: int, transform: Transform) -> None:
        if self._begin_hook is not None:
            self._begin_hook(world, target, transform)
        override = self._start_override or {}
        self.start = {
            name: float(override[name]) if name in override else float(getattr(transform, name))
            for name in self.end
        }

    def sample(self, t: float) -> dict[str, float]:
        """Values at normalized time t; t >= 1 yields the end values exactly."""
        if t >= 1.0:
            return dict(self.end)
        eased = self.easing.evaluate(max(0.0, t))
        values = {
            name: self.start[name] + (self.end[name] - self.start[name]) * eased
            for name in self.end
        }
        if self.envelope is not None:
            for name, offset in self.envelope(max(0.0, t), eased).items():
                values[name] = values.get(name, 0.0) + offset
        return values

    def value(self) -> dict[str, float]:
        """Current values of the animated properties as written to the target."""
        if self._transform is None:
            return self.sample(self.progress) if self.start else dict(self.end)
        return {name: getattr(self._transform, name) for name in self.end}

    def _apply(self, t: float) -> None:
        transform = self._transform
        for name, value in self.sample(t).items():
            setattr(transform, name, value)

    def _apply_end(self) -> None:
        transform = self._transform
        for name, value in self.end.items():
            setattr(transform, name, value)


class FlipClip(Clip):
    """Two-phase rotation about the flip axis with a face swap at the midpoint.

    Phase one turns 0 to 90 degrees over half the duration, the face changes
    while the card is edge-on, phase two turns 90 back to 0. ``face_up`` may
    be a callable so the face is resolved at swap time.
    """

    kind = "flip"
    EDGE_ON = 90.0

    def __init__(
        self,
        target: int | None,
        duration: float,
        face_up: FaceSource = True,
        easing: Easing = LINEAR,
        *,
        on_face_swap: Callable[["FlipClip"], None] | None = None,
        on_complete: CompleteHook | Iterable[CompleteHook] | None = None,
    ) -> None:
        super().__init__(target, duration, easing, on_complete=on_complete)
        self._face_source = face_up
        self._on_face_swap = on_face_swap
        self.swapped = False
        self.swap_elapsed: float | None = None
        self.resolved_face: bool | None = None

    @property
    def half(self) -> float:
        return self.duration / 2.0

    def advance(self, dt: float) -> float:
        if not self._done and self._transform is not None and not self.swapped:
            to_mid = self.half - self.elapsed
            if dt >= to_mid:
                # Land exactly on the edge-on boundary before continuing.
                self.elapsed = self.half
                self._apply(0.5)
                dt -= max(0.0, to_mid)
                if dt <= 0:
                    return 0.5
        return super().advance(dt)

    def angle_at(self, t: float) -> float:
        if t >= 1.0:
            return 0.0
        if t < 0.5:
            return self.EDGE_ON * self.easing.evaluate(t / 0.5)
        return self.EDGE_ON * (1.0 - self.easing.evaluate((t - 0.5) / 0.5))

    def _apply(self, t: float) -> None:
        if t >= 0.5 and not self.swapped:
            self._swap_face()
        self._transform.flip_angle = self.angle_at(t)

    def _apply_end(self) -> None:
        if not self.swapped:
            self._swap_face()
        self._transform.flip_angle = 0.0

    def _swap_face(self) -> None:
        self.swapped = True
        self.swap_elapsed = self.elapsed
        source = self._face_source
        face_up = bool(source()) if callable(source) else bool(source)
        self.resolved_face = face_up
        if self._world is not None and self.target is not None:
            try:
                face = self._world.component_for_entity(self.target, CardFace)
            except KeyError:
                face = None
            if face is not None:
                face.face_up = face_up
        if self._on_face_swap is not None:
            self._on_face_swap(self)
