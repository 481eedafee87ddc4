"""Steps and sequences: ordered, cancellable groups of clips.

A Sequence never touches the world directly; clips are begun through a
``ClipHost`` (the AnimationSystem) so handle ownership can be enforced at
clip-start time.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable, Protocol

from tablefx.animation.clip import Clip

StepHook = Callable[[], None]


class StepMode(Enum):
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"


class SequenceState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ClipHost(Protocol):
    def start_clip(self, clip: Clip) -> None:
        ...


class Step:
    """A group of clips with a barrier on exit and an optional trailing delay.

    Sequential steps run their clips back to back, parallel steps start them
    together. Either way the step only finishes once every clip is complete
    and ``post_delay`` has elapsed. ``on_complete`` hooks run once, when the
    clips are done (or forced done by a cancel), before the delay.
    """

    def __init__(
        self,
        clips: Iterable[Clip] = (),
        mode: StepMode = StepMode.SEQUENTIAL,
        post_delay: float = 0.0,
        *,
        on_complete: StepHook | Iterable[StepHook] | None = None,
        label: str = "",
    ) -> None:
        if post_delay < 0:
            raise ValueError(f"Step post_delay must be non-negative, got {post_delay}")
        self.clips: list[Clip] = list(clips)
        self.mode = mode
        self.post_delay = float(post_delay)
        self.label = label
        if on_complete is None:
            self._hooks: list[StepHook] = []
        elif callable(on_complete):
            self._hooks = [on_complete]
        else:
            self._hooks = list(on_complete)
        self._begun = False
        self._cursor = 0
        self._clips_done = False
        self._delay_left = 0.0
        self._finished = False

    def __repr__(self) -> str:
        return f"<Step {self.label or self.mode.value} clips={len(self.clips)} delay={self.post_delay}>"

    @classmethod
    def delay(cls, seconds: float, label: str = "delay") -> "Step":
        return cls((), StepMode.SEQUENTIAL, seconds, label=label)

    @classmethod
    def parallel(cls, clips: Iterable[Clip], post_delay: float = 0.0, **kwargs) -> "Step":
        return cls(clips, StepMode.PARALLEL, post_delay, **kwargs)

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def clips_done(self) -> bool:
        return self._clips_done

    def live_clips(self) -> list[Clip]:
        return [clip for clip in self.clips if clip.started and not clip.done]

    def add_hook(self, hook: StepHook) -> None:
        self._hooks.append(hook)

    def begin(self, host: ClipHost) -> None:
        if self._begun:
            return
        self._begun = True
        if self.mode is StepMode.PARALLEL:
            for clip in self.clips:
                host.start_clip(clip)
        elif self.clips:
            host.start_clip(self.clips[0])

    def advance(self, dt: float, host: ClipHost) -> float | None:
        """Advance by dt; return the unused part of dt once finished, else None."""
        if self._finished:
            return dt
        remaining = dt
        if not self._clips_done:
            if self.mode is StepMode.PARALLEL:
                pending = [clip for clip in self.clips if not clip.done]
                slowest = max((clip.remaining for clip in pending), default=0.0)
                for clip in pending:
                    clip.advance(remaining)
                if any(not clip.done for clip in self.clips):
                    return None
                remaining = max(0.0, remaining - slowest)
            else:
                while self._cursor < len(self.clips):
                    clip = self.clips[self._cursor]
                    if not clip.done:
                        needed = clip.remaining
                        clip.advance(remaining)
                        if not clip.done:
                            return None
                        remaining = max(0.0, remaining - needed)
                    self._cursor += 1
                    if self._cursor < len(self.clips):
                        host.start_clip(self.clips[self._cursor])
            self._complete_clips()
        if self._delay_left > 0.0:
            if remaining < self._delay_left:
                self._delay_left -= remaining
                return None
            remaining -= self._delay_left
            self._delay_left = 0.0
        self._finished = True
        return remaining

    def force_complete(self) -> None:
        """Snap live clips to their end values; unstarted clips are dropped."""
        if self._finished:
            return
        for clip in self.live_clips():
            clip.finish()
        self._cursor = len(self.clips)
        if not self._clips_done:
            self._complete_clips()
        self._delay_left = 0.0
        self._finished = True

    def _complete_clips(self) -> None:
        self._clips_done = True
        self._delay_left = self.post_delay
        hooks, self._hooks = self._hooks, []
        for hook in hooks:
            hook()


class Sequence:
    """Ordered list of steps with an execution cursor.

    Idle -> Running on start, Running -> Completed after the last step (and its
    delay) finishes, Running -> Cancelled on cancel.
    """

    def __init__(self, steps: Iterable[Step] = (), *, name: str = "sequence") -> None:
        self.name = name
        self.steps: list[Step] = list(steps)
        self.state = SequenceState.IDLE
        self.cursor = 0
        self.elapsed = 0.0
        self._host: ClipHost | None = None

    def __repr__(self) -> str:
        return f"<Sequence {self.name} {self.state.value} {self.cursor}/{len(self.steps)}>"

    def add(self, step: Step) -> "Sequence":
        if self.state is not SequenceState.IDLE:
            raise ValueError(f"Sequence '{self.name}' already started")
        self.steps.append(step)
        return self

    @property
    def running(self) -> bool:
        return self.state is SequenceState.RUNNING

    @property
    def finished(self) -> bool:
        return self.state in (SequenceState.COMPLETED, SequenceState.CANCELLED)

    @property
    def current_step(self) -> Step | None:
        if self.state is not SequenceState.RUNNING or self.cursor >= len(self.steps):
            return None
        return self.steps[self.cursor]

    def clips(self) -> list[Clip]:
        return [clip for step in self.steps for clip in step.clips]

    def start(self, host: ClipHost) -> None:
        if self.state is not SequenceState.IDLE:
            raise ValueError(f"Sequence '{self.name}' cannot start from {self.state.value}")
        self._host = host
        self.state = SequenceState.RUNNING
        if self.steps:
            self.steps[0].begin(host)

    def advance(self, dt: float) -> SequenceState:
        if self.state is not SequenceState.RUNNING:
            return self.state
        host = self._host
        remaining = max(0.0, dt)
        while self.cursor < len(self.steps):
            leftover = self.steps[self.cursor].advance(remaining, host)
            if leftover is None:
                self.elapsed += remaining
                return self.state
            self.elapsed += remaining - leftover
            remaining = leftover
            self.cursor += 1
            if self.cursor < len(self.steps):
                self.steps[self.cursor].begin(host)
        self.state = SequenceState.COMPLETED
        return self.state

    def cancel(self) -> bool:
        """Force the active step to its end and drop the rest. Returns False if already finished."""
        if self.finished:
            return False
        if self.state is SequenceState.RUNNING and self.cursor < len(self.steps):
            self.steps[self.cursor].force_complete()
        self.cursor = len(self.steps)
        self.state = SequenceState.CANCELLED
        return True
