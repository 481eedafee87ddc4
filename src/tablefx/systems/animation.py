from __future__ import annotations

from esper import World

from tablefx.animation.clip import Clip
from tablefx.animation.sequence import Sequence, SequenceState
from tablefx.constants import DEFAULT_DT
from tablefx.events.bus import (
    EVENT_CLIP_STARTED,
    EVENT_SEQUENCE_CANCELLED,
    EVENT_SEQUENCE_COMPLETED,
    EVENT_SEQUENCE_STARTED,
    EVENT_TABLE_IDLE,
    EVENT_TICK,
    EventBus,
)
from tablefx.utils.logging_utils import get_logger

logger = get_logger(__name__)


class AnimationSystem:
    """Drives every running Sequence from the shared tick.

    Also the single gatekeeper of handle ownership: a clip starting on a
    handle that another live clip still writes to first snaps that clip to
    its end value.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self._running: list[Sequence] = []
        self._owners: dict[int, Clip] = {}
        event_bus.subscribe(EVENT_TICK, self.on_tick)

    @property
    def running(self) -> tuple[Sequence, ...]:
        return tuple(self._running)

    @property
    def is_busy(self) -> bool:
        return bool(self._running)

    def owner_of(self, target: int) -> Clip | None:
        clip = self._owners.get(target)
        if clip is None or clip.done:
            return None
        return clip

    def start(self, sequence: Sequence) -> bool:
        if sequence.state is not SequenceState.IDLE:
            logger.warning("Sequence %s not started: state is %s", sequence.name, sequence.state.value)
            return False
        self._running.append(sequence)
        sequence.start(self)
        logger.debug("Sequence %s started with %d steps", sequence.name, len(sequence.steps))
        self.event_bus.emit(EVENT_SEQUENCE_STARTED, sequence=sequence, sequence_name=sequence.name)
        # Settle empty or zero-length leading steps without waiting for a tick.
        sequence.advance(0.0)
        if sequence.finished:
            self._finish(sequence)
            self._announce_idle()
        return True

    def cancel(self, sequence: Sequence) -> bool:
        if not sequence.cancel():
            return False
        if sequence in self._running:
            self._running.remove(sequence)
        self._prune_owners()
        logger.debug("Sequence %s cancelled at step %d", sequence.name, sequence.cursor)
        self.event_bus.emit(EVENT_SEQUENCE_CANCELLED, sequence=sequence, sequence_name=sequence.name)
        self._announce_idle()
        return True

    def cancel_all(self) -> int:
        cancelled = 0
        for sequence in list(self._running):
            if self.cancel(sequence):
                cancelled += 1
        # Anything still owned was started outside a sequence; snap it as well.
        for clip in list(self._owners.values()):
            clip.finish()
        self._owners.clear()
        return cancelled

    def drop_pending(self, targets) -> int:
        """Drop every not-yet-started clip of the running sequences aimed at targets."""
        targets = set(targets)
        dropped = 0
        for sequence in self._running:
            for clip in sequence.clips():
                if clip.target in targets and clip.drop():
                    dropped += 1
        return dropped

    def start_clip(self, clip: Clip) -> None:
        if clip.done:
            # Dropped before its step reached it; it must not take ownership.
            return
        target = clip.target
        if target is not None:
            prior = self._owners.get(target)
            if prior is not None and prior is not clip and not prior.done:
                logger.debug("Clip %r pre-empted by %r on target %s", prior, clip, target)
                prior.finish()
            self._owners[target] = clip
        clip.begin(self.world)
        if target is not None and clip.done:
            self._owners.pop(target, None)
        self.event_bus.emit(EVENT_CLIP_STARTED, clip=clip, target=target, kind=clip.kind)

    def tick(self, dt: float) -> None:
        if not self._running:
            return
        for sequence in list(self._running):
            sequence.advance(dt)
            if sequence.finished:
                self._finish(sequence)
        self._prune_owners()
        self._announce_idle()

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', DEFAULT_DT)
        self.tick(dt)

    def _finish(self, sequence: Sequence) -> None:
        if sequence in self._running:
            self._running.remove(sequence)
        if sequence.state is SequenceState.COMPLETED:
            logger.debug("Sequence %s completed after %.3fs", sequence.name, sequence.elapsed)
            self.event_bus.emit(EVENT_SEQUENCE_COMPLETED, sequence=sequence, sequence_name=sequence.name)

    def _prune_owners(self) -> None:
        stale = [target for target, clip in self._owners.items() if clip.done]
        for target in stale:
            del self._owners[target]

    def _announce_idle(self) -> None:
        if not self._running:
            self.event_bus.emit(EVENT_TABLE_IDLE)
