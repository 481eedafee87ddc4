from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that are not stored anywhere alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        # "name" is the event itself; payloads must not use it as a key.
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
# Payload keys are passed to EventBus.emit as keywords; "name" is reserved.
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# RULES ENGINE -> TABLE
# ============================================================================
EVENT_HAND_STARTED = "hand_started"                # payload: hand_id=Any|None
EVENT_PHASE_CHANGED = "phase_changed"              # payload: phase=GamePhase, seats=list[SeatStatus]|None, human_seat=int|None
EVENT_PLAYER_FOLDED = "player_folded"              # payload: seat=int
EVENT_POT_AWARDED = "pot_awarded"                  # payload: seat=int, amount=Any|None


# ============================================================================
# ANIMATION
# ============================================================================
EVENT_CLIP_STARTED = "clip_started"                # payload: clip=Clip, target=int|None, kind=str
EVENT_SEQUENCE_STARTED = "sequence_started"        # payload: sequence=Sequence, sequence_name=str
EVENT_SEQUENCE_COMPLETED = "sequence_completed"    # payload: sequence=Sequence, sequence_name=str
EVENT_SEQUENCE_CANCELLED = "sequence_cancelled"    # payload: sequence=Sequence, sequence_name=str


# ============================================================================
# DEALING
# ============================================================================
EVENT_DEAL_REJECTED = "deal_rejected"              # payload: request=str, reason=str
EVENT_TABLE_IDLE = "table_idle"                    # payload: None (no sequence left running)
