"""Entry point for the tablefx hold'em table demo.

Sets up the ECS world, event bus, systems, and Arcade window. A scripted
dealer stands in for the rules engine: N starts a hand, SPACE advances the
phase, F folds the next seat, W awards the pot.
"""
import random

from arcade import Window, run, set_background_color, color, key

from tablefx.components.seat_status import SeatStatus
from tablefx.components.table_phase import GamePhase
from tablefx.constants import WINDOW_HEIGHT, WINDOW_WIDTH
from tablefx.context import build_table_context
from tablefx.events.bus import (
    EVENT_HAND_STARTED,
    EVENT_PHASE_CHANGED,
    EVENT_PLAYER_FOLDED,
    EVENT_POT_AWARDED,
    EVENT_TICK,
    EventBus,
)
from tablefx.systems.animation import AnimationSystem
from tablefx.systems.dealing import DealingSystem
from tablefx.systems.render import RenderSystem
from tablefx.ui.layout import compute_table_layout
from tablefx.utils.logging_utils import get_logger, setup_logging

logger = get_logger("main")

SEAT_COUNT = 6
RANKS = "23456789TJQKA"
SUITS = "shdc"
PHASE_ORDER = [
    GamePhase.PRE_FLOP,
    GamePhase.FLOP,
    GamePhase.TURN,
    GamePhase.RIVER,
    GamePhase.SHOWDOWN,
    GamePhase.COMPLETE,
]


class ScriptedHand:
    """Minimal stand-in for the rules engine, emitting table events on demand."""

    def __init__(self, event_bus: EventBus, seat_count: int, rng: random.Random | None = None):
        self.event_bus = event_bus
        self.seat_count = seat_count
        self.rng = rng or random.Random()
        self._phase_index = -1
        self._folded: set[int] = set()
        self._hole: dict[int, list[str]] = {}
        self._board: list[str] = []
        self._pot = 0

    def start(self) -> None:
        deck = [rank + suit for rank in RANKS for suit in SUITS]
        self.rng.shuffle(deck)
        self._hole = {seat: [deck.pop(), deck.pop()] for seat in range(self.seat_count)}
        self._board = [deck.pop() for _ in range(5)]
        self._folded.clear()
        self._pot = 10 * self.rng.randint(5, 40)
        self._phase_index = -1
        self.event_bus.emit(EVENT_HAND_STARTED, hand_id=self.rng.getrandbits(32))
        self.advance()

    def advance(self) -> None:
        if self._phase_index + 1 >= len(PHASE_ORDER):
            return
        self._phase_index += 1
        phase = PHASE_ORDER[self._phase_index]
        seats = [SeatStatus(seat=s, folded=s in self._folded) for s in range(self.seat_count)]
        self.event_bus.emit(
            EVENT_PHASE_CHANGED,
            phase=phase,
            seats=seats,
            human_seat=0,
            hole_cards=self._hole,
            community=self._board,
        )

    def fold_next(self) -> None:
        for seat in range(1, self.seat_count):
            if seat not in self._folded:
                self._folded.add(seat)
                self.event_bus.emit(EVENT_PLAYER_FOLDED, seat=seat)
                return

    def award(self) -> None:
        live = [s for s in range(self.seat_count) if s not in self._folded]
        if live:
            self.event_bus.emit(EVENT_POT_AWARDED, seat=self.rng.choice(live), amount=self._pot)


class TableWindow(Window):
    def __init__(self):
        super().__init__(WINDOW_WIDTH, WINDOW_HEIGHT, "tablefx")
        self.set_update_rate(1/60)
        self.event_bus = EventBus()
        layout = compute_table_layout(SEAT_COUNT, self.width, self.height)
        self.ctx = build_table_context(self.event_bus, layout, human_seat=0)
        self.animation_system = AnimationSystem(self.ctx.world, self.event_bus)
        self.dealing_system = DealingSystem(self.ctx, self.animation_system)
        self.render_system = RenderSystem(self.ctx.world, self.event_bus, self)
        self.hand = ScriptedHand(self.event_bus, SEAT_COUNT)
        set_background_color(color.DARK_GREEN)

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_key_press(self, symbol: int, modifiers: int):
        if symbol == key.N:
            self.hand.start()
        elif self.dealing_system.is_busy:
            # Actions stay locked until the current deal/reveal finishes.
            logger.debug("Ignoring key %s while dealing", symbol)
        elif symbol == key.SPACE:
            self.hand.advance()
        elif symbol == key.F:
            self.hand.fold_next()
        elif symbol == key.W:
            self.hand.award()


def main():
    setup_logging()
    window = TableWindow()
    run()

if __name__ == "__main__":
    main()
