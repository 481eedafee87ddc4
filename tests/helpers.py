from __future__ import annotations

from dataclasses import dataclass

from tablefx.context import TableContext, build_table_context
from tablefx.dealing.timings import DealTimings
from tablefx.events.bus import EVENT_TICK, EventBus
from tablefx.systems.animation import AnimationSystem
from tablefx.systems.dealing import DealingSystem
from tablefx.ui.layout import compute_table_layout

# Binary-exact timings so elapsed-time assertions can compare with ==.
FAST_TIMINGS = DealTimings(
    deal_duration=0.25,
    deal_stagger=0.125,
    flip_duration=0.25,
    deal_to_flip_gap=0.125,
    street_settle_delay=0.5,
    reveal_gap=0.125,
    fold_duration=0.5,
    fold_post_delay=0.25,
    pulse_duration=0.125,
    pot_transfer_duration=0.5,
    celebration_pulse_duration=0.25,
    flash_duration=0.25,
    stack_marker_duration=1.0,
)

TICK = 1 / 64


@dataclass
class Table:
    bus: EventBus
    ctx: TableContext
    animation: AnimationSystem
    dealing: DealingSystem

    @property
    def world(self):
        return self.ctx.world

    @property
    def handles(self):
        return self.ctx.handles


def build_table(seat_count: int = 3, timings: DealTimings = FAST_TIMINGS, human_seat: int | None = 0) -> Table:
    """Construct a table world with the animation and dealing systems wired to a fresh bus."""
    bus = EventBus()
    layout = compute_table_layout(seat_count)
    ctx = build_table_context(bus, layout, timings=timings, human_seat=human_seat)
    animation = AnimationSystem(ctx.world, bus)
    dealing = DealingSystem(ctx, animation)
    return Table(bus=bus, ctx=ctx, animation=animation, dealing=dealing)


def drive(bus: EventBus, ticks: int = 1, dt: float = TICK) -> None:
    for _ in range(ticks):
        bus.emit(EVENT_TICK, dt=dt)


def drive_until_idle(table: Table, dt: float = TICK, max_ticks: int = 5000) -> int:
    """Tick until no sequence runs; returns the number of ticks used."""
    ticks = 0
    while table.animation.is_busy:
        assert ticks < max_ticks, "Animations did not settle"
        table.bus.emit(EVENT_TICK, dt=dt)
        ticks += 1
    return ticks
