from __future__ import annotations

from dataclasses import dataclass

from esper import World

from tablefx.animation.motion import MotionPlanner
from tablefx.dealing.timings import DEFAULT_TIMINGS, DealTimings
from tablefx.events.bus import EventBus
from tablefx.handles import HandleRegistry
from tablefx.ui.layout import TableLayout
from tablefx.world import create_world


@dataclass(slots=True)
class TableContext:
    """Everything a table system needs, passed explicitly at construction."""

    world: World
    event_bus: EventBus
    handles: HandleRegistry
    layout: TableLayout
    timings: DealTimings = DEFAULT_TIMINGS
    planner: MotionPlanner | None = None

    def __post_init__(self) -> None:
        if self.planner is None:
            self.planner = MotionPlanner(self.timings)


def build_table_context(
    event_bus: EventBus,
    layout: TableLayout,
    *,
    timings: DealTimings = DEFAULT_TIMINGS,
    human_seat: int | None = 0,
) -> TableContext:
    world, handles = create_world(layout, human_seat=human_seat)
    return TableContext(
        world=world,
        event_bus=event_bus,
        handles=handles,
        layout=layout,
        timings=timings,
    )
