from esper import World

from tablefx.events.bus import EventBus, EVENT_TICK
from tablefx.rendering.card_renderer import CardRenderer


class RenderSystem:
    def __init__(self, world: World, event_bus: EventBus, window):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self._time = 0.0
        self._last_draw_coords: dict[int, tuple[float, float]] = {}
        self._card_renderer = CardRenderer(self)

    def on_tick(self, sender, **kwargs):
        self._time += kwargs.get('dt', 0.0)

    def process(self):
        # Local import keeps tests headless without creating a window.
        import arcade
        headless = False
        try:
            arcade.get_window()
        except Exception:
            headless = True
        self._card_renderer.render(arcade, headless=headless)

    @property
    def last_draw_coords(self) -> dict[int, tuple[float, float]]:
        return dict(self._last_draw_coords)
