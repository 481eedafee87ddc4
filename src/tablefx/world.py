from __future__ import annotations

from esper import World

from tablefx.components.card_face import CardFace
from tablefx.components.card_slot import CardSlot
from tablefx.components.flash_overlay import FlashOverlay
from tablefx.components.floating_label import FloatingLabel
from tablefx.components.pot_chip import PotChip
from tablefx.components.seat_panel import SeatPanel
from tablefx.components.table_phase import GamePhase, TablePhase
from tablefx.components.transform import Transform
from tablefx.components.visibility import Visibility
from tablefx.handles import HandleRegistry, SeatHandles
from tablefx.ui.layout import TableLayout


def create_world(
    layout: TableLayout,
    initial_phase: GamePhase = GamePhase.NOT_STARTED,
    *,
    human_seat: int | None = 0,
) -> tuple[World, HandleRegistry]:
    """Build the ECS world for a table and the handle registry over its visuals.

    Cards start parked at the deck: inactive, face down, full opacity.
    """
    world = World()

    state_entity = world.create_entity()
    world.add_component(state_entity, TablePhase(phase=initial_phase, human_seat=human_seat))

    deck_x, deck_y = layout.deck_position
    seats: list[SeatHandles] = []
    for seat_layout in layout.seats:
        panel_x, panel_y = seat_layout.panel_position
        panel = world.create_entity(
            SeatPanel(seat=seat_layout.seat, name=seat_layout.name),
            Transform(x=panel_x, y=panel_y),
            Visibility(active=True),
        )
        hole_cards = []
        for index, _ in enumerate(seat_layout.hole_positions):
            card = world.create_entity(
                CardSlot(kind="hole", index=index, seat=seat_layout.seat),
                CardFace(),
                Transform(x=deck_x, y=deck_y),
                Visibility(active=False),
            )
            hole_cards.append(card)
        seats.append(
            SeatHandles(
                seat=seat_layout.seat,
                hole_cards=hole_cards,
                hole_positions=list(seat_layout.hole_positions),
                panel=panel,
                panel_position=seat_layout.panel_position,
            )
        )

    community = []
    for index, _ in enumerate(layout.community_positions):
        card = world.create_entity(
            CardSlot(kind="community", index=index),
            CardFace(),
            Transform(x=deck_x, y=deck_y),
            Visibility(active=False),
        )
        community.append(card)

    pot_x, pot_y = layout.pot_position
    pot_chip = world.create_entity(
        PotChip(label="pot"),
        Transform(x=pot_x, y=pot_y),
        Visibility(active=False),
    )

    center = (layout.width / 2, layout.height / 2)
    flash = world.create_entity(
        FlashOverlay(width=layout.width, height=layout.height),
        Transform(x=center[0], y=center[1], opacity=0.0),
        Visibility(active=False),
    )
    stack_marker = world.create_entity(
        FloatingLabel(),
        Transform(x=pot_x, y=pot_y),
        Visibility(active=False),
    )

    registry = HandleRegistry(
        seats=seats,
        community_cards=community,
        community_positions=list(layout.community_positions),
        deck_position=layout.deck_position,
        pot_chip=pot_chip,
        pot_position=layout.pot_position,
        flash=flash,
        stack_marker=stack_marker,
    )
    return world, registry


def current_phase(world: World) -> TablePhase | None:
    for _, state in world.get_component(TablePhase):
        return state
    return None


def set_phase(world: World, phase: GamePhase, *, human_seat: int | None = None) -> TablePhase:
    state = current_phase(world)
    if state is None:
        state = TablePhase(phase=phase, human_seat=human_seat)
        world.create_entity(state)
        return state
    state.phase = phase
    if human_seat is not None:
        state.human_seat = human_seat
    return state
