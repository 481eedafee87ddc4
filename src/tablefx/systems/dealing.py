"""Dealer: turns table events into animation sequences."""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence as Seq

from tablefx.animation.clip import Clip
from tablefx.animation.motion import park
from tablefx.animation.sequence import Sequence, Step, StepMode
from tablefx.components.card_face import CardFace
from tablefx.components.floating_label import FloatingLabel
from tablefx.components.pot_chip import PotChip
from tablefx.components.seat_status import SeatStatus
from tablefx.components.table_phase import GamePhase
from tablefx.components.transform import Transform
from tablefx.components.visibility import Visibility
from tablefx.context import TableContext
from tablefx.dealing.contracts import (
    PHASE_REQUESTS,
    hole_card_order,
    seats_in_hand,
    showdown_seats,
    street_for_phase,
)
from tablefx.events.bus import (
    EVENT_DEAL_REJECTED,
    EVENT_HAND_STARTED,
    EVENT_PHASE_CHANGED,
    EVENT_PLAYER_FOLDED,
    EVENT_POT_AWARDED,
)
from tablefx.handles import Point
from tablefx.systems.animation import AnimationSystem
from tablefx.utils.logging_utils import get_logger
from tablefx.utils.visibility import hole_cards_visible, visible
from tablefx.world import current_phase, set_phase

logger = get_logger(__name__)


class DealingSystem:
    """Owns the table's dealing contracts and feeds sequences to the AnimationSystem.

    Requests either return the started Sequence or None. A malformed request
    (missing or mismatched targets/positions) is rejected before any clip is
    created, so the table's visuals are left exactly as they were.
    """

    def __init__(self, ctx: TableContext, animation: AnimationSystem) -> None:
        self.ctx = ctx
        self.world = ctx.world
        self.event_bus = ctx.event_bus
        self.handles = ctx.handles
        self.timings = ctx.timings
        self.planner = ctx.planner
        self.animation = animation
        self._statuses: dict[int, SeatStatus] = {}
        self.event_bus.subscribe(EVENT_HAND_STARTED, self.on_hand_started)
        self.event_bus.subscribe(EVENT_PHASE_CHANGED, self.on_phase_changed)
        self.event_bus.subscribe(EVENT_PLAYER_FOLDED, self.on_player_folded)
        self.event_bus.subscribe(EVENT_POT_AWARDED, self.on_pot_awarded)

    @property
    def is_busy(self) -> bool:
        """True while any dealing/reveal sequence runs; action controls stay disabled."""
        return self.animation.is_busy

    @property
    def phase(self) -> GamePhase:
        state = current_phase(self.world)
        return state.phase if state is not None else GamePhase.NOT_STARTED

    @property
    def human_seat(self) -> int | None:
        state = current_phase(self.world)
        return state.human_seat if state is not None else None

    def visible(self, index: int, phase: Any = None) -> bool:
        return visible(index, self.phase if phase is None else phase)

    def status(self, seat: int) -> SeatStatus:
        return self._statuses.get(seat) or SeatStatus(seat=seat)

    def on_hand_started(self, sender, **payload) -> None:
        self.reset_table()

    def on_phase_changed(self, sender, **payload) -> None:
        phase = payload.get("phase")
        if not isinstance(phase, GamePhase):
            logger.warning("Ignoring phase change with unrecognized phase %r", phase)
            return
        seats = payload.get("seats")
        if seats is not None:
            self.update_statuses(seats)
        set_phase(self.world, phase, human_seat=payload.get("human_seat"))
        hole_cards = payload.get("hole_cards")
        if hole_cards:
            self.assign_hole_cards(hole_cards)
        community = payload.get("community")
        if community:
            self.assign_community_cards(community)
        request = PHASE_REQUESTS.get(phase)
        if request == "hole_cards":
            self.deal_hole_cards(seats_in_hand(list(self._statuses.values()), self.handles.seat_count))
        elif request == "street":
            self.deal_street(phase)
        elif request == "showdown":
            self.reveal_showdown()

    def on_player_folded(self, sender, **payload) -> None:
        seat = payload.get("seat")
        if not isinstance(seat, int):
            return
        status = self.status(seat)
        status.folded = True
        self._statuses[seat] = status
        self.fold_seat(seat)

    def on_pot_awarded(self, sender, **payload) -> None:
        seat = payload.get("seat")
        if not isinstance(seat, int):
            return
        self.settle_pot(seat, payload.get("amount"))

    def update_statuses(self, seats: Iterable[SeatStatus]) -> None:
        for status in seats:
            if isinstance(status, SeatStatus):
                self._statuses[status.seat] = status

    def assign_hole_cards(self, cards_by_seat: Mapping[int, Seq[str]]) -> None:
        for seat, labels in cards_by_seat.items():
            handles = self.handles.seat(seat)
            if handles is None:
                continue
            for card, label in zip(handles.hole_cards, labels):
                self._face(card).card = label

    def assign_community_cards(self, labels: Seq[str]) -> None:
        for card, label in zip(self.handles.community_cards, labels):
            self._face(card).card = label

    def cancel_all(self) -> int:
        """Snap every running sequence to a terminal state; call when a new hand starts."""
        return self.animation.cancel_all()

    def reset_table(self) -> None:
        """Cancel everything and park all visuals back at the deck, face down."""
        cancelled = self.cancel_all()
        if cancelled:
            logger.debug("New hand: cancelled %d running sequences", cancelled)
        for card in self.handles.all_cards():
            self._park_at(card, self.handles.deck_position)
            self._face(card).card = None
        chip = self.handles.pot_chip
        if chip is not None:
            self._park_at(chip, self.handles.pot_position)
            self._component(chip, PotChip).label = "pot"
        for overlay in (self.handles.flash, self.handles.stack_marker):
            if overlay is not None:
                park(self.world, overlay)
        self._statuses.clear()
        set_phase(self.world, GamePhase.NOT_STARTED)

    def deal_cards(
        self,
        cards: Seq[int | None] | None,
        positions: Seq[Point] | None,
        *,
        name: str = "deal",
        face_up: Seq[bool] | None = None,
    ) -> Sequence | None:
        """Deal cards one after another, each followed by the stagger delay."""
        if not self._validate(name, cards, positions):
            return None
        faces = list(face_up) if face_up is not None else [False] * len(cards)
        deck = self.handles.deck_position
        stagger = self.timings.deal_stagger
        steps = []
        last = len(cards) - 1
        for i, (card, target) in enumerate(zip(cards, positions)):
            clip = self.planner.deal(card, deck, target, face_up=faces[i] if i < len(faces) else False)
            steps.append(Step([clip], post_delay=stagger if i < last else 0.0, label=f"deal:{i}"))
        return self._run(Sequence(steps, name=name))

    def deal_hole_cards(self, seats: Iterable[int] | None = None) -> Sequence | None:
        """Round-robin hole-card deal: every seat's first card before any second card."""
        seat_list = list(range(self.handles.seat_count)) if seats is None else list(seats)
        cards: list[int | None] = []
        positions: list[Point] = []
        faces: list[bool] = []
        phase = self.phase
        human = self.human_seat
        for seat, card_index in hole_card_order(seat_list):
            handles = self.handles.seat(seat)
            if handles is None:
                cards.append(None)
                positions.append(None)  # type: ignore[arg-type]
                faces.append(False)
                continue
            cards.append(handles.hole_cards[card_index] if card_index < len(handles.hole_cards) else None)
            positions.append(handles.hole_positions[card_index] if card_index < len(handles.hole_positions) else None)  # type: ignore[arg-type]
            faces.append(hole_cards_visible(seat, phase, human_seat=human))
        return self.deal_cards(cards, positions, name="hole_cards", face_up=faces)

    def deal_street(
        self,
        phase: GamePhase,
        cards: Seq[int | None] | None = None,
        positions: Seq[Point] | None = None,
    ) -> Sequence | None:
        """Settle delay, then deal-and-flip each community card of the street in turn."""
        contract = street_for_phase(phase)
        if contract is None:
            self._reject("street", f"phase {phase!r} has no street")
            return None
        if cards is None:
            community = self.handles.community_cards
            cards = [community[i] for i in contract.slots if i < len(community)]
        if positions is None:
            spots = self.handles.community_positions
            positions = [spots[i] for i in contract.slots if i < len(spots)]
        if not self._validate(contract.name, cards, positions):
            return None
        if self.phase != phase:
            set_phase(self.world, phase)
        t = self.timings
        deck = self.handles.deck_position
        steps = [Step.delay(t.street_settle_delay, label="settle")]
        last = len(cards) - 1
        for i, (card, target) in enumerate(zip(cards, positions)):
            slot = contract.slots[i] if i < len(contract.slots) else i
            steps.append(Step([self.planner.deal(card, deck, target)], post_delay=t.deal_to_flip_gap, label=f"deal:{slot}"))
            flip = self.planner.flip(card, self._community_face(slot))
            steps.append(Step([flip], post_delay=t.deal_stagger if i < last else 0.0, label=f"flip:{slot}"))
        return self._run(Sequence(steps, name=contract.name))

    def deal_flop(self, cards=None, positions=None) -> Sequence | None:
        return self.deal_street(GamePhase.FLOP, cards, positions)

    def deal_turn(self, cards=None, positions=None) -> Sequence | None:
        return self.deal_street(GamePhase.TURN, cards, positions)

    def deal_river(self, cards=None, positions=None) -> Sequence | None:
        return self.deal_street(GamePhase.RIVER, cards, positions)

    def reveal_seat(self, seat: int) -> Sequence | None:
        """Flip the seat's still-dealt hole cards in slot order; folded seats are skipped."""
        steps = self._reveal_steps(seat)
        if not steps:
            return None
        return self._run(Sequence(steps, name=f"reveal:{seat}"))

    def reveal_showdown(self, seats: Iterable[int] | None = None) -> Sequence | None:
        if seats is None:
            seats = showdown_seats(list(self._statuses.values()), self.handles.seat_count)
        steps: list[Step] = []
        for seat in seats:
            steps.extend(self._reveal_steps(seat))
        if not steps:
            return None
        return self._run(Sequence(steps, name="showdown"))

    def fold_seat(self, seat: int) -> Sequence | None:
        """Collapse the seat's visible cards into the deck together, then park them.

        Cards of the seat still waiting in a running deal are dropped so they
        are never dealt in front of a folded seat.
        """
        handles = self.handles.seat(seat)
        if handles is None:
            self._reject("fold", f"unknown seat {seat}")
            return None
        dropped = self.animation.drop_pending(handles.hole_cards)
        if dropped:
            logger.debug("Seat %s folded: dropped %d pending clips", seat, dropped)
        cards = [card for card in handles.hole_cards if self._is_active(card)]
        if not cards:
            logger.debug("Seat %s has no visible cards to fold", seat)
            return None
        collapse = self.handles.deck_position
        clips: list[Clip] = [self.planner.fold(card, collapse) for card in cards]

        def park_cards() -> None:
            for card in cards:
                park(self.world, card)

        step = Step(clips, StepMode.PARALLEL, self.timings.fold_post_delay, on_complete=park_cards, label="fold")
        return self._run(Sequence([step], name=f"fold:{seat}"))

    def settle_pot(self, winner_seat: int, amount: Any = None) -> Sequence | None:
        """Slide the pot chips to the winner, flash the table, then pulse the winner's panel.

        With an ``amount`` the chip carries it as its label and a "+amount"
        marker rises and fades above the winner once the chips arrive; the
        marker runs as its own ``stack:<seat>`` sequence so the celebration
        does not wait for it.
        """
        handles = self.handles.seat(winner_seat)
        chip = self.handles.pot_chip
        if handles is None or chip is None:
            self._reject("settle", f"no pot chip or unknown seat {winner_seat}")
            return None
        if amount is not None:
            self._component(chip, PotChip).label = f"${amount}"
        transfer = self.planner.pot_transfer(chip, self.handles.pot_position, handles.panel_position)

        def park_chip() -> None:
            self._park_at(chip, self.handles.pot_position)

        steps = [Step([transfer], on_complete=park_chip, label="pot")]
        flash = self.handles.flash
        if flash is not None:
            steps.append(Step([self.planner.flash(flash)], on_complete=lambda: park(self.world, flash), label="flash"))
        steps.append(Step(self.planner.celebrate(handles.panel), StepMode.SEQUENTIAL, label="celebrate"))
        settle = self._run(Sequence(steps, name=f"settle:{winner_seat}"))

        marker = self.handles.stack_marker
        if amount is not None and marker is not None:
            self._component(marker, FloatingLabel).text = f"+${amount}"
            rise = self.planner.stack_marker(marker, handles.panel_position)
            self._run(Sequence(
                [
                    Step.delay(self.timings.pot_transfer_duration, label="await_pot"),
                    Step([rise], on_complete=lambda: park(self.world, marker), label="stack"),
                ],
                name=f"stack:{winner_seat}",
            ))
        return settle

    def pulse_card(self, card: int) -> Sequence | None:
        return self._run(Sequence([Step(self.planner.pulse(card), label="pulse")], name=f"pulse:{card}"))

    def _reveal_steps(self, seat: int) -> list[Step]:
        if self.status(seat).folded:
            return []
        handles = self.handles.seat(seat)
        if handles is None:
            return []
        cards = [card for card in handles.hole_cards if self._is_active(card)]
        steps = []
        for card in cards:
            steps.append(Step([self.planner.flip(card, True)], post_delay=self.timings.reveal_gap, label=f"reveal:{seat}"))
        return steps

    def _community_face(self, slot: int):
        def resolve() -> bool:
            return visible(slot, self.phase)
        return resolve

    def _validate(self, request: str, cards, positions) -> bool:
        if cards is None or positions is None:
            self._reject(request, "targets or positions missing")
            return False
        if len(cards) != len(positions):
            self._reject(request, f"{len(cards)} targets for {len(positions)} positions")
            return False
        if not cards:
            self._reject(request, "nothing to deal")
            return False
        if any(position is None for position in positions):
            self._reject(request, "position missing for a target")
            return False
        return True

    def _reject(self, request: str, reason: str) -> None:
        logger.warning("Rejected %s request: %s", request, reason)
        self.event_bus.emit(EVENT_DEAL_REJECTED, request=request, reason=reason)

    def _run(self, sequence: Sequence) -> Sequence:
        self.animation.start(sequence)
        return sequence

    def _is_active(self, entity: int) -> bool:
        try:
            return self.world.component_for_entity(entity, Visibility).active
        except KeyError:
            return False

    def _transform(self, entity: int) -> Transform | None:
        try:
            return self.world.component_for_entity(entity, Transform)
        except KeyError:
            return None

    def _face(self, entity: int) -> CardFace:
        return self._component(entity, CardFace)

    def _component(self, entity: int, component_type):
        try:
            return self.world.component_for_entity(entity, component_type)
        except KeyError:
            component = component_type()
            self.world.add_component(entity, component)
            return component

    def _park_at(self, entity: int, position: Point) -> None:
        park(self.world, entity)
        transform = self._transform(entity)
        if transform is not None:
            transform.x, transform.y = position
