import logging
import math

import pytest

from tablefx.animation.sequence import SequenceState
from tablefx.components.card_face import CardFace
from tablefx.components.floating_label import FloatingLabel
from tablefx.components.pot_chip import PotChip
from tablefx.components.seat_status import SeatStatus
from tablefx.components.table_phase import GamePhase
from tablefx.components.transform import Transform
from tablefx.components.visibility import Visibility
from tablefx.events.bus import (
    EVENT_CLIP_STARTED,
    EVENT_DEAL_REJECTED,
    EVENT_HAND_STARTED,
    EVENT_PHASE_CHANGED,
    EVENT_PLAYER_FOLDED,
    EVENT_POT_AWARDED,
    EVENT_SEQUENCE_CANCELLED,
    EVENT_SEQUENCE_STARTED,
    EVENT_TABLE_IDLE,
)
from tests.helpers import TICK, build_table, drive, drive_until_idle


def _capture(bus, name):
    events = []
    bus.subscribe(name, lambda sender, **payload: events.append(payload))
    return events


def _transform(table, entity):
    return table.world.component_for_entity(entity, Transform)


def _active(table, entity):
    return table.world.component_for_entity(entity, Visibility).active


def _face(table, entity):
    return table.world.component_for_entity(entity, CardFace)


def _deal_hole_cards(table, human_seat=0, hole_cards=None):
    table.bus.emit(
        EVENT_PHASE_CHANGED,
        phase=GamePhase.PRE_FLOP,
        seats=[SeatStatus(seat=s) for s in range(table.handles.seat_count)],
        human_seat=human_seat,
        hole_cards=hole_cards,
    )
    drive_until_idle(table)


def test_hole_cards_are_dealt_round_robin_with_stagger():
    table = build_table(3)
    starts = []

    def on_clip(sender, **payload):
        if payload["kind"] == "deal":
            starts.append((payload["target"], table.animation.running[0].elapsed))

    table.bus.subscribe(EVENT_CLIP_STARTED, on_clip)
    table.bus.emit(EVENT_PHASE_CHANGED, phase=GamePhase.PRE_FLOP, seats=None, human_seat=0)
    seq = table.animation.running[0]
    assert seq.name == "hole_cards"
    drive_until_idle(table)

    seats = table.handles.seats
    expected = [seats[s].hole_cards[i] for i in range(2) for s in range(3)]
    assert [target for target, _ in starts] == expected
    times = [t for _, t in starts]
    assert times == pytest.approx([i * 0.375 for i in range(6)])
    # Six deals, five gaps between them; nothing trails the last card.
    assert seq.elapsed == pytest.approx(6 * 0.25 + 5 * 0.125)
    assert seq.state is SequenceState.COMPLETED


def test_hole_cards_land_on_seat_positions_with_human_face_up():
    table = build_table(3)
    _deal_hole_cards(table, human_seat=0, hole_cards={0: ["As", "Kd"], 1: ["7c", "7h"]})

    for seat in table.handles.seats:
        for card, position in zip(seat.hole_cards, seat.hole_positions):
            transform = _transform(table, card)
            assert (transform.x, transform.y) == position
            assert transform.rotation == 0.0
            assert _active(table, card)
            assert _face(table, card).face_up is (seat.seat == 0)

    first = table.handles.seats[0].hole_cards
    assert [_face(table, c).card for c in first] == ["As", "Kd"]
    assert _face(table, table.handles.seats[2].hole_cards[0]).card is None


def test_folded_seats_are_not_dealt():
    table = build_table(3)
    targets = []
    table.bus.subscribe(EVENT_CLIP_STARTED, lambda sender, **p: targets.append(p["target"]))
    table.bus.emit(
        EVENT_PHASE_CHANGED,
        phase=GamePhase.PRE_FLOP,
        seats=[SeatStatus(seat=0), SeatStatus(seat=1, active=False), SeatStatus(seat=2)],
        human_seat=0,
    )
    drive_until_idle(table)
    assert not set(table.handles.seats[1].hole_cards) & set(targets)
    assert len(targets) == 4


def test_dealing_locks_actions_until_idle():
    table = build_table(2)
    idle = _capture(table.bus, EVENT_TABLE_IDLE)
    table.dealing.deal_hole_cards()
    assert table.dealing.is_busy
    drive(table.bus, 10)
    assert table.dealing.is_busy
    drive_until_idle(table)
    assert not table.dealing.is_busy
    assert len(idle) == 1


def test_mismatched_request_is_rejected_before_any_clip():
    table = build_table(2)
    clips = _capture(table.bus, EVENT_CLIP_STARTED)
    rejected = _capture(table.bus, EVENT_DEAL_REJECTED)
    cards = table.handles.community_cards[:2]
    before = [(_transform(table, c).x, _transform(table, c).y) for c in cards]

    assert table.dealing.deal_cards(cards, [(10.0, 10.0)]) is None
    assert table.dealing.deal_cards(None, None) is None
    assert table.dealing.deal_cards([], []) is None
    assert table.dealing.deal_cards(cards, [(1.0, 1.0), None]) is None

    assert clips == []
    assert len(rejected) == 4
    assert not table.dealing.is_busy
    assert [(_transform(table, c).x, _transform(table, c).y) for c in cards] == before
    assert not any(_active(table, c) for c in cards)


def test_missing_target_in_batch_is_skipped_and_rest_dealt(caplog):
    table = build_table(2)
    card = table.handles.community_cards[0]
    with caplog.at_level(logging.WARNING):
        seq = table.dealing.deal_cards([None, card], [(5.0, 5.0), (50.0, 60.0)])
        drive_until_idle(table)
    assert seq.state is SequenceState.COMPLETED
    assert (_transform(table, card).x, _transform(table, card).y) == (50.0, 60.0)
    assert "no Transform" in caplog.text


def test_street_for_non_street_phase_is_rejected():
    table = build_table(2)
    rejected = _capture(table.bus, EVENT_DEAL_REJECTED)
    assert table.dealing.deal_street(GamePhase.PRE_FLOP) is None
    assert rejected[0]["request"] == "street"


def test_flop_deals_and_flips_each_card_in_turn():
    table = build_table(2)
    kinds = []
    flips = []

    def on_clip(sender, **payload):
        kinds.append((payload["kind"], payload["target"]))
        if payload["kind"] == "flip":
            flips.append(payload["clip"])

    table.bus.subscribe(EVENT_CLIP_STARTED, on_clip)
    seq = table.dealing.deal_flop()
    assert seq.name == "flop"
    assert table.dealing.phase is GamePhase.FLOP
    drive_until_idle(table)

    community = table.handles.community_cards
    assert kinds == [
        ("deal", community[0]), ("flip", community[0]),
        ("deal", community[1]), ("flip", community[1]),
        ("deal", community[2]), ("flip", community[2]),
    ]
    # settle + 3 x (deal + gap + flip) + 2 staggers
    assert seq.elapsed == pytest.approx(0.5 + 3 * (0.25 + 0.125 + 0.25) + 2 * 0.125)
    for flip in flips:
        assert flip.swap_elapsed == pytest.approx(0.125)
        assert flip.resolved_face is True

    positions = table.handles.community_positions
    for index, card in enumerate(community):
        if index < 3:
            assert (_transform(table, card).x, _transform(table, card).y) == positions[index]
            assert _face(table, card).face_up
            assert _transform(table, card).flip_angle == 0.0
        else:
            assert not _active(table, card)
            assert not _face(table, card).face_up


def test_streets_follow_phase_changes():
    table = build_table(2)
    community = table.handles.community_cards
    labels = ["2c", "3d", "4h", "5s", "6c"]
    _deal_hole_cards(table)
    for phase in (GamePhase.FLOP, GamePhase.TURN, GamePhase.RIVER):
        table.bus.emit(EVENT_PHASE_CHANGED, phase=phase, community=labels)
        drive_until_idle(table)
        revealed = [table.dealing.visible(i) for i in range(5)]
        assert [_face(table, c).face_up for c in community] == revealed

    assert all(_face(table, c).face_up for c in community)
    assert [_face(table, c).card for c in community] == labels
    assert table.dealing.visible(4, GamePhase.TURN) is False


def test_street_timing_is_frame_rate_independent():
    results = []
    for dt in (1 / 16, TICK):
        table = build_table(2)
        seq = table.dealing.deal_turn()
        ticks = drive_until_idle(table, dt=dt)
        results.append((ticks * dt, seq.elapsed))
    assert results[0] == results[1]
    assert results[0][1] == pytest.approx(0.5 + 0.25 + 0.125 + 0.25)


def test_fold_collapses_cards_in_parallel_and_parks_them():
    table = build_table(3)
    _deal_hole_cards(table)
    cards = table.handles.seats[1].hole_cards
    starts = []
    table.bus.subscribe(
        EVENT_CLIP_STARTED,
        lambda sender, **p: starts.append((p["target"], table.animation.running[0].elapsed)),
    )

    table.bus.emit(EVENT_PLAYER_FOLDED, seat=1)
    seq = table.animation.running[0]
    assert seq.name == "fold:1"
    assert [t for t, _ in starts] == cards
    assert [elapsed for _, elapsed in starts] == [0.0, 0.0]

    drive(table.bus, 16)  # quarter of a second in
    for card in cards:
        assert _transform(table, card).opacity == pytest.approx(0.5)

    drive_until_idle(table)
    # Both clips overlap: one fold duration plus the trailing delay.
    assert seq.elapsed == pytest.approx(0.5 + 0.25)
    for card in cards:
        transform = _transform(table, card)
        assert not _active(table, card)
        assert transform.opacity == 1.0
        assert transform.rotation == 0.0
        assert not _face(table, card).face_up
    assert table.dealing.status(1).folded


def test_folded_cards_can_be_dealt_next_hand():
    table = build_table(2)
    _deal_hole_cards(table, human_seat=1)
    table.bus.emit(EVENT_PLAYER_FOLDED, seat=1)
    drive_until_idle(table)

    table.bus.emit(EVENT_HAND_STARTED, hand_id=2)
    _deal_hole_cards(table, human_seat=1)
    seat = table.handles.seats[1]
    for card, position in zip(seat.hole_cards, seat.hole_positions):
        transform = _transform(table, card)
        assert _active(table, card)
        assert transform.opacity == 1.0
        assert (transform.x, transform.y) == position
        assert _face(table, card).face_up


def test_fold_during_hole_deal_drops_the_seats_pending_cards():
    table = build_table(3)
    dealt = []
    table.bus.subscribe(
        EVENT_CLIP_STARTED,
        lambda sender, **p: dealt.append(p["target"]) if p["kind"] == "deal" else None,
    )
    table.bus.emit(EVENT_PHASE_CHANGED, phase=GamePhase.PRE_FLOP, seats=None, human_seat=0)
    hole_deal = table.animation.running[0]
    # Seat 1's first card is in flight, its second is still waiting.
    drive(table.bus, 30)
    seat = table.handles.seats[1]
    assert dealt[-1] == seat.hole_cards[0]

    table.bus.emit(EVENT_PLAYER_FOLDED, seat=1)
    drive_until_idle(table)

    assert hole_deal.state is SequenceState.COMPLETED
    assert seat.hole_cards[1] not in dealt
    assert [_active(table, card) for card in seat.hole_cards] == [False, False]
    for other in (table.handles.seats[0], table.handles.seats[2]):
        assert all(_active(table, card) for card in other.hole_cards)


def test_refold_after_reset_fades_from_full_opacity_again():
    table = build_table(2)

    def fold_and_sample(seat):
        samples = []

        def on_clip(sender, **payload):
            if payload["kind"] != "fold":
                return
            clip = payload["clip"]
            samples.append(("start", clip.transform.opacity))
            clip.add_complete_hook(lambda c: samples.append(("end", c.transform.opacity)))

        table.bus.subscribe(EVENT_CLIP_STARTED, on_clip)
        table.bus.emit(EVENT_PLAYER_FOLDED, seat=seat)
        drive_until_idle(table)
        table.bus.unsubscribe(EVENT_CLIP_STARTED, on_clip)
        return samples

    for hand in range(2):
        table.bus.emit(EVENT_HAND_STARTED, hand_id=hand)
        _deal_hole_cards(table)
        samples = fold_and_sample(1)
        assert sorted(samples) == [("end", 0.0), ("end", 0.0), ("start", 1.0), ("start", 1.0)]
        for card in table.handles.seats[1].hole_cards:
            assert not _active(table, card)
            assert _transform(table, card).opacity == 1.0


def test_fold_without_visible_cards_does_nothing():
    table = build_table(2)
    rejected = _capture(table.bus, EVENT_DEAL_REJECTED)
    assert table.dealing.fold_seat(0) is None
    assert rejected == []
    assert table.dealing.fold_seat(7) is None
    assert rejected[0]["request"] == "fold"


def test_new_hand_mid_flip_snaps_everything_back_to_deck():
    table = build_table(2)
    cancelled = _capture(table.bus, EVENT_SEQUENCE_CANCELLED)
    seq = table.dealing.deal_flop()
    # settle 0.5 + deal 0.25 + gap 0.125 + half the first flip
    drive(table.bus, int((0.5 + 0.25 + 0.125 + 0.0625) / TICK))
    first = table.handles.community_cards[0]
    assert _transform(table, first).flip_angle > 0.0

    table.bus.emit(EVENT_HAND_STARTED, hand_id=7)
    assert seq.state is SequenceState.CANCELLED
    assert [payload["sequence_name"] for payload in cancelled] == ["flop"]
    assert not table.dealing.is_busy
    assert table.dealing.phase is GamePhase.NOT_STARTED
    deck = table.handles.deck_position
    for card in table.handles.all_cards():
        transform = _transform(table, card)
        assert (transform.x, transform.y) == deck
        assert transform.flip_angle == 0.0
        assert not _active(table, card)
        assert not _face(table, card).face_up

    drive(table.bus, 200)
    assert not _active(table, first)


def test_pulse_preempts_a_deal_on_the_same_card():
    table = build_table(2)
    card = table.handles.community_cards[0]
    target = (120.0, 80.0)
    deal = table.dealing.deal_cards([card], [target])
    drive(table.bus, 4)

    table.dealing.pulse_card(card)
    assert (_transform(table, card).x, _transform(table, card).y) == target
    assert table.animation.owner_of(card).kind == "pulse"
    drive_until_idle(table)
    assert deal.state is SequenceState.COMPLETED
    assert _transform(table, card).scale == 1.0


def test_showdown_reveals_remaining_seats_only():
    table = build_table(3)
    _deal_hole_cards(table, human_seat=0)
    table.bus.emit(EVENT_PLAYER_FOLDED, seat=2)
    drive_until_idle(table)

    flipped = []
    table.bus.subscribe(
        EVENT_CLIP_STARTED,
        lambda sender, **p: flipped.append(p["target"]) if p["kind"] == "flip" else None,
    )
    table.bus.emit(
        EVENT_PHASE_CHANGED,
        phase=GamePhase.SHOWDOWN,
        seats=[SeatStatus(seat=0), SeatStatus(seat=1), SeatStatus(seat=2, folded=True)],
    )
    assert table.animation.running[0].name == "showdown"
    drive_until_idle(table)

    seats = table.handles.seats
    assert flipped == seats[0].hole_cards + seats[1].hole_cards
    for card in seats[1].hole_cards:
        assert _face(table, card).face_up
    for card in seats[2].hole_cards:
        assert not _active(table, card)


def test_reveal_seat_skips_folded_seat():
    table = build_table(2)
    _deal_hole_cards(table)
    table.bus.emit(EVENT_PLAYER_FOLDED, seat=1)
    drive_until_idle(table)
    assert table.dealing.reveal_seat(1) is None
    seq = table.dealing.reveal_seat(0)
    assert seq.name == "reveal:0"


def test_pot_slides_to_winner_then_flashes_and_pulses():
    table = build_table(2)
    kinds = []
    arrivals = []
    chip = table.handles.pot_chip
    winner = table.handles.seats[1]

    def on_clip(sender, **payload):
        kinds.append(payload["kind"])
        if payload["kind"] == "pot":
            payload["clip"].add_complete_hook(
                lambda clip: arrivals.append((clip.transform.x, clip.transform.y, clip.transform.scale))
            )

    table.bus.subscribe(EVENT_CLIP_STARTED, on_clip)
    table.bus.emit(EVENT_POT_AWARDED, seat=1)
    assert [seq.name for seq in table.animation.running] == ["settle:1"]
    seq = table.animation.running[0]
    assert _active(table, chip)

    # A quarter of the way: the swell follows raw time, not the eased position.
    drive(table.bus, 8)
    assert _transform(table, chip).scale == pytest.approx(1.0 + math.sin(math.pi / 4) * 0.2)
    assert (_transform(table, chip).x, _transform(table, chip).y) != table.handles.pot_position

    drive_until_idle(table)
    assert kinds == ["pot", "flash", "pulse", "pulse"]
    assert arrivals == [(winner.panel_position[0], winner.panel_position[1], 1.0)]
    assert not _active(table, chip)
    assert (_transform(table, chip).x, _transform(table, chip).y) == table.handles.pot_position
    assert _transform(table, winner.panel).scale == 1.0
    assert not _active(table, table.handles.flash)
    assert seq.elapsed == pytest.approx(0.5 + 0.25 + 2 * 0.25)


def test_pot_amount_labels_chip_and_raises_stack_marker():
    table = build_table(2)
    started = _capture(table.bus, EVENT_SEQUENCE_STARTED)
    flash = table.handles.flash
    marker = table.handles.stack_marker
    panel_x, panel_y = table.handles.seats[0].panel_position

    table.bus.emit(EVENT_POT_AWARDED, seat=0, amount=120)
    assert [payload["sequence_name"] for payload in started] == ["settle:0", "stack:0"]
    assert table.world.component_for_entity(table.handles.pot_chip, PotChip).label == "$120"
    assert table.world.component_for_entity(marker, FloatingLabel).text == "+$120"
    assert not _active(table, marker)

    drive(table.bus, 32)  # chips arrive
    assert _active(table, flash)
    assert _transform(table, flash).opacity == 0.5
    assert _active(table, marker)
    assert (_transform(table, marker).x, _transform(table, marker).y) == (panel_x, panel_y)

    drive(table.bus, 8)
    assert _transform(table, flash).opacity == pytest.approx(0.25)
    assert _transform(table, marker).y == pytest.approx(panel_y + 50.0 * 0.125)
    assert _transform(table, marker).opacity == pytest.approx(0.875)

    drive_until_idle(table)
    assert not _active(table, flash)
    assert not _active(table, marker)
    assert _transform(table, marker).y == panel_y + 50.0


def test_new_hand_during_settlement_clears_winner_effects():
    table = build_table(2)
    table.bus.emit(EVENT_POT_AWARDED, seat=1, amount=40)
    drive(table.bus, 40)
    assert _active(table, table.handles.flash)

    table.bus.emit(EVENT_HAND_STARTED, hand_id=3)
    assert not table.dealing.is_busy
    for entity in (table.handles.flash, table.handles.stack_marker, table.handles.pot_chip):
        assert not _active(table, entity)
    assert table.world.component_for_entity(table.handles.pot_chip, PotChip).label == "pot"


def test_pot_award_to_unknown_seat_is_rejected():
    table = build_table(2)
    rejected = _capture(table.bus, EVENT_DEAL_REJECTED)
    assert table.dealing.settle_pot(5) is None
    assert rejected[0]["request"] == "settle"
