"""Table geometry: where seats, community cards, deck and pot sit on screen."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Tuple

from tablefx.constants import (
    CARD_GAP,
    CARD_HEIGHT,
    CARD_WIDTH,
    COMMUNITY_CARD_COUNT,
    HOLE_CARDS_PER_SEAT,
    SEAT_PANEL_HEIGHT,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
)

Point = Tuple[float, float]


@dataclass(slots=True)
class SeatLayout:
    seat: int
    panel_position: Point
    hole_positions: List[Point]
    name: str = ""


@dataclass(slots=True)
class TableLayout:
    """Screen positions supplied by the table scene, one entry per seat."""
    seats: List[SeatLayout]
    community_positions: List[Point]
    deck_position: Point
    pot_position: Point
    width: int = WINDOW_WIDTH
    height: int = WINDOW_HEIGHT
    names: List[str] = field(default_factory=list)


def row_positions(center: Point, count: int, width: float = CARD_WIDTH, gap: float = CARD_GAP) -> list[Point]:
    """Centers of ``count`` cards laid out left to right around ``center``."""
    if count <= 0:
        return []
    total = count * width + (count - 1) * gap
    left = center[0] - total / 2 + width / 2
    return [(left + i * (width + gap), center[1]) for i in range(count)]


def compute_table_layout(
    seat_count: int,
    window_width: int = WINDOW_WIDTH,
    window_height: int = WINDOW_HEIGHT,
    *,
    names: list[str] | None = None,
) -> TableLayout:
    """Place seats on an ellipse around the felt, seat 0 at the bottom center.

    Seats go counter-clockwise when viewed from the human seat, matching the
    rules engine's seat order.
    """
    if seat_count < 1:
        raise ValueError(f"seat_count must be at least 1, got {seat_count}")
    cx = window_width / 2
    cy = window_height / 2
    radius_x = window_width * 0.38
    radius_y = window_height * 0.34
    seats: list[SeatLayout] = []
    for seat in range(seat_count):
        angle = -math.pi / 2 + seat * (2 * math.pi / seat_count)
        px = cx + radius_x * math.cos(angle)
        py = cy + radius_y * math.sin(angle)
        cards_center = (px, py + SEAT_PANEL_HEIGHT * 0.15)
        name = names[seat] if names and seat < len(names) else f"Seat {seat + 1}"
        seats.append(
            SeatLayout(
                seat=seat,
                panel_position=(px, py),
                hole_positions=row_positions(cards_center, HOLE_CARDS_PER_SEAT),
                name=name,
            )
        )
    community = row_positions((cx, cy), COMMUNITY_CARD_COUNT)
    deck = (cx, cy + CARD_HEIGHT + 40)
    pot = (cx, cy - CARD_HEIGHT)
    return TableLayout(
        seats=seats,
        community_positions=community,
        deck_position=deck,
        pot_position=pot,
        width=window_width,
        height=window_height,
        names=[s.name for s in seats],
    )
