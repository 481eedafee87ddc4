from __future__ import annotations

import math
from typing import TYPE_CHECKING

from tablefx.components.card_face import CardFace
from tablefx.components.card_slot import CardSlot
from tablefx.components.flash_overlay import FlashOverlay
from tablefx.components.floating_label import FloatingLabel
from tablefx.components.pot_chip import PotChip
from tablefx.components.seat_panel import SeatPanel
from tablefx.components.transform import Transform
from tablefx.components.visibility import Visibility
from tablefx.constants import CARD_HEIGHT, CARD_WIDTH, SEAT_PANEL_HEIGHT, SEAT_PANEL_WIDTH

if TYPE_CHECKING:
    from tablefx.systems.render import RenderSystem

CARD_FRONT = (245, 245, 240)
CARD_BACK = (150, 30, 45)
CARD_EDGE = (20, 20, 20)
PANEL_FILL = (25, 60, 40)
PANEL_EDGE = (200, 180, 90)
CHIP_FILL = (230, 190, 40)
FLASH_FILL = (255, 255, 0)
STACK_TEXT = (60, 200, 80)
RED_SUITS = ("h", "d")

CHIP_RADIUS = 18


def quad(transform: Transform, width: float, height: float) -> list[tuple[float, float]]:
    """Corners of a rotated, flip-squashed rectangle centered on the transform."""
    squash = abs(math.cos(math.radians(transform.flip_angle)))
    half_w = width * transform.scale * squash / 2
    half_h = height * transform.scale / 2
    angle = math.radians(transform.rotation)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    corners = [(-half_w, -half_h), (half_w, -half_h), (half_w, half_h), (-half_w, half_h)]
    return [
        (transform.x + cx * cos_a - cy * sin_a, transform.y + cx * sin_a + cy * cos_a)
        for cx, cy in corners
    ]


def _with_alpha(color: tuple[int, int, int], opacity: float) -> tuple[int, int, int, int]:
    alpha = int(round(max(0.0, min(1.0, opacity)) * 255))
    return color[0], color[1], color[2], alpha


class CardRenderer:
    """Draws seat panels, active cards, the pot chip and the winner effects from their Transforms."""

    def __init__(self, render_system: RenderSystem):
        self._rs = render_system

    def render(self, arcade, headless: bool) -> None:
        rs = self._rs
        world = rs.world
        rs._last_draw_coords = {}

        for ent, (panel, transform) in world.get_components(SeatPanel, Transform):
            rs._last_draw_coords[ent] = (transform.x, transform.y)
            if headless:
                continue
            points = quad(transform, SEAT_PANEL_WIDTH, SEAT_PANEL_HEIGHT)
            arcade.draw_polygon_filled(points, _with_alpha(PANEL_FILL, transform.opacity))
            arcade.draw_polygon_outline(points, _with_alpha(PANEL_EDGE, transform.opacity), 2)
            arcade.draw_text(
                panel.name,
                transform.x,
                transform.y - SEAT_PANEL_HEIGHT * 0.38 * transform.scale,
                arcade.color.WHITE,
                12,
                anchor_x="center",
                anchor_y="center",
            )

        cards = []
        for ent, (slot, transform, visibility) in world.get_components(CardSlot, Transform, Visibility):
            if not visibility.active:
                continue
            cards.append((ent, slot, transform))
        # Community cards under hole cards; cards in flight (deal arc) drawn last.
        cards.sort(key=lambda item: (item[1].kind != "community", item[1].index))
        for ent, slot, transform in cards:
            rs._last_draw_coords[ent] = (transform.x, transform.y)
            if headless:
                continue
            face = world.component_for_entity(ent, CardFace) if world.has_component(ent, CardFace) else CardFace()
            self._draw_card(arcade, transform, face)

        for ent, (chip, transform, visibility) in world.get_components(PotChip, Transform, Visibility):
            if not visibility.active:
                continue
            rs._last_draw_coords[ent] = (transform.x, transform.y)
            if headless:
                continue
            arcade.draw_circle_filled(
                transform.x,
                transform.y,
                CHIP_RADIUS * transform.scale,
                _with_alpha(CHIP_FILL, transform.opacity),
            )
            if chip.label:
                arcade.draw_text(
                    chip.label,
                    transform.x,
                    transform.y - CHIP_RADIUS * 1.8 * transform.scale,
                    _with_alpha(CHIP_FILL, transform.opacity),
                    14,
                    anchor_x="center",
                    anchor_y="center",
                )

        for ent, (label, transform, visibility) in world.get_components(FloatingLabel, Transform, Visibility):
            if not visibility.active:
                continue
            rs._last_draw_coords[ent] = (transform.x, transform.y)
            if headless:
                continue
            arcade.draw_text(
                label.text,
                transform.x,
                transform.y,
                _with_alpha(STACK_TEXT, transform.opacity),
                20,
                anchor_x="center",
                anchor_y="center",
            )

        # Flash goes over everything else.
        for ent, (overlay, transform, visibility) in world.get_components(FlashOverlay, Transform, Visibility):
            if not visibility.active:
                continue
            rs._last_draw_coords[ent] = (transform.x, transform.y)
            if headless:
                continue
            arcade.draw_polygon_filled(
                quad(transform, overlay.width, overlay.height),
                _with_alpha(FLASH_FILL, transform.opacity),
            )

    def _draw_card(self, arcade, transform: Transform, face: CardFace) -> None:
        points = quad(transform, CARD_WIDTH, CARD_HEIGHT)
        showing_front = face.face_up and face.card is not None
        fill = CARD_FRONT if showing_front else CARD_BACK
        arcade.draw_polygon_filled(points, _with_alpha(fill, transform.opacity))
        arcade.draw_polygon_outline(points, _with_alpha(CARD_EDGE, transform.opacity), 1)
        if showing_front and transform.flip_angle < 60:
            suit = face.card[-1:].lower()
            color = (190, 20, 30) if suit in RED_SUITS else (10, 10, 10)
            arcade.draw_text(
                face.card,
                transform.x,
                transform.y,
                _with_alpha(color, transform.opacity),
                14 * transform.scale,
                anchor_x="center",
                anchor_y="center",
            )
