WINDOW_WIDTH = 1024
WINDOW_HEIGHT = 720

CARD_WIDTH = 60
CARD_HEIGHT = 84
# Horizontal gap between the two hole cards of a seat and between community cards.
CARD_GAP = 8

HOLE_CARDS_PER_SEAT = 2
COMMUNITY_CARD_COUNT = 5

# Seat panel footprint (name plate behind the hole cards).
SEAT_PANEL_WIDTH = 150
SEAT_PANEL_HEIGHT = 120

# ============================================================================
# TIMING (seconds)
# ============================================================================
DEAL_DURATION = 0.4
DEAL_STAGGER = 0.15          # delay between consecutive dealt cards
DEAL_ARC_HEIGHT = 50.0       # peak of the sine arc added to the deal path
DEAL_SPIN_DEGREES = 360.0

FLIP_DURATION = 0.3          # both halves together
DEAL_TO_FLIP_GAP = 0.1
STREET_SETTLE_DELAY = 0.5    # pause before a community street is dealt

REVEAL_GAP = 0.1             # between showdown flips of the same seat

FOLD_DURATION = 0.5
FOLD_POST_DELAY = 0.0
FOLD_TILT_DEGREES = 15.0

PULSE_SCALE = 1.05
PULSE_DURATION = 0.2

POT_TRANSFER_DURATION = 1.5
POT_SCALE_SWELL = 0.2

CELEBRATION_SCALE = 1.2
CELEBRATION_PULSE_DURATION = 0.3
WINNER_FLASH_DURATION = 0.5
WINNER_FLASH_OPACITY = 0.5    # yellow overlay fades from this to 0

STACK_MARKER_DURATION = 2.0  # "+amount" marker above the winner
STACK_MARKER_RISE = 50.0

DEFAULT_DT = 1 / 60
