GRID_ROWS = 8
GRID_COLS = 8
TILE_SIZE = 50
BOTTOM_MARGIN = 20

# Board maximum footprint relative to window (percentage of window width/height).
# The render/layout code will size the board so it does not exceed either percentage.
BOARD_MAX_WIDTH_PCT = 0.75
BOARD_MAX_HEIGHT_PCT = 0.90
MIN_TILE_SIZE = 20

# ============================================================================
# RULES
# ============================================================================
MIN_MATCH_LENGTH = 3
MATCH_BONUS = 10  # points per cleared gem, every cascade round

# Difficulty 1..3 -> number of distinct gem types on the board.
DIFFICULTY_TYPE_COUNTS = {
    1: 5,
    2: 6,
    3: 7,
}
DEFAULT_DIFFICULTY = 2

# ============================================================================
# TIMING (seconds)
# ============================================================================
FRAME_DT = 1 / 60
BASE_SWAP_DURATION = 0.2
BASE_DISAPPEAR_DURATION = 0.3
BASE_FALL_DURATION = 0.2

# Speed dial 1 (very slow) .. 5 (very fast) -> multiplier applied to base durations.
SPEED_DURATION_MULTIPLIERS = {
    1: 2.5,
    2: 1.8,
    3: 1.0,
    4: 0.6,
    5: 0.3,
}
DEFAULT_SPEED = 3

# ============================================================================
# PALETTE
# ============================================================================
GEM_COLORS = (
    (231, 76, 60),    # ruby
    (46, 204, 113),   # emerald
    (52, 152, 219),   # sapphire
    (241, 196, 15),   # topaz
    (155, 89, 182),   # amethyst
    (26, 188, 156),   # aquamarine
    (230, 126, 34),   # amber
)
