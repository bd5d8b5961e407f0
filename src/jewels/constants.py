GRID_ROWS = 10
GRID_COLS = 10
BOTTOM_MARGIN = 20

# Tile palette: colour name -> RGB. The bomb type is registered but never spawned.
JEWEL_COLORS = {
    'red':    (220, 40, 40),
    'blue':   (40, 90, 220),
    'green':  (40, 170, 70),
    'yellow': (235, 210, 50),
    'purple': (140, 60, 180),
}
BOMB_TYPE = 'bomb'
BOMB_COLOR = (0, 0, 0)

# Matching and scoring
MIN_MATCH = 3
BOMB_MATCH = 5
BOMB_RADIUS = 2  # Chebyshev distance cleared around an activated bomb (5x5 area)
POINTS_PER_TILE = 10

# Input
DOUBLE_CLICK_THRESHOLD = 0.3  # seconds between two clicks on the same bomb

# Animation durations (seconds)
SWAP_DURATION = 0.2
FADE_DURATION = 0.3
FALL_DURATION = 0.25
REFILL_DURATION = 0.25

# Board maximum footprint relative to window (percentage of window width/height).
BOARD_MAX_WIDTH_PCT = 0.90
BOARD_MAX_HEIGHT_PCT = 0.90
# Height of the score bar drawn above the board.
SCORE_BAR_HEIGHT = 40
MIN_TILE_SIZE = 20
# Gap between neighbouring jewels in pixels.
TILE_PADDING = 2

# Mouse press debounce (see MouseThrottle); must stay below DOUBLE_CLICK_THRESHOLD.
THROTTLE_MIN_INTERVAL = 0.05
THROTTLE_MIN_DISTANCE = 2.0
