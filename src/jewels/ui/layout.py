from jewels.constants import (GRID_COLS, GRID_ROWS, BOTTOM_MARGIN, BOARD_MAX_WIDTH_PCT, BOARD_MAX_HEIGHT_PCT,
                              MIN_TILE_SIZE, SCORE_BAR_HEIGHT)

def compute_board_geometry(window_width: int, window_height: int, rows: int = GRID_ROWS, cols: int = GRID_COLS):
    """Return (tile_size, start_x, start_y) for a board that fits the window.

    The board may use BOARD_MAX_WIDTH_PCT of the width and BOARD_MAX_HEIGHT_PCT of the
    height left after the bottom margin and the score bar. Rendering and input mapping
    both go through here so clicks always land on the tile that is drawn.
    """
    max_board_w = window_width * BOARD_MAX_WIDTH_PCT
    max_board_h = (window_height - BOTTOM_MARGIN - SCORE_BAR_HEIGHT) * BOARD_MAX_HEIGHT_PCT
    tile_by_w = max_board_w / cols
    tile_by_h = max_board_h / rows
    tile_size = int(min(tile_by_w, tile_by_h))
    if tile_size < MIN_TILE_SIZE:
        tile_size = MIN_TILE_SIZE
    total_width = cols * tile_size
    start_x = (window_width - total_width) / 2
    start_y = BOTTOM_MARGIN
    return tile_size, start_x, start_y


def cell_at_point(x: float, y: float, window_width: int, window_height: int,
                  rows: int = GRID_ROWS, cols: int = GRID_COLS):
    """Map a window point to (row, col), or None when it falls outside the board."""
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height, rows, cols)
    if x < start_x or x >= start_x + cols * tile_size:
        return None
    if y < start_y or y >= start_y + rows * tile_size:
        return None
    col = int((x - start_x) // tile_size)
    row = int((y - start_y) // tile_size)
    return row, col
