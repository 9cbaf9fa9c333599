"""
board layout helpers: cell indexing, directions and tile pixel positions
"""
from enum import Enum


BOARD_ROWS = 4
BOARD_COLS = 4
BOARD_SLOTS = BOARD_ROWS * BOARD_COLS

# pixel layout of the 128x128 map the board was designed for
TOP_LEFT_TILE = 9
TILE_OFFSET = 28
TILE_SIZE = 25
BOARD_PIXELS = 128


class Direction(Enum):
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def delta(self):
        """(row, col) step toward the wall of this direction"""
        return self.value

    @classmethod
    def parse(cls, direction):
        """accept a Direction or its name ('up', 'LEFT', ...), None otherwise"""
        if isinstance(direction, cls):
            return direction
        if isinstance(direction, str):
            return cls.__members__.get(direction.upper())
        return None


def in_bounds(row, col):
    return 0 <= row < BOARD_ROWS and 0 <= col < BOARD_COLS


def index_from_row_col(row, col):
    assert in_bounds(row, col), f"cell ({row}, {col}) is off the board"
    return row * BOARD_COLS + col


def row_col_from_index(index):
    assert 0 <= index < BOARD_SLOTS, f"slot {index} is off the board"
    return divmod(index, BOARD_COLS)


def pixel_pos(cell):
    """pixel offset of the top left corner of a tile in row or column `cell`"""
    return cell * TILE_OFFSET + TOP_LEFT_TILE


def traversal_order(direction):
    """
    slot indices ordered so tiles nearest the destination wall come first

    UP and DOWN walk row-major, LEFT and RIGHT walk column-major.
    """
    if direction is Direction.UP:
        return list(range(BOARD_SLOTS))
    if direction is Direction.DOWN:
        return list(reversed(range(BOARD_SLOTS)))

    cols = range(BOARD_COLS)
    if direction is Direction.RIGHT:
        cols = reversed(cols)
    return [row * BOARD_COLS + col for col in cols for row in range(BOARD_ROWS)]


def adjacent_pairs():
    """all 24 unique horizontally or vertically adjacent cell pairs"""
    for row in range(BOARD_ROWS):
        for col in range(BOARD_COLS):
            for d_row, d_col in ((0, 1), (1, 0)):
                other = (row + d_row, col + d_col)
                if in_bounds(*other):
                    yield (row, col), other
