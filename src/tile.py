"""
single board tile: value, animated position and buffered merge outcome
"""
from enum import Enum

from geometry import pixel_pos


# ticks a move takes to play out, shared with the board's spawn countdown
MOVEMENT_FRAMES = 4


class TileState(Enum):
    IDLE = "idle"
    PENDING_MERGE = "pending_merge"
    PENDING_REMOVAL = "pending_removal"


class Tile:
    """
    a numbered tile

    the logical cell (row, col) changes the moment a move is resolved, while
    the pixel position (x, y) catches up over the next few ticks. merges are
    buffered the same way: the new value or the removal is applied once the
    buffer countdown elapses, so the frontend never shows a merge before the
    tiles have met.
    """

    def __init__(self, value, row, col):
        self.value = value
        self.row = row
        self.col = col

        self.x = pixel_pos(col)
        self.y = pixel_pos(row)
        self.target_x = None
        self.target_y = None
        self.rate_x = 0
        self.rate_y = 0

        self.state = TileState.IDLE
        self.buffered_value = 0
        self.buffer_counter = 0
        self.removed = False

    def __repr__(self):
        return f"Tile({self.value}, row={self.row}, col={self.col}, state={self.state.value})"

    @property
    def resolved_value(self):
        """value once the pending outcome is applied (0 for a tile being removed)"""
        if self.state is TileState.PENDING_MERGE:
            return self.buffered_value
        if self.state is TileState.PENDING_REMOVAL:
            return 0
        return self.value

    def is_in_motion(self):
        return (self.target_x is not None or self.target_y is not None
                or self.rate_x != 0 or self.rate_y != 0)

    def has_pending_outcome(self):
        return self.state is not TileState.IDLE

    def set_target_position(self, row, col):
        """move logically to (row, col) and animate toward its pixel position"""
        self.row = row
        self.col = col

        target_x = pixel_pos(col)
        target_y = pixel_pos(row)
        if target_x != self.x:
            self.target_x = target_x
        if target_y != self.y:
            self.target_y = target_y

    def buffer_merge_result(self, value):
        self.state = TileState.PENDING_MERGE
        self.buffered_value = value
        self.buffer_counter = MOVEMENT_FRAMES

    def buffer_removal(self):
        self.state = TileState.PENDING_REMOVAL
        self.buffered_value = 0
        self.buffer_counter = MOVEMENT_FRAMES

    def tick(self):
        """advance the animation and the buffer countdown by one frame"""
        # target reached
        if self.target_x is not None and self.target_x == self.x:
            self.target_x = None
            self.rate_x = 0
        if self.target_y is not None and self.target_y == self.y:
            self.target_y = None
            self.rate_y = 0

        # never overshoot
        if self.target_x is not None and abs(self.rate_x) > abs(self.target_x - self.x):
            self.rate_x = self.target_x - self.x
        if self.target_y is not None and abs(self.rate_y) > abs(self.target_y - self.y):
            self.rate_y = self.target_y - self.y

        self.x += self.rate_x
        self.y += self.rate_y

        # a fresh target gets a constant speed covering it in MOVEMENT_FRAMES ticks
        if self.target_x is not None and self.rate_x == 0:
            self.rate_x = _step(self.target_x - self.x)
        if self.target_y is not None and self.rate_y == 0:
            self.rate_y = _step(self.target_y - self.y)

        if self.buffer_counter > 0:
            self.buffer_counter -= 1
            if self.buffer_counter == 0:
                self._apply_buffered_outcome()

    def _apply_buffered_outcome(self):
        if self.state is TileState.PENDING_MERGE:
            self.value = self.buffered_value
        elif self.state is TileState.PENDING_REMOVAL:
            self.removed = True
        self.state = TileState.IDLE
        self.buffered_value = 0


def _step(distance):
    # int() truncates toward zero for both directions; short hops move in one go
    return int(distance / MOVEMENT_FRAMES) or distance
