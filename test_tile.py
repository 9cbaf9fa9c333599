"""
Tests for tile animation and buffered merge outcomes
"""
import os
import sys

# Add src directory to path so we can import our modules
sys.path.append(os.path.join(os.path.dirname(__file__), 'src'))

from geometry import pixel_pos  # noqa: E402
from tile import MOVEMENT_FRAMES, Tile, TileState  # noqa: E402


def test_new_tile_is_at_rest():
    tile = Tile(2, 1, 2)
    assert (tile.x, tile.y) == (pixel_pos(2), pixel_pos(1))
    assert not tile.is_in_motion()
    assert not tile.has_pending_outcome()
    assert tile.resolved_value == 2


def test_target_on_same_cell_is_ignored():
    tile = Tile(2, 0, 0)
    tile.set_target_position(0, 0)
    assert not tile.is_in_motion()


def test_slides_one_cell_without_overshoot():
    tile = Tile(2, 0, 0)
    tile.set_target_position(0, 1)
    target = pixel_pos(1)
    assert (tile.row, tile.col) == (0, 1)
    assert tile.is_in_motion()
    assert tile.target_y is None

    positions = []
    for _ in range(5):
        tile.tick()
        positions.append(tile.x)

    # first tick only picks the speed, then a quarter of the way per tick
    assert positions == [9, 16, 23, 30, 37]
    assert tile.x == target
    assert tile.is_in_motion()

    tile.tick()
    assert not tile.is_in_motion()
    assert tile.x == target


def test_slides_up_three_cells():
    tile = Tile(4, 3, 2)
    tile.set_target_position(0, 2)
    for _ in range(MOVEMENT_FRAMES + 2):
        tile.tick()
    assert tile.y == pixel_pos(0)
    assert tile.x == pixel_pos(2)
    assert not tile.is_in_motion()


def test_uneven_distance_is_clamped():
    tile = Tile(2, 0, 0)
    tile.target_x = tile.x + 10

    for _ in range(10):
        tile.tick()
        assert tile.x <= pixel_pos(0) + 10

    assert tile.x == pixel_pos(0) + 10
    assert not tile.is_in_motion()


def test_buffered_merge_applies_after_countdown():
    tile = Tile(8, 0, 0)
    tile.buffer_merge_result(16)
    assert tile.state is TileState.PENDING_MERGE
    assert tile.has_pending_outcome()
    assert tile.resolved_value == 16

    for _ in range(MOVEMENT_FRAMES - 1):
        tile.tick()
        assert tile.value == 8

    tile.tick()
    assert tile.value == 16
    assert tile.state is TileState.IDLE
    assert not tile.has_pending_outcome()
    assert not tile.removed


def test_buffered_removal():
    tile = Tile(8, 0, 1)
    tile.buffer_removal()
    assert tile.resolved_value == 0

    for _ in range(MOVEMENT_FRAMES - 1):
        tile.tick()
    assert not tile.removed

    tile.tick()
    assert tile.removed
    assert tile.value == 8
    assert not tile.has_pending_outcome()


def test_rebuffering_restarts_countdown():
    tile = Tile(2, 0, 0)
    tile.buffer_merge_result(4)
    tile.tick()
    tile.tick()
    tile.buffer_merge_result(4)
    assert tile.buffer_counter == MOVEMENT_FRAMES
