"""
core game logic and mechanics

the board is a tick-driven state machine: moves are resolved immediately,
while spawns, merge results and win/lose checks wait for the tiles to settle.
"""
import logging
import random
from dataclasses import dataclass
from enum import Enum

from geometry import (
    BOARD_COLS, BOARD_ROWS, BOARD_SLOTS, Direction, adjacent_pairs, in_bounds,
    index_from_row_col, row_col_from_index, traversal_order,
)
from tile import MOVEMENT_FRAMES, Tile

logger = logging.getLogger(__name__)

WIN_TILE = 2048
# ticks after a move before win/lose is evaluated
WIN_LOSE_DELAY = 10
SPAWN_FOUR_PROBABILITY = 0.1
STARTING_TILES = 2
# upper bound for settle(), far above any real move
MAX_SETTLE_TICKS = 100


class GamePhase(Enum):
    TITLE = "title"
    GAME = "game"
    WIN = "win"
    LOSE = "lose"


class Command(Enum):
    """logical input a frontend translates raw events into"""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    START = "start"
    BACK = "back"
    KEEP_GOING = "keep_going"


class DialogChoice(Enum):
    KEEP_GOING = "keep_going"
    BACK_TO_TITLE = "back_to_title"


@dataclass(frozen=True)
class WinLoseDialog:
    """end of game summary shown in the WIN and LOSE phases"""
    win: bool
    score: int

    @property
    def title(self):
        return "You Win!" if self.win else "Game Over"

    @property
    def choices(self):
        if self.win:
            return (DialogChoice.KEEP_GOING, DialogChoice.BACK_TO_TITLE)
        return (DialogChoice.BACK_TO_TITLE,)


class Game2048:
    def __init__(self, rng=None):
        """
        args:
            rng: random.Random used for spawn slots and values (fresh one if None)
        """
        self.rng = rng if rng is not None else random.Random()
        self.listeners = []

        self.phase = GamePhase.TITLE
        self.tiles = None  # 16 slots of Tile or None while a game exists
        self.tiles_in_limbo = []  # absorbed tiles still animating toward their partner
        self.score = 0
        self.continue_mode = False
        self.dialog = None

        self.movement_counter = 0
        self.win_lose_counter = 0

    # listeners

    def add_listener(self, listener):
        if listener not in self.listeners:
            self.listeners.append(listener)

    def remove_listener(self, listener):
        if listener in self.listeners:
            self.listeners.remove(listener)

    def _notify(self, event_name, *args):
        for listener in list(self.listeners):
            if hasattr(listener, event_name):
                getattr(listener, event_name)(*args)

    # read accessors

    def get_tile(self, row, col):
        """tile at (row, col), None when empty, off the board or without a game"""
        if self.tiles is None or not in_bounds(row, col):
            return None
        return self.tiles[index_from_row_col(row, col)]

    def tile_at(self, index):
        if self.tiles is None or not 0 <= index < BOARD_SLOTS:
            return None
        return self.tiles[index]

    def values(self):
        """resolved value of every slot in index order, 0 for empty"""
        if self.tiles is None:
            return [0] * BOARD_SLOTS
        return [tile.resolved_value if tile else 0 for tile in self.tiles]

    @property
    def board(self):
        values = self.values()
        return [values[row * BOARD_COLS:(row + 1) * BOARD_COLS] for row in range(BOARD_ROWS)]

    @property
    def max_tile(self):
        return max(self.values())

    def all_tiles(self):
        """every live tile, grid tiles first then the ones being absorbed"""
        if self.tiles is None:
            return []
        return [tile for tile in self.tiles if tile is not None] + self.tiles_in_limbo

    def is_settling(self):
        """true while a move is still playing out"""
        return self.movement_counter > 0 or any(
            tile.is_in_motion() or tile.has_pending_outcome() for tile in self.all_tiles()
        )

    # phase control

    def set_phase(self, phase):
        """force a phase transition and reload what that phase shows"""
        if not isinstance(phase, GamePhase):
            logger.debug("ignoring unknown phase %r", phase)
            return False

        old_phase = self.phase
        self.phase = phase
        self._reload()
        logger.info("phase %s -> %s (score %d)", old_phase.name, phase.name, self.score)
        self._notify('on_phase_changed', old_phase, phase, self.score)
        return True

    def _reload(self):
        self.dialog = None
        if self.phase is GamePhase.TITLE:
            self.tiles = None
            self.tiles_in_limbo = []
            self.movement_counter = 0
        elif self.phase is GamePhase.GAME:
            if self.tiles is None:
                self._generate_new_board()
            self.win_lose_counter = 0
        else:
            self.dialog = WinLoseDialog(win=self.phase is GamePhase.WIN, score=self.score)

    def start_new_game(self):
        """enter GAME with a fresh board, only when no game is in progress"""
        if self.tiles is not None:
            return False
        return self.set_phase(GamePhase.GAME)

    def reset(self):
        """drop any current game and start a new one"""
        self.set_phase(GamePhase.TITLE)
        self.start_new_game()

    def choose_continue(self):
        """keep playing past 2048 without further win dialogs"""
        if self.phase is not GamePhase.WIN:
            return False
        self.continue_mode = True
        return self.set_phase(GamePhase.GAME)

    def choose_new_game(self):
        if self.phase not in (GamePhase.WIN, GamePhase.LOSE):
            return False
        return self.set_phase(GamePhase.TITLE)

    def resolve_dialog(self, choice):
        """apply the button picked in the win/lose dialog"""
        if self.dialog is None or choice not in self.dialog.choices:
            return False
        if choice is DialogChoice.KEEP_GOING:
            return self.choose_continue()
        return self.choose_new_game()

    def apply_command(self, command):
        """route a frontend command to the operation valid in the current phase"""
        if self.phase is GamePhase.TITLE:
            if command is Command.START:
                return self.start_new_game()
            return False

        if self.phase is GamePhase.GAME:
            direction = Direction.parse(command.value) if isinstance(command, Command) else None
            if direction is None:
                return False
            return self.handle_move(direction)

        if command is Command.KEEP_GOING:
            return self.resolve_dialog(DialogChoice.KEEP_GOING)
        if command in (Command.BACK, Command.START):
            return self.resolve_dialog(DialogChoice.BACK_TO_TITLE)
        return False

    # board mechanics

    def _generate_new_board(self):
        self.tiles = [None] * BOARD_SLOTS
        self.tiles_in_limbo = []
        self.score = 0
        self.continue_mode = False
        self.movement_counter = 0
        for _ in range(STARTING_TILES):
            self.add_random_tile()

    def find_random_empty_slot(self):
        """uniformly random empty slot index, None when the board is full"""
        empty_slots = [index for index, tile in enumerate(self.tiles) if tile is None]
        if not empty_slots:
            return None
        return self.rng.choice(empty_slots)

    def random_starting_value(self):
        # 90% chance for 2 and 10% chance for 4
        return 4 if self.rng.random() < SPAWN_FOUR_PROBABILITY else 2

    def add_random_tile(self):
        """add a random tile (2 or 4) to an empty slot, returns its index or None"""
        index = self.find_random_empty_slot()
        if index is None:
            return None

        value = self.random_starting_value()
        row, col = row_col_from_index(index)
        self.tiles[index] = Tile(value, row, col)
        logger.debug("spawned %d at (%d, %d)", value, row, col)
        self._notify('on_tile_spawned', index, value)
        return index

    def handle_move(self, direction):
        """
        slide every tile toward the wall of `direction`, merging equal pairs

        returns True if any tile moved or merged. ignored while not in GAME or
        while the previous move is still settling.
        """
        direction = Direction.parse(direction)
        if direction is None or self.phase is not GamePhase.GAME or self.tiles is None:
            return False
        if self.is_settling():
            logger.debug("move %s ignored, tiles still settling", direction.name)
            return False

        d_row, d_col = direction.delta
        moved = False

        for index in traversal_order(direction):
            current = self.tiles[index]
            if current is None:
                continue

            row, col = row_col_from_index(index)
            while True:
                new_row, new_col = row + d_row, col + d_col
                if not in_bounds(new_row, new_col):
                    self._move_tile(index, row, col)
                    break

                adjacent = self.get_tile(new_row, new_col)
                if adjacent is not None:
                    if (adjacent is current or adjacent.has_pending_outcome()
                            or current.has_pending_outcome() or adjacent.value != current.value):
                        self._move_tile(index, row, col)
                        break

                    self._move_tile(index, new_row, new_col)
                    self._merge(current, adjacent, new_row, new_col)
                    moved = True
                    break

                # room to move
                row, col = new_row, new_col
                moved = True

        if moved:
            self.movement_counter = MOVEMENT_FRAMES
            self.win_lose_counter = 0

        self._notify('on_move_resolved', direction, moved)
        return moved

    def _move_tile(self, old_index, new_row, new_col):
        tile = self.tiles[old_index]
        tile.set_target_position(new_row, new_col)
        self.tiles[old_index] = None
        self.tiles[index_from_row_col(new_row, new_col)] = tile

    def _merge(self, keep, lose, row, col):
        new_value = keep.value + lose.value
        keep.buffer_merge_result(new_value)
        lose.buffer_removal()
        self.tiles_in_limbo.append(lose)
        self.score += new_value
        logger.debug("merged into %d at (%d, %d)", new_value, row, col)
        self._notify('on_merge', index_from_row_col(row, col), new_value, new_value)

    def tick(self):
        """advance the game by one frame"""
        if self.tiles is None:
            return

        for tile in self.all_tiles():
            tile.tick()
        self.tiles_in_limbo = [tile for tile in self.tiles_in_limbo if not tile.removed]

        if self.movement_counter > 0:
            self.movement_counter -= 1
            if self.movement_counter == 0:
                self.add_random_tile()

        if self.phase is not GamePhase.GAME:
            return

        self.win_lose_counter += 1
        if self.win_lose_counter > WIN_LOSE_DELAY and not self.is_settling():
            self._check_end_conditions()

    def _check_end_conditions(self):
        if not self.continue_mode and any(tile.value == WIN_TILE for tile in self.all_tiles()):
            self.set_phase(GamePhase.WIN)
        elif self.is_game_over():
            self.set_phase(GamePhase.LOSE)

    def is_game_over(self):
        """check if game is over (board full and no equal neighbours)"""
        if self.tiles is None or any(tile is None for tile in self.tiles):
            return False
        return all(
            self.get_tile(*first).value != self.get_tile(*second).value
            for first, second in adjacent_pairs()
        )

    def settle(self):
        """
        tick until the last move has played out and win/lose has been checked

        for headless frontends that do not run a frame loop. returns the number
        of ticks taken.
        """
        ticks = 0
        while self.tiles is not None and (
            self.is_settling()
            or (self.phase is GamePhase.GAME and self.win_lose_counter <= WIN_LOSE_DELAY)
        ):
            assert ticks < MAX_SETTLE_TICKS, "board failed to settle"
            self.tick()
            ticks += 1
        return ticks
