import gymnasium as gym
from gymnasium import spaces
import numpy as np

from game import Game2048, GamePhase
from frontend import ConsoleRenderer


class Game2048Env(gym.Env):
    """
    gymnasium environment for 2048 game

    drives the tick-based engine headlessly:
    - each step resolves one move and ticks until the board has settled
    - the observation is the settled board, spawned tile included
    - reaching 2048 either ends the episode or keeps going (continue_after_win)
    """

    metadata = {"render_modes": ["human"]}

    def __init__(self, continue_after_win=True, render_mode=None):
        super().__init__()

        self.game = Game2048()
        self.continue_after_win = continue_after_win
        self.render_mode = render_mode
        self.renderer = ConsoleRenderer()

        # actions -> 4 possible moves
        # 0 = up, 1 = down, 2 = left, 3 = right
        self.action_space = spaces.Discrete(4)

        # observation space -> 4x4 grid of tile values
        self.observation_space = spaces.Box(
            low=0,
            high=131072,  # largest tile reachable on a 4x4 board
            shape=(4, 4),
            dtype=np.int32
        )

        # map actions to game directions
        self.action_to_direction = {
            0: 'up',
            1: 'down',
            2: 'left',
            3: 'right'
        }

    def _get_observation(self):
        return np.array(self.game.board, dtype=np.int32)

    def _get_info(self, moved=False, points=0):
        return {
            "score": self.game.score,
            "moved": moved,
            "points_gained": points,
            "max_tile": self.game.max_tile,
            "phase": self.game.phase.value,
        }

    def reset(self, seed=None, options=None):
        """reset the game to start a new episode"""
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng.seed(seed)

        self.game.reset()
        self.game.settle()

        return self._get_observation(), self._get_info()

    def step(self, action):
        """take one move and let the board settle"""
        direction = self.action_to_direction[int(action)]
        score_before = self.game.score

        moved = self.game.handle_move(direction)
        if moved:
            self.game.settle()

        if self.game.phase is GamePhase.WIN and self.continue_after_win:
            self.game.choose_continue()
            # the board may already be stuck, let the lose check run
            self.game.settle()

        points = self.game.score - score_before
        reward = float(points)
        terminated = self.game.phase in (GamePhase.WIN, GamePhase.LOSE)
        truncated = False

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), reward, terminated, truncated, self._get_info(moved, points)

    def render(self):
        """display the game state"""
        self.renderer.render(self.game)

    def close(self):
        """clean up resources"""
        pass
