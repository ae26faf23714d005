import random

import gymnasium as gym
from gymnasium import spaces
import numpy as np
from game2048 import DEFAULT_SIZE, GameManager, TileSpawner, legal_directions, slide


class Game2048Env(gym.Env):
    """
    gymnasium environment for 2048 game

    afterstate framework:
    - observation is the board after the random tile
    - afterstate is the board after the move, before the random tile
    - the game never ends itself, the env checks for stuck / win
    """

    metadata = {"render_modes": ["human", "ansi"]}

    def __init__(self, size=DEFAULT_SIZE, win_tile=None, max_steps=None, render_mode=None):
        super().__init__()

        self.size = size
        self.win_tile = win_tile
        self.max_steps = max_steps
        self.render_mode = render_mode

        self.game = GameManager(size)
        self.steps = 0

        # actions -> 4 possible moves
        # 0 = up, 1 = down, 2 = left, 3 = right
        self.action_space = spaces.Discrete(4)

        # raw tile values, not log2
        self.observation_space = spaces.Box(
            low=0,
            high=2 ** 17,
            shape=(size, size),
            dtype=np.int32
        )

        # map actions to game directions
        self.action_to_direction = {
            0: 'up',
            1: 'down',
            2: 'left',
            3: 'right'
        }
        self.direction_to_action = {d: a for a, d in self.action_to_direction.items()}

        # track afterstate (board after move, before random tile)
        self.last_afterstate = None

    def _get_observation(self):
        return np.array(self.game.get_board().values(), dtype=np.int32)

    def _direction(self, action):
        if not self.action_space.contains(action):
            raise ValueError(f"invalid action: {action!r}")
        return self.action_to_direction[int(action)]

    def legal_actions(self):
        """actions that change the board"""
        return sorted(self.direction_to_action[d.value]
                      for d in legal_directions(self.game.get_board().values()))

    def get_afterstate(self, action):
        """
        get the afterstate: board after move but before random tile

        args:
            action: 0=up, 1=down, 2=left, 3=right

        returns:
            afterstate_board: board after move (before random tile), None if invalid
            reward: points earned from merging
            valid: if the move changes the board
        """
        before = self.game.get_board().values()
        after, points = slide(before, self._direction(action))
        if after == before:
            return None, 0, False
        return np.array(after, dtype=np.int32), points, True

    def reset(self, seed=None, options=None):
        """reset the game to start a new episode"""
        super().reset(seed=seed)

        # spawner draws from the env's seeded generator
        spawner = TileSpawner(rng=random.Random(int(self.np_random.integers(2 ** 32))))
        self.game = GameManager(self.size, spawner=spawner)
        self.steps = 0
        self.last_afterstate = None

        observation = self._get_observation()
        info = {
            "score": self.game.get_score(),
            "max_tile": self.game.get_board().max_tile()
        }
        return observation, info

    def step(self, action):
        """
        take one step in the environment

        reward is the merge score of the move, 0 when the board did not change
        """
        afterstate_board, points, valid = self.get_afterstate(action)
        direction = self._direction(action)

        # the game spawns the random tile itself
        moved = self.game.move(direction)
        self.steps += 1

        reward = float(points) if moved else 0.0
        observation = self._get_observation()

        board = self.game.get_board()
        legal = self.legal_actions()
        max_tile = board.max_tile()

        terminated = not legal
        if self.win_tile is not None and max_tile >= self.win_tile:
            terminated = True
        truncated = self.max_steps is not None and self.steps >= self.max_steps and not terminated

        if valid:
            self.last_afterstate = afterstate_board

        info = {
            "score": self.game.get_score(),
            "moved": moved,
            "points_gained": points if moved else 0,
            "afterstate": afterstate_board if valid else None,
            "max_tile": max_tile,
            "legal_actions": legal
        }

        return observation, reward, terminated, truncated, info

    def render(self):
        """display the game state"""
        text = f"Score: {self.game.get_score()}\n{self.game.get_board().pretty()}"
        if self.render_mode == "ansi":
            return text
        print(text)

    def close(self):
        """clean up resources"""
        pass
