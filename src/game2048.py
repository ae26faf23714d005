"""
core game logic and mechanics

the board is an immutable snapshot; GameManager owns the current snapshot
and the score and replaces both on every move that changes the board.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

DEFAULT_SIZE = 4
WIN_TILE = 2048
SPAWN_FOUR_PROBABILITY = 0.1

Coord = Tuple[int, int]
Grid = Tuple[Tuple[int, ...], ...]


class GameError(Exception):
    """base class for game engine errors"""


class InvalidBoardSizeError(GameError, ValueError):
    pass


class InvalidDirectionError(GameError, ValueError):
    pass


class InvalidSnapshotError(GameError, ValueError):
    pass


class Direction(Enum):
    LEFT = 'left'
    RIGHT = 'right'
    UP = 'up'
    DOWN = 'down'

    @classmethod
    def parse(cls, value: Any) -> 'Direction':
        """accept a Direction or its name ('left', 'UP', ...)"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidDirectionError(f"invalid direction: {value!r}")


@dataclass(frozen=True)
class Cell:
    value: int = 0
    is_new: bool = False

    @property
    def empty(self):
        return self.value == 0


@dataclass(frozen=True)
class Board:
    """Read-only snapshot of a square grid of cells."""
    size: int
    cells: Tuple[Cell, ...]  # row-major, length == size * size

    @classmethod
    def empty(cls, size: int) -> 'Board':
        return cls(size, tuple(Cell() for _ in range(size * size)))

    @classmethod
    def from_values(cls, values: Sequence[Sequence[int]]) -> 'Board':
        """build a board from a value grid, no cell marked new"""
        size = len(values)
        return cls(size, tuple(Cell(int(v)) for row in values for v in row))

    def at(self, r: int, c: int) -> Cell:
        return self.cells[r * self.size + c]

    def rows(self) -> Tuple[Tuple[Cell, ...], ...]:
        n = self.size
        return tuple(self.cells[r * n:(r + 1) * n] for r in range(n))

    def values(self) -> Grid:
        return tuple(tuple(cell.value for cell in row) for row in self.rows())

    def empty_cells(self) -> List[Coord]:
        return [(i // self.size, i % self.size)
                for i, cell in enumerate(self.cells) if cell.empty]

    def max_tile(self) -> int:
        return max(cell.value for cell in self.cells)

    def with_tile(self, coord: Coord, value: int) -> 'Board':
        """copy of the board with one cell set and marked new"""
        index = coord[0] * self.size + coord[1]
        cells = [Cell(cell.value) for cell in self.cells]
        cells[index] = Cell(value, True)
        return Board(self.size, tuple(cells))

    def pretty(self):
        width = max(4, len(str(self.max_tile())))
        border = "-" * ((width + 1) * self.size + 1)
        lines = [border]
        for row in self.rows():
            text = "|".join(
                (" " * width) if cell.empty else f"{cell.value:{width}}"
                for cell in row
            )
            lines.append(f"|{text}|")
        lines.append(border)
        return "\n".join(lines)


def compact_line(line: Sequence[int]) -> Tuple[List[int], int]:
    """
    slide a line toward index 0 and merge equal neighbours.

    a tile produced by a merge is not merged again in the same pass, so
    [2, 2, 2, 0] becomes [4, 2, 0, 0] and scores 4.

    returns:
        new_line: line of the same length, zeros at the end
        points: sum of the merged values
    """
    tiles = [v for v in line if v != 0]
    merged: List[int] = []
    points = 0
    j = 0
    while j < len(tiles):
        if j < len(tiles) - 1 and tiles[j] == tiles[j + 1]:
            value = tiles[j] * 2
            merged.append(value)
            points += value
            j += 2
        else:
            merged.append(tiles[j])
            j += 1

    merged += [0] * (len(line) - len(merged))
    return merged, points


def rotate_clockwise(values):
    """(i, j) -> (j, n-1-i)"""
    n = len(values)
    rotated = [[0] * n for _ in range(n)]
    for i in range(n):
        for j in range(n):
            rotated[j][n - 1 - i] = values[i][j]
    return rotated


def rotate_counter_clockwise(values):
    """inverse of rotate_clockwise"""
    n = len(values)
    rotated = [[0] * n for _ in range(n)]
    for i in range(n):
        for j in range(n):
            rotated[n - 1 - j][i] = values[i][j]
    return rotated


# direction -> (rotate, reverse); lines are always compacted toward index 0
_TRANSFORMS: Dict[Direction, Tuple[bool, bool]] = {
    Direction.LEFT: (False, False),
    Direction.RIGHT: (False, True),
    Direction.UP: (True, True),
    Direction.DOWN: (True, False),
}


def slide(values: Sequence[Sequence[int]], direction: Any) -> Tuple[Grid, int]:
    """
    move every line of a value grid toward one edge without spawning

    pure function: the input grid is not modified.

    returns:
        values: the resulting grid
        points: score earned by the merges of this move
    """
    rotate, reverse = _TRANSFORMS[Direction.parse(direction)]

    grid = [list(row) for row in values]
    if rotate:
        grid = rotate_clockwise(grid)

    points = 0
    for i, row in enumerate(grid):
        if reverse:
            row = row[::-1]
        new_row, row_points = compact_line(row)
        if reverse:
            new_row = new_row[::-1]
        grid[i] = new_row
        points += row_points

    if rotate:
        grid = rotate_counter_clockwise(grid)
    return tuple(tuple(row) for row in grid), points


def legal_directions(values):
    """directions that would change the grid; empty means the game is stuck"""
    current = tuple(tuple(row) for row in values)
    return [d for d in Direction if slide(current, d)[0] != current]


class TileSpawner:
    """
    random tile placement

    picks an empty cell uniformly and a value of 2 (90%) or 4 (10%).
    seed it for reproducible games or replace it with a stub in tests.
    """

    def __init__(self, seed=None, rng=None):
        self.rng = rng if rng is not None else random.Random(seed)

    def choose_cell(self, empty_cells):
        return self.rng.choice(list(empty_cells))

    def choose_value(self):
        return 4 if self.rng.random() < SPAWN_FOUR_PROBABILITY else 2

    def spawn(self, board):
        empty_cells = board.empty_cells()
        if not empty_cells:
            return board
        coord = self.choose_cell(empty_cells)
        return board.with_tile(coord, self.choose_value())


def _is_tile_value(value):
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return value == 0 or (value >= 2 and value & (value - 1) == 0)


def _check_size(size):
    if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
        raise InvalidBoardSizeError(f"board size must be a positive integer, got {size!r}")
    return size


class GameManager:
    """
    owns the board and the score of one game

    move() is the only gameplay mutation. callers read the board through
    get_board(), which returns an immutable snapshot.
    """

    def __init__(self, size: int = DEFAULT_SIZE,
                 spawner: Optional[TileSpawner] = None,
                 seed: Optional[int] = None):
        self._size = _check_size(size)
        self.spawner = spawner if spawner is not None else TileSpawner(seed)
        self.reset()

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any],
                      spawner: Optional[TileSpawner] = None,
                      seed: Optional[int] = None) -> 'GameManager':
        """restore a saved game without spawning"""
        try:
            size = data["size"]
            rows = data["board"]
            score = data.get("score", 0)
        except (KeyError, TypeError, AttributeError) as e:
            raise InvalidSnapshotError(f"malformed snapshot: {e}") from e

        try:
            size = _check_size(size)
        except InvalidBoardSizeError as e:
            raise InvalidSnapshotError(str(e)) from e
        try:
            square = len(rows) == size and all(len(row) == size for row in rows)
        except TypeError:
            square = False
        if not square:
            raise InvalidSnapshotError(f"board must be {size}x{size}")
        for row in rows:
            for value in row:
                if not _is_tile_value(value):
                    raise InvalidSnapshotError(f"invalid tile value: {value!r}")
        if not isinstance(score, int) or isinstance(score, bool) or score < 0:
            raise InvalidSnapshotError(f"invalid score: {score!r}")

        game = cls.__new__(cls)
        game._size = size
        game.spawner = spawner if spawner is not None else TileSpawner(seed)
        game._board = Board.from_values(rows)
        game._score = score
        game._version = 0
        return game

    @property
    def size(self) -> int:
        return self._size

    @property
    def board(self) -> Board:
        return self._board

    @property
    def score(self) -> int:
        return self._score

    @property
    def version(self) -> int:
        """number of moves that changed the board"""
        return self._version

    def get_board(self) -> Board:
        return self._board

    def get_score(self) -> int:
        return self._score

    def reset(self) -> None:
        """start over with an empty board and two random tiles"""
        board = Board.empty(self._size)
        board = self.spawner.spawn(board)
        self._board = self.spawner.spawn(board)
        self._score = 0
        self._version = 0

    def move(self, direction: Any) -> bool:
        """
        move all tiles toward one edge, merge them and spawn a new tile

        args:
            direction: Direction or one of 'left', 'right', 'up', 'down'

        returns:
            True if the board changed; otherwise board and score are untouched
        """
        direction = Direction.parse(direction)
        before = self._board.values()
        after, points = slide(before, direction)
        if after == before:
            return False

        self._board = self.spawner.spawn(Board.from_values(after))
        self._score += points
        self._version += 1
        return True

    def snapshot(self) -> Dict[str, Any]:
        """serialisable save-state; is_new is not kept"""
        return {
            "size": self._size,
            "board": [list(row) for row in self._board.values()],
            "score": self._score,
        }

    def __repr__(self) -> str:
        return f"GameManager(size={self._size}, score={self._score}, version={self._version})"
