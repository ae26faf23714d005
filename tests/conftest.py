import pytest

from game2048 import GameManager, TileSpawner


class LastCellSpawner(TileSpawner):
    """always fills the last empty cell with a fixed value"""

    def __init__(self, value=2):
        super().__init__(seed=0)
        self.value = value

    def choose_cell(self, empty_cells):
        return list(empty_cells)[-1]

    def choose_value(self):
        return self.value


@pytest.fixture
def stub_spawner():
    return LastCellSpawner()


@pytest.fixture
def make_game(stub_spawner):
    def _make(rows, score=0, spawner=None):
        data = {"size": len(rows), "board": rows, "score": score}
        return GameManager.from_snapshot(data, spawner=spawner or stub_spawner)
    return _make
