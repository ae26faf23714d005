import random

from game2048_gym import Game2048Env
from rollout import main, play_random_game, summarize


def test_play_random_game_runs_to_the_end():
    env = Game2048Env(size=3)
    result = play_random_game(env, random.Random(0), seed=0)
    assert result["moves"] > 0
    assert result["score"] >= 0
    assert result["max_tile"] >= 4
    assert env.legal_actions() == []


def test_play_random_game_respects_max_steps():
    env = Game2048Env(size=4, max_steps=5)
    result = play_random_game(env, random.Random(0), seed=0)
    assert result["moves"] == 5


def test_summarize():
    summary = summarize([
        {"score": 100, "max_tile": 16, "moves": 40},
        {"score": 300, "max_tile": 32, "moves": 90},
        {"score": 200, "max_tile": 16, "moves": 60},
    ])
    assert summary["games"] == 3
    assert summary["average_score"] == 200
    assert summary["best_score"] == 300
    assert summary["wins"] == 0
    assert summary["max_tiles"] == {16: 2, 32: 1}


def test_summarize_empty():
    assert summarize([])["games"] == 0


def test_main_prints_summary(capsys):
    main(["--episodes", "2", "--size", "3", "--seed", "1"])
    out = capsys.readouterr().out
    assert "Game    1" in out
    assert "Games Played: 2" in out
