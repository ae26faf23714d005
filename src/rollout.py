"""
play 2048 games with a random policy and print score statistics
"""

import argparse
import random
from collections import Counter

from game2048 import DEFAULT_SIZE, WIN_TILE
from game2048_gym import Game2048Env


def play_random_game(env, rng, seed=None):
    """play one game to the end, choosing uniformly among legal actions"""
    env.reset(seed=seed)
    legal = env.legal_actions()
    moves = 0
    info = {"score": env.game.get_score(), "max_tile": env.game.get_board().max_tile()}

    while legal:
        _, _, terminated, truncated, info = env.step(rng.choice(legal))
        moves += 1
        legal = info["legal_actions"]
        if terminated or truncated:
            break

    return {"score": info["score"], "max_tile": info["max_tile"], "moves": moves}


def summarize(results):
    games = len(results)
    if games == 0:
        return {"games": 0, "average_score": 0.0, "best_score": 0, "wins": 0, "max_tiles": {}}
    return {
        "games": games,
        "average_score": sum(r["score"] for r in results) / games,
        "best_score": max(r["score"] for r in results),
        "wins": sum(1 for r in results if r["max_tile"] >= WIN_TILE),
        "max_tiles": dict(sorted(Counter(r["max_tile"] for r in results).items())),
    }


def print_summary(summary):
    print("=" * 50)
    print(f"Games Played: {summary['games']}")
    print(f"Average Score: {summary['average_score']:,.0f}")
    print(f"Best Score: {summary['best_score']:,}")
    print(f"Reached {WIN_TILE}: {summary['wins']}")
    print(f"\nMax Tiles Achieved:")
    games = summary["games"] or 1
    for tile, count in summary["max_tiles"].items():
        percentage = count / games * 100
        print(f"  {tile:5d}: {count:3d} times ({percentage:5.1f}%)")
    print("=" * 50)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Play 2048 with a random policy')
    parser.add_argument('--episodes', type=int, default=10, help='Number of games to play')
    parser.add_argument('--size', type=int, default=DEFAULT_SIZE, help='Board size (NxN)')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed')
    parser.add_argument('--max-steps', type=int, default=None, help='Truncate games after this many moves')
    args = parser.parse_args(argv)

    env = Game2048Env(size=args.size, max_steps=args.max_steps)
    rng = random.Random(args.seed)
    results = []

    try:
        for episode in range(args.episodes):
            seed = None if args.seed is None else args.seed + episode
            result = play_random_game(env, rng, seed=seed)
            results.append(result)
            print(f"Game {episode + 1:4d} | Score: {result['score']:7,} | "
                  f"Max Tile: {result['max_tile']:5d} | Moves: {result['moves']}")
    except KeyboardInterrupt:
        print("\nInterrupted by user")
    finally:
        env.close()

    print()
    print_summary(summarize(results))


if __name__ == '__main__':
    main()
