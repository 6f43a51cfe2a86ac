"""
Command line front end for the targeting heatmap.

Example:
    ```
    battleship-heatmap --board board.txt --ships "4 3 3 2 2 2" --plot heat.png
    battleship-heatmap --random --size 9 --seed 7
    battleship-heatmap --static --size 10
    ```
"""

import argparse
import random
import sys

from targeting.battleship_game import BattleshipGame
from targeting.config import load_settings, parse_grid_size, parse_ships
from targeting.heatmap_generator import best_targets, calculate_chances
from targeting.overlap_density import ship_overlap
from targeting.render import format_board, format_heatmap, parse_board, plot_heatmap


def build_parser():
    parser = argparse.ArgumentParser(description='Highlight the cells most likely to hide a ship')
    parser.add_argument('--size', help='Board size (defaults to BATTLESHIP_GRID_SIZE or 10)')
    parser.add_argument('--ships', help='Space separated ship lengths, e.g. "4 3 3 2 2 2"')
    source = parser.add_mutually_exclusive_group()
    source.add_argument('--board', help='Text file with the observed board (. o x X)')
    source.add_argument('--random', action='store_true', help='Score a randomly generated game in progress')
    source.add_argument('--static', action='store_true', help='Show the overlap density of an empty board')
    parser.add_argument('--seed', type=int, help='Seed for --random')
    parser.add_argument('--plot', help='Save a heatmap figure to this path')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    grid_size = parse_grid_size(args.size, default=settings.grid_size) if args.size else settings.grid_size
    ships = parse_ships(args.ships, default=settings.ships) if args.ships else settings.ships

    game = None
    if args.board:
        try:
            with open(args.board) as f:
                board = parse_board(f.read())
        except (OSError, ValueError) as e:
            parser.error(f"could not read board {args.board}: {e}")
        grid_size = board.shape[0]
    elif args.random:
        game = BattleshipGame(grid_size=grid_size, ships=ships, rng=random.Random(args.seed))
        try:
            game.generate_random_state()
        except RuntimeError as e:
            parser.error(str(e))
        board = game.get_hidden_board()
    else:
        board = BattleshipGame(grid_size=grid_size, ships=ships).get_hidden_board()

    if args.static:
        scores = ship_overlap(grid_size, ships)
    else:
        scores = calculate_chances(board, ships)

    print(f"Ships: {' '.join(str(s) for s in ships)}")
    print("\nBoard:")
    print(format_board(board))
    print("\nHeatmap:")
    print(format_heatmap(scores, board))

    targets = best_targets(board, scores)
    if targets:
        print("\nBest targets: " + ", ".join(f"({r}, {c})" for r, c in targets))
    else:
        print("\nNo cell can hold a remaining ship")

    if game is not None:
        print("\nActual ship positions:")
        print(format_board(game.get_board()))

    if args.plot:
        path = plot_heatmap(scores, board, args.plot)
        print(f"\nHeatmap saved to {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
