"""
Console and matplotlib rendering of boards and heatmaps.

Board symbols:
    '.' : Unknown cell
    'o' : Miss
    'x' : Hit
    'X' : Sunk ship
    'S' : Intact ship (full boards only)
"""

import numpy as np
import matplotlib.pyplot as plt

from targeting.battleship_game import SYMBOLS, CellState
from targeting.heatmap_generator import best_targets

_STATES = {symbol: state for state, symbol in SYMBOLS.items()}


def format_board(board):
    """Rows of space separated cell symbols."""
    return "\n".join(" ".join(SYMBOLS[int(cell)] for cell in row) for row in board)


def parse_board(text):
    """
    Read a board written with the symbols produced by format_board.

    Whitespace inside a row is ignored and blank lines are skipped.

    Raises:
        ValueError: On an unknown symbol or when the rows do not form a square
    """
    rows = []
    for line in text.splitlines():
        symbols = "".join(line.split())
        if not symbols:
            continue
        try:
            rows.append([_STATES[symbol] for symbol in symbols])
        except KeyError as e:
            raise ValueError(f"Unknown cell symbol {e.args[0]!r}") from None

    if any(len(row) != len(rows) for row in rows):
        raise ValueError(f"Board must be square, got {len(rows)} rows of lengths {[len(r) for r in rows]}")
    return np.array(rows, dtype=np.int8).reshape(len(rows), len(rows))


def format_heatmap(scores, board=None):
    """
    Right-aligned scores, one board row per line.

    When the board is given, observed cells show their symbol instead of a
    score and the best targets are wrapped in brackets.
    """
    scores = np.asarray(scores)
    targets = set(best_targets(board, scores)) if board is not None else set()
    width = max(len(str(int(scores.max()))) if scores.size else 1, 1) + 2

    lines = []
    for r, row in enumerate(scores):
        cells = []
        for c, value in enumerate(row):
            if board is not None and board[r][c] != CellState.UNKNOWN:
                text = SYMBOLS[int(board[r][c])]
            elif (r, c) in targets:
                text = f"[{int(value)}]"
            else:
                text = str(int(value))
            cells.append(text.rjust(width))
        lines.append("".join(cells))
    return "\n".join(lines)


def plot_heatmap(scores, board, path, title=None):
    """
    Save a viridis heatmap of the scores with observations drawn on top.

    Returns:
        str: Path of the saved figure
    """
    scores = np.asarray(scores, dtype=np.float32)
    n = scores.shape[0]

    plt.figure(figsize=(max(4, n * 0.6), max(4, n * 0.6)))
    plt.imshow(scores, cmap='viridis', vmin=0)
    plt.colorbar(label='Placements')

    for r in range(n):
        for c in range(n):
            state = int(board[r][c])
            if state != CellState.UNKNOWN:
                plt.text(c, r, SYMBOLS[state], ha='center', va='center', color='white', fontweight='bold')

    for r, c in best_targets(board, scores):
        plt.gca().add_patch(plt.Rectangle((c - 0.5, r - 0.5), 1, 1, fill=False, edgecolor='red', linewidth=2))

    plt.title(title or 'Targeting Heatmap')
    plt.xticks(range(n))
    plt.yticks(range(n))
    plt.savefig(path)
    plt.close()

    return str(path)
