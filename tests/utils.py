import numpy as np

from targeting.battleship_game import CellState


def _new_board(size=4):
    return np.zeros((size, size), dtype=np.int8)


def _board(*cells, size=4, state=CellState.HIT):
    board = _new_board(size)
    for r, c in cells:
        board[r, c] = state
    return board
