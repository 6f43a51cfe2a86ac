"""
Static ship overlap density.

Heat computed purely from the board size and the fleet, before anything has
been observed. No masking and no sunk-ship detection take place here; use
targeting.heatmap_generator once shots have been recorded.
"""

import numpy as np


def _windows_covering(index, grid_size, ship_size):
    # Number of length-ship_size windows along one line that include index
    return min(index + 1, grid_size - index, ship_size, grid_size - ship_size + 1)


def ship_overlap(grid_size, ships):
    """
    Count how many ship placements overlap each cell of an empty board.

    For every ship the horizontal windows covering a cell and the vertical
    windows covering it are added together (a length-1 ship counts once), so
    on an empty board the result matches the dynamic placement count.

    Args:
        grid_size (int): Side length of the board
        ships (list): Ship lengths; lengths outside [1, grid_size] are skipped

    Returns:
        numpy.ndarray: Integer grid of overlap counts
    """
    n = max(grid_size, 0)
    overlap = np.zeros((n, n), dtype=np.int64)
    for ship_size in ships:
        if ship_size < 1 or ship_size > n:
            continue
        if ship_size == 1:
            overlap += 1
            continue
        line = np.array([_windows_covering(i, n, ship_size) for i in range(n)], dtype=np.int64)
        overlap += line[:, None] + line[None, :]
    return overlap


def hit_chance(grid_size, ships):
    """
    Overlap density normalized into [0, 1].

    Returns:
        numpy.ndarray: float32 grid, 1.0 at the densest cells, zeros when nothing fits
    """
    overlap = ship_overlap(grid_size, ships).astype(np.float32)
    max_val = overlap.max() if overlap.size else 0
    if max_val > 0:
        overlap /= max_val
    return overlap
