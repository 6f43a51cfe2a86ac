"""
Neighbourhood offsets for grid cells.

Three fixed patterns are used when reasoning about ship placement:

- DIAGONAL: the 4 corner-touching cells
- RING: all 8 surrounding cells
- CROSS: the 4 edge-touching cells

Example:
    ```python
    list(neighbors(4, (0, 0), CROSS))   # [(1, 0), (0, 1)]
    ```
"""

DIAGONAL = ((-1, -1), (-1, 1), (1, -1), (1, 1))
CROSS = ((-1, 0), (0, -1), (0, 1), (1, 0))
RING = ((-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1))


def neighbors(grid_size, cell, offsets):
    """
    Yield the in-bounds neighbours of a cell.

    Args:
        grid_size (int): Side length of the square board
        cell (tuple): (row, col) of the centre cell
        offsets (tuple): One of DIAGONAL, RING or CROSS

    Yields:
        tuple: (row, col) of each neighbour inside [0, grid_size)
    """
    r, c = cell
    for dr, dc in offsets:
        nr, nc = r + dr, c + dc
        if 0 <= nr < grid_size and 0 <= nc < grid_size:
            yield nr, nc
