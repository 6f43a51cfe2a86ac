import numpy as np

from targeting.battleship_game import OBSERVATION_STATES, CellState
from targeting.heatmap_generator import best_targets, calculate_chances
from targeting.overlap_density import hit_chance

# Order a cell advances through on each interaction
CYCLE = {
    CellState.UNKNOWN: CellState.MISS,
    CellState.MISS: CellState.HIT,
    CellState.HIT: CellState.SUNK,
    CellState.SUNK: CellState.UNKNOWN,
}


class TargetingSession:
    """
    Owns the observation board of one interactive session.

    The board is the only mutable state; the heatmap is recomputed from it on
    every request. Not thread-safe, callers serialise access.

    Attributes:
        grid_size (int): Side length of the board
        ships (list): Ship lengths in play, sunk ones included
        board (numpy.ndarray): Observation states as an int8 array
    """

    def __init__(self, grid_size, ships):
        self.grid_size = grid_size
        self.ships = list(ships)
        self.board = np.zeros((grid_size, grid_size), dtype=np.int8)

    @classmethod
    def from_settings(cls, settings):
        return cls(settings.grid_size, settings.ships)

    def _check_bounds(self, row, col):
        if not (0 <= row < self.grid_size and 0 <= col < self.grid_size):
            raise IndexError(f"Cell ({row}, {col}) is outside a {self.grid_size}x{self.grid_size} board")

    def cycle(self, row, col):
        """
        Advance a cell to its next observation state.

        Returns:
            int: The new state of the cell
        """
        self._check_bounds(row, col)
        state = CYCLE[int(self.board[row, col])]
        self.board[row, col] = state
        return state

    def mark(self, row, col, state):
        """Set a cell to a specific observation state."""
        if state not in OBSERVATION_STATES:
            raise ValueError(f"Unknown observation state {state!r}")
        self._check_bounds(row, col)
        self.board[row, col] = state

    def reset(self):
        self.board.fill(CellState.UNKNOWN)

    def resize(self, grid_size):
        """Change the board size; all observations are cleared."""
        self.grid_size = grid_size
        self.board = np.zeros((grid_size, grid_size), dtype=np.int8)

    @property
    def has_observations(self):
        return bool(np.any(self.board != CellState.UNKNOWN))

    def chances(self):
        return calculate_chances(self.board, self.ships)

    def targets(self):
        """Unknown cells most likely to hold a ship."""
        return best_targets(self.board, self.chances())

    def heat(self):
        """
        Heat in [0, 1] for display.

        Uses the static overlap density until the first observation is
        recorded, then the placement counts scaled by their maximum.
        """
        if not self.has_observations:
            return hit_chance(self.grid_size, self.ships)

        heat = self.chances().astype(np.float32)
        max_val = heat.max() if heat.size else 0
        if max_val > 0:
            heat /= max_val
        return heat
