"""
Battleship Game - Observation States and Random State Generator

This module defines the per-cell observation states shared by the whole package
and a Battleship game implementation that generates random board states. The
generated boards are used to demo the targeting heatmap and to evaluate it
against boards whose ship positions are known.

Key Features:
- Cell states for unknown, missed, hit and sunk cells
- Random ship placement with proper spacing (no ships touching, even diagonally)
- Option to generate boards with random hits, misses and fully sunk ships
- Ability to hide intact ships while revealing sunk ones
- Configurable grid size and fleet

Example:
    ```python
    game = BattleshipGame(grid_size=10, ships=[4, 3, 3, 2, 2, 2])
    game.generate_random_state()

    # Board with ships hidden, as a player sees it
    hidden_board = game.get_hidden_board()
    game.display_board(hide_ships=True)
    ```
"""

import numpy as np
import random

from targeting.neighborhoods import RING, neighbors


class CellState:
    """
    Represents possible states of a cell on the game board.

    Attributes:
        UNKNOWN (int): Nothing is known about the cell (0)
        MISS (int): Missed shot, no ship here (-1)
        HIT (int): Hit on a ship that is not yet fully discovered (1)
        SHIP (int): Undamaged ship cell, only on the full board (2)
        SUNK (int): Segment of a fully destroyed ship (3)
    """
    UNKNOWN = 0
    MISS = -1
    HIT = 1
    SHIP = 2
    SUNK = 3


# Observation states a player can record on a board
OBSERVATION_STATES = (CellState.UNKNOWN, CellState.MISS, CellState.HIT, CellState.SUNK)

SYMBOLS = {
    CellState.UNKNOWN: '.',
    CellState.MISS: 'o',
    CellState.HIT: 'x',
    CellState.SUNK: 'X',
    CellState.SHIP: 'S',
}

DEFAULT_FLEET = [4, 4, 4, 3, 3, 3, 3, 3]


class BattleshipGame:
    """
    Handles random game state generation for Battleship.

    Ships are placed according to the standard rule that no two ships touch,
    not even diagonally. The targeting engine relies on that rule when it
    excludes the diagonals of a hit and the ring around a sunk ship.

    Attributes:
        grid_size (int): Size of the square game board (default: 9)
        ships (list): Ship sizes to place (default: 3 ships of size 4, 5 ships of size 3)
        board (numpy.ndarray): The full game board as a 2D int8 array
        ship_objects (list): Dictionaries describing each placed ship
    """

    def __init__(self, grid_size=9, ships=None, rng=None):
        """
        Initialize a new Battleship game.

        Args:
            grid_size (int, optional): Size of the square game board. Defaults to 9.
            ships (list, optional): Ship sizes to place. Defaults to DEFAULT_FLEET.
            rng (random.Random, optional): Random source, for reproducible boards.
        """
        self.grid_size = grid_size
        self.ships = list(ships) if ships is not None else DEFAULT_FLEET.copy()
        self.rng = rng if rng is not None else random.Random()
        self.board = np.zeros((grid_size, grid_size), dtype=np.int8)
        self.ship_objects = []

    def place_ships(self, max_retries=5, max_attempts=200):
        """
        Places ships randomly on the board without overlap or adjacency.

        Raises:
            RuntimeError: If unable to place all ships after max_retries layouts.
        """
        for retry in range(max_retries):
            self.board.fill(CellState.UNKNOWN)
            self.ship_objects = []

            # Randomize ship order to avoid getting stuck in the same pattern
            ship_sizes = self.ships.copy()
            self.rng.shuffle(ship_sizes)

            if all(self._place_randomly(size, max_attempts) for size in ship_sizes):
                return

        raise RuntimeError(f"Could not place all ships after {max_retries} board layout attempts")

    def _place_randomly(self, ship_size, max_attempts):
        if ship_size < 1 or ship_size > self.grid_size:
            return False

        for _ in range(max_attempts):
            # 0 = horizontal, 1 = vertical
            orientation = self.rng.randint(0, 1)
            if orientation == 0:
                row = self.rng.randint(0, self.grid_size - 1)
                col = self.rng.randint(0, self.grid_size - ship_size)
            else:
                row = self.rng.randint(0, self.grid_size - ship_size)
                col = self.rng.randint(0, self.grid_size - 1)

            if self._is_valid_placement(row, col, ship_size, orientation):
                ship = {
                    'size': ship_size,
                    'orientation': orientation,
                    'row': row,
                    'col': col,
                }
                for r, c in ship_cells(ship):
                    self.board[r, c] = CellState.SHIP
                self.ship_objects.append(ship)
                return True
        return False

    def _is_valid_placement(self, row, col, ship_size, orientation):
        """
        Check that a ship fits on the board and neither overlaps nor touches another ship.
        """
        ship = {'size': ship_size, 'orientation': orientation, 'row': row, 'col': col}
        for r, c in ship_cells(ship):
            if not (0 <= r < self.grid_size and 0 <= c < self.grid_size):
                return False
            if self.board[r, c] != CellState.UNKNOWN:
                return False
            for nr, nc in neighbors(self.grid_size, (r, c), RING):
                if self.board[nr, nc] == CellState.SHIP:
                    return False
        return True

    def generate_random_state(self, hit_chance=0.5, sink_chance=0.25):
        """
        Generates a random board state representing a game in progress.

        This method:
        1. Places all ships randomly on the board
        2. With probability hit_chance, hits some ship cells (10-30% of them)
           and sinks each ship outright with probability sink_chance
        3. Adds random misses (10-15% of empty cells)
        """
        self.place_ships()

        if self.rng.random() < hit_chance:
            for ship in self.ship_objects:
                if self.rng.random() < sink_chance:
                    for r, c in ship_cells(ship):
                        self.board[r, c] = CellState.HIT

            ship_cells_left = list(zip(*np.nonzero(self.board == CellState.SHIP)))
            if ship_cells_left:
                num_hits = self.rng.randint(max(1, len(ship_cells_left) // 10),
                                            max(2, len(ship_cells_left) // 3))
                for r, c in self.rng.sample(ship_cells_left, min(num_hits, len(ship_cells_left))):
                    self.board[r, c] = CellState.HIT

        empty_cells = list(zip(*np.nonzero(self.board == CellState.UNKNOWN)))
        num_misses = self.rng.randint(len(empty_cells) // 10, len(empty_cells) // 7)
        for r, c in self.rng.sample(empty_cells, min(num_misses, len(empty_cells))):
            self.board[r, c] = CellState.MISS

    def sunk_ships(self):
        """Ships whose every cell has been hit."""
        return [ship for ship in self.ship_objects
                if all(self.board[r, c] == CellState.HIT for r, c in ship_cells(ship))]

    def get_board(self):
        """
        Returns the full game board, intact ships included.

        Returns:
            numpy.ndarray: 2D array representing the current board state
        """
        return self.board

    def get_hidden_board(self):
        """
        Returns the board as the shooting player sees it.

        Intact ship cells are replaced with UNKNOWN and every cell of a fully
        hit ship is reported as SUNK. Only misses, hits and sunk ships remain.

        Returns:
            numpy.ndarray: 2D array representing the hidden board state
        """
        hidden_board = self.board.copy()
        for ship in self.sunk_ships():
            for r, c in ship_cells(ship):
                hidden_board[r, c] = CellState.SUNK

        hidden_board[hidden_board == CellState.SHIP] = CellState.UNKNOWN
        return hidden_board

    def display_board(self, hide_ships=False):
        """
        Prints the board.

        Board symbols:
            '.' : Unknown cell
            'o' : Miss
            'x' : Hit (on a ship that is not completely sunk)
            'X' : Sunk ship
            'S' : Intact ship (visible only if hide_ships is False)
        """
        from targeting.render import format_board

        board = self.get_hidden_board() if hide_ships else self.board
        print(format_board(board))


def ship_cells(ship):
    """Cells covered by a ship dictionary, from its start outwards."""
    if ship['orientation'] == 0:
        return [(ship['row'], ship['col'] + i) for i in range(ship['size'])]
    return [(ship['row'] + i, ship['col']) for i in range(ship['size'])]


# Example Usage
if __name__ == "__main__":
    game = BattleshipGame()
    game.generate_random_state()
    print("Full board (with ships):")
    game.display_board()
    print("\nHidden board (player's view):")
    game.display_board(hide_ships=True)
