import numpy as np
import torch

from targeting.battleship_game import BattleshipGame, CellState
from targeting.neighborhoods import CROSS, DIAGONAL, RING, neighbors


def _as_board(grid):
    """View any square nested sequence (or array) of cell states as an int8 array."""
    n = len(grid)
    return np.asarray(grid, dtype=np.int8).reshape(n, n)


def sunk_ship_sizes(grid):
    """
    Find the sizes of all fully sunk ships on the board.

    Cells are scanned in row-major order and every group of edge-connected
    SUNK cells is flood-filled once. Each cell is visited exactly once
    whatever its state.

    Args:
        grid: Square board of cell states

    Returns:
        list: Size of each sunk group, in the order the groups were found
    """
    board = _as_board(grid)
    n = board.shape[0]
    visited = np.zeros((n, n), dtype=bool)
    sizes = []

    for r in range(n):
        for c in range(n):
            if visited[r, c]:
                continue
            visited[r, c] = True
            if board[r, c] != CellState.SUNK:
                continue

            size = 0
            stack = [(r, c)]
            while stack:
                cell = stack.pop()
                size += 1
                for nr, nc in neighbors(n, cell, CROSS):
                    if not visited[nr, nc] and board[nr, nc] == CellState.SUNK:
                        visited[nr, nc] = True
                        stack.append((nr, nc))
            sizes.append(size)

    return sizes


def reduce_fleet(ships, sunk_sizes):
    """
    Remove one ship per sunk size from the fleet.

    Sizes with no matching ship left are ignored.

    Returns:
        list: Ship sizes that remain to be found
    """
    remaining = list(ships)
    for size in sunk_sizes:
        if size in remaining:
            remaining.remove(size)
    return remaining


def build_exclusion_mask(grid):
    """
    Mark which cells may still hold a ship segment.

    - MISS: the cell itself is excluded
    - HIT: its diagonal neighbours are excluded, the hit cell stays open
    - SUNK: the cell and its whole ring are excluded

    Returns:
        numpy.ndarray: Boolean grid, True where a ship segment is permitted
    """
    board = _as_board(grid)
    n = board.shape[0]
    mask = np.ones((n, n), dtype=bool)

    for r in range(n):
        for c in range(n):
            state = board[r, c]
            if state == CellState.MISS:
                mask[r, c] = False
            elif state == CellState.HIT:
                for nr, nc in neighbors(n, (r, c), DIAGONAL):
                    mask[nr, nc] = False
            elif state == CellState.SUNK:
                mask[r, c] = False
                for nr, nc in neighbors(n, (r, c), RING):
                    mask[nr, nc] = False

    return mask


def count_placements(mask, ships):
    """
    Count, for every cell, the legal ship placements that cover it.

    Every horizontal and vertical window of each ship length is checked
    against the mask. A length-1 ship covers the same single cell in both
    orientations, so it is counted once. Lengths that are not positive or do
    not fit the board contribute nothing.

    Returns:
        numpy.ndarray: Integer grid of placement counts
    """
    mask = np.asarray(mask, dtype=bool)
    n = mask.shape[0] if mask.ndim == 2 else 0
    scores = np.zeros((n, n), dtype=np.int64)

    for ship_size in ships:
        if ship_size < 1 or ship_size > n:
            continue
        for i in range(n):
            for j in range(n - ship_size + 1):
                if mask[i, j:j + ship_size].all():
                    scores[i, j:j + ship_size] += 1
                if ship_size > 1 and mask[j:j + ship_size, i].all():
                    scores[j:j + ship_size, i] += 1

    return scores


def calculate_chances(grid, ships):
    """
    Score every cell by the number of ship placements consistent with the board.

    Sunk ships are removed from the fleet, the remaining ships are slid
    across the exclusion mask and each legal placement adds one to the cells
    it covers. Scores are relative within one board only.

    Args:
        grid: Square board of cell states
        ships: Ship lengths in play, sunk ones included

    Returns:
        numpy.ndarray: Integer score grid of the same size as the board
    """
    remaining = reduce_fleet(ships, sunk_ship_sizes(grid))
    mask = build_exclusion_mask(grid)
    return count_placements(mask, remaining)


def best_targets(grid, scores):
    """Unknown cells sharing the highest non-zero score."""
    board = _as_board(grid)
    scores = np.asarray(scores)
    candidates = np.where(board == CellState.UNKNOWN, scores, 0)
    if candidates.size == 0 or candidates.max() <= 0:
        return []
    rows, cols = np.nonzero(candidates == candidates.max())
    return [(int(r), int(c)) for r, c in zip(rows, cols)]


class HeatmapGenerator:
    """Generates placement-count heat maps from the visible state of a game"""

    def __init__(self, game, ships=None):
        """
        Initialize the heatmap generator with a game state.

        Args:
            game (BattleshipGame): Game instance to analyze
            ships (list, optional): Fleet in play. Defaults to the game's fleet.
        """
        self.game = game
        self.grid_size = game.grid_size
        self.board = game.get_hidden_board()  # Only misses, hits and sunk ships visible
        self.full_board = game.get_board()    # Full board with ships for validation
        self.ships = list(ships) if ships is not None else list(game.ships)
        self.remaining_ships = reduce_fleet(self.ships, sunk_ship_sizes(self.board))

    def generate_scores(self):
        """Raw placement counts for the hidden board."""
        return calculate_chances(self.board, self.ships)

    def generate_heatmap(self):
        """
        Generate a heatmap scaled so the most likely cell is 1.0.

        Returns:
            torch.Tensor: 2D float32 tensor, all zeros when nothing fits
        """
        prob_grid = self.generate_scores().astype(np.float32)
        max_val = prob_grid.max() if prob_grid.size else 0
        if max_val > 0:
            prob_grid /= max_val

        # Convert to torch tensor for compatibility with neural network models
        return torch.tensor(prob_grid, dtype=torch.float32)

    def compare_with_actual_board(self, heatmap, threshold=0.5):
        """
        Compare heatmap predictions with the actual ship positions.

        Args:
            heatmap (torch.Tensor): The predicted heatmap
            threshold (float, optional): Heat above which a cell counts as predicted

        Returns:
            dict: precision, recall, f1_score, match_percentage and raw counts
        """
        if isinstance(heatmap, torch.Tensor):
            heatmap_np = heatmap.detach().numpy()
        else:
            heatmap_np = np.asarray(heatmap)

        predicted_ships = heatmap_np > threshold
        actual_ships = np.isin(self.full_board, (CellState.SHIP, CellState.HIT))

        true_positives = int(np.sum(predicted_ships & actual_ships))
        false_positives = int(np.sum(predicted_ships & ~actual_ships))
        false_negatives = int(np.sum(~predicted_ships & actual_ships))

        precision = true_positives / max(true_positives + false_positives, 1)
        recall = true_positives / max(true_positives + false_negatives, 1)
        f1_score = 2 * precision * recall / max(precision + recall, 1e-8)
        match_percentage = float(np.mean(predicted_ships == actual_ships)) if actual_ships.size else 0.0

        return {
            'precision': precision,
            'recall': recall,
            'f1_score': f1_score,
            'match_percentage': match_percentage,
            'true_positives': true_positives,
            'false_positives': false_positives,
            'false_negatives': false_negatives,
        }


if __name__ == "__main__":
    from targeting.render import format_heatmap

    game = BattleshipGame()
    game.generate_random_state()

    print("Game Board (player's view - ships hidden):")
    game.display_board(hide_ships=True)

    heatmap_gen = HeatmapGenerator(game)
    print(f"\nRemaining ships: {heatmap_gen.remaining_ships}")
    print("\nPlacement counts:")
    print(format_heatmap(heatmap_gen.generate_scores(), heatmap_gen.board))

    print("\nActual Ship Positions:")
    game.display_board(hide_ships=False)
