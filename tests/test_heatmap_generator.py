import numpy as np
import torch

from targeting.battleship_game import BattleshipGame, CellState
from targeting.heatmap_generator import (
    HeatmapGenerator,
    best_targets,
    build_exclusion_mask,
    calculate_chances,
    count_placements,
    reduce_fleet,
    sunk_ship_sizes,
)
from tests.utils import _board, _new_board

EMPTY_4X4_PAIRS = [
    [2, 3, 3, 2],
    [3, 4, 4, 3],
    [3, 4, 4, 3],
    [2, 3, 3, 2],
]


def test_unknown_board_scores_every_cell() -> None:
    scores = calculate_chances(_new_board(5), [3, 2])
    assert (scores > 0).all()


def test_pairs_on_empty_4x4_board() -> None:
    assert calculate_chances(_new_board(4), [2]).tolist() == EMPTY_4X4_PAIRS


def test_single_miss_only_removes_windows_through_it() -> None:
    board = _board((1, 1), state=CellState.MISS)
    expected = np.array(EMPTY_4X4_PAIRS)
    expected[1, 1] = 0
    for cell in [(1, 0), (1, 2), (0, 1), (2, 1)]:
        expected[cell] -= 1

    assert calculate_chances(board, [2]).tolist() == expected.tolist()


def test_hit_excludes_only_its_diagonals() -> None:
    mask = build_exclusion_mask(_board((1, 1), size=3))
    assert mask.tolist() == [
        [False, True, False],
        [True, True, True],
        [False, True, False],
    ]

    corner = build_exclusion_mask(_board((0, 0), size=3))
    assert not corner[1, 1]
    assert corner.sum() == 8


def test_sunk_cell_excludes_its_ring() -> None:
    mask = build_exclusion_mask(_board((0, 0), size=3, state=CellState.SUNK))
    assert mask.tolist() == [
        [False, False, True],
        [False, False, True],
        [True, True, True],
    ]


def test_mask_ignores_order_of_observations() -> None:
    board = _new_board(5)
    board[0, 0] = CellState.SUNK
    board[1, 1] = CellState.HIT
    board[2, 3] = CellState.MISS
    board[4, 4] = CellState.HIT

    mask = build_exclusion_mask(board)
    flipped = build_exclusion_mask(board[::-1, ::-1])
    assert (mask == flipped[::-1, ::-1]).all()


def test_hit_scores_along_both_axes() -> None:
    board = _board((1, 1), size=3)
    scores = calculate_chances(board, [2])
    assert scores.tolist() == [
        [0, 1, 0],
        [1, 4, 1],
        [0, 1, 0],
    ]
    assert best_targets(board, scores) == [(0, 1), (1, 0), (1, 2), (2, 1)]


def test_all_sunk_board_is_one_component() -> None:
    board = np.full((4, 4), CellState.SUNK, dtype=np.int8)
    assert sunk_ship_sizes(board) == [16]


def test_sunk_components_use_edge_adjacency() -> None:
    board = _new_board(5)
    for cell in [(0, 0), (0, 1), (0, 2), (2, 4), (3, 4), (4, 0)]:
        board[cell] = CellState.SUNK
    # diagonal contact does not join groups
    board[1, 3] = CellState.SUNK

    assert sunk_ship_sizes(board) == [3, 1, 2, 1]
    assert sunk_ship_sizes([]) == []


def test_sunk_row_removes_ship_from_fleet() -> None:
    board = _new_board(3)
    board[0, :] = CellState.SUNK

    assert sunk_ship_sizes(board) == [3]
    assert calculate_chances(board, [3]).tolist() == [[0, 0, 0]] * 3
    assert calculate_chances(board, [3, 3]).tolist() == [
        [0, 0, 0],
        [0, 0, 0],
        [1, 1, 1],
    ]


def test_reduce_fleet_removes_one_match_per_size() -> None:
    ships = [4, 3, 3, 2]
    assert reduce_fleet(ships, [3, 5]) == [4, 3, 2]
    assert ships == [4, 3, 3, 2]


def test_single_cell_board() -> None:
    board = _new_board(1)
    assert calculate_chances(board, [1]).tolist() == [[1]]
    assert calculate_chances(board, [2]).tolist() == [[0]]


def test_malformed_fleet_and_empty_input_are_tolerated() -> None:
    assert calculate_chances(_new_board(4), [0, -1, 7]).tolist() == [[0] * 4] * 4
    assert calculate_chances(_new_board(4), []).sum() == 0
    assert calculate_chances([], [2]).shape == (0, 0)


def test_duplicate_lengths_count_separately() -> None:
    once = calculate_chances(_new_board(4), [2])
    twice = calculate_chances(_new_board(4), [2, 2])
    assert (twice == once * 2).all()


def test_accepts_nested_lists_without_mutating_them() -> None:
    grid = [[0, 0, 0], [0, 1, 0], [0, 0, -1]]
    snapshot = [row[:] for row in grid]

    first = calculate_chances(grid, [2, 2])
    second = calculate_chances(grid, [2, 2])

    assert (first == second).all()
    assert grid == snapshot


def test_extra_miss_never_raises_a_score() -> None:
    board = _new_board(6)
    board[2, 2] = CellState.HIT
    board[5, 0] = CellState.SUNK
    before = calculate_chances(board, [4, 3, 2, 1])

    board[0, 4] = CellState.MISS
    after = calculate_chances(board, [4, 3, 2, 1])

    assert (after <= before).all()
    assert after[0, 4] == 0


def test_best_targets_skip_observed_and_zero_cells() -> None:
    board = _new_board(4)
    assert best_targets(board, calculate_chances(board, [2])) == [(1, 1), (1, 2), (2, 1), (2, 2)]

    misses = np.full((3, 3), CellState.MISS, dtype=np.int8)
    assert best_targets(misses, calculate_chances(misses, [2])) == []


def test_count_placements_checks_whole_window() -> None:
    mask = np.ones((3, 3), dtype=bool)
    mask[0, 1] = False
    scores = count_placements(mask, [3])
    assert scores.tolist() == [
        [1, 0, 1],
        [2, 1, 2],
        [2, 1, 2],
    ]


def _sunk_game():
    game = BattleshipGame(grid_size=4, ships=[2, 1])
    game.ship_objects = [
        {'size': 2, 'orientation': 0, 'row': 0, 'col': 0},
        {'size': 1, 'orientation': 0, 'row': 3, 'col': 3},
    ]
    game.board[0, 0] = CellState.HIT
    game.board[0, 1] = CellState.HIT
    game.board[3, 3] = CellState.SHIP
    return game


def test_generator_drops_sunk_ships_and_scales_heatmap() -> None:
    heatmap_gen = HeatmapGenerator(_sunk_game())
    assert heatmap_gen.remaining_ships == [1]

    heatmap = heatmap_gen.generate_heatmap()
    assert isinstance(heatmap, torch.Tensor)
    assert heatmap.dtype == torch.float32
    assert heatmap.max().item() == 1.0
    # ring of the sunk ship is excluded
    assert heatmap[1, 2].item() == 0.0
    assert heatmap[3, 3].item() == 1.0


def test_generator_heatmap_is_zero_when_fleet_is_sunk() -> None:
    heatmap_gen = HeatmapGenerator(_sunk_game(), ships=[2])
    assert heatmap_gen.remaining_ships == []
    assert heatmap_gen.generate_heatmap().sum().item() == 0.0


def test_compare_with_actual_board() -> None:
    heatmap_gen = HeatmapGenerator(_sunk_game())
    predicted = np.zeros((4, 4), dtype=np.float32)
    predicted[3, 3] = 1.0
    predicted[2, 2] = 1.0

    result = heatmap_gen.compare_with_actual_board(predicted)
    assert result['true_positives'] == 1
    assert result['false_positives'] == 1
    assert result['false_negatives'] == 2
    assert result['precision'] == 0.5
    assert result['match_percentage'] == 13 / 16
