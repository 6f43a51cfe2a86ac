import os
import json
import random
import numpy as np
import matplotlib.pyplot as plt
from datetime import datetime
from targeting.battleship_game import BattleshipGame, CellState
from targeting.heatmap_generator import HeatmapGenerator, best_targets


class MetricsCollector:
    """Collects and saves metrics for evaluating heatmap performance"""

    def __init__(self, output_dir="metrics", grid_size=9, ships=None, seed=None):
        """
        Initialize metrics collector

        Args:
            output_dir (str): Directory to save metrics results
            grid_size (int): Board size of the simulated games
            ships (list, optional): Fleet of the simulated games
            seed (int, optional): Seed for reproducible simulations
        """
        self.output_dir = output_dir
        self.grid_size = grid_size
        self.ships = ships
        self.rng = random.Random(seed)
        os.makedirs(self.output_dir, exist_ok=True)

    def evaluate_game(self, game):
        """
        Score one game state.

        Cell averages only consider cells that are still unknown to the
        player, since observed cells are never targets.

        Returns:
            dict: Per-game metrics
        """
        heatmap_gen = HeatmapGenerator(game)
        scores = heatmap_gen.generate_scores()
        heatmap_np = heatmap_gen.generate_heatmap().numpy()
        comparison = heatmap_gen.compare_with_actual_board(heatmap_np)

        unknown = heatmap_gen.board == CellState.UNKNOWN
        ship_cells = unknown & (heatmap_gen.full_board == CellState.SHIP)
        empty_cells = unknown & ~ship_cells

        targets = best_targets(heatmap_gen.board, scores)
        target_hits = sum(1 for r, c in targets if heatmap_gen.full_board[r, c] == CellState.SHIP)

        return {
            "match_percentage": comparison["match_percentage"],
            "precision": comparison["precision"],
            "recall": comparison["recall"],
            "f1_score": comparison["f1_score"],
            "ship_cell_avg_prob": float(heatmap_np[ship_cells].mean()) if ship_cells.any() else 0.0,
            "empty_cell_avg_prob": float(heatmap_np[empty_cells].mean()) if empty_cells.any() else 0.0,
            "best_target_hit_rate": target_hits / len(targets) if targets else 0.0,
            "remaining_ships": len(heatmap_gen.remaining_ships),
        }

    def run_simulations(self, num_games=100):
        """
        Run battleship game simulations and collect metrics

        Args:
            num_games (int): Number of games to simulate

        Returns:
            dict: Per-game lists plus their averages under "avg_<name>"
        """
        metrics = {
            "match_percentages": [],
            "precisions": [],
            "recalls": [],
            "f1_scores": [],
            "ship_cell_avg_prob": [],
            "empty_cell_avg_prob": [],
            "best_target_hit_rate": [],
        }

        successful_games = 0
        attempts = 0
        max_attempts = num_games * 2  # Allow for some failed board generations

        while successful_games < num_games and attempts < max_attempts:
            attempts += 1
            game = BattleshipGame(grid_size=self.grid_size, ships=self.ships, rng=self.rng)
            try:
                game.generate_random_state()
            except RuntimeError as e:
                print(f"Skipping game due to error: {e}")
                continue
            successful_games += 1

            result = self.evaluate_game(game)
            metrics["match_percentages"].append(result["match_percentage"])
            metrics["precisions"].append(result["precision"])
            metrics["recalls"].append(result["recall"])
            metrics["f1_scores"].append(result["f1_score"])
            metrics["ship_cell_avg_prob"].append(result["ship_cell_avg_prob"])
            metrics["empty_cell_avg_prob"].append(result["empty_cell_avg_prob"])
            metrics["best_target_hit_rate"].append(result["best_target_hit_rate"])

            if successful_games % 10 == 0:
                print(f"Processed {successful_games}/{num_games} games")

        metrics["num_games"] = successful_games
        metrics["avg_match_percentage"] = _mean(metrics["match_percentages"])
        metrics["avg_precision"] = _mean(metrics["precisions"])
        metrics["avg_recall"] = _mean(metrics["recalls"])
        metrics["avg_f1_score"] = _mean(metrics["f1_scores"])
        metrics["avg_ship_cell_prob"] = _mean(metrics["ship_cell_avg_prob"])
        metrics["avg_empty_cell_prob"] = _mean(metrics["empty_cell_avg_prob"])
        metrics["avg_best_target_hit_rate"] = _mean(metrics["best_target_hit_rate"])

        return metrics

    def save_metrics(self, metrics, filename=None):
        """
        Save metrics to a file and keep only the most recent two metrics files.

        Returns:
            str: Path to saved file
        """
        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            filename = f"heatmap_metrics_{timestamp}.json"

        filepath = os.path.join(self.output_dir, filename)

        save_data = {
            "timestamp": datetime.now().isoformat(),
            "grid_size": self.grid_size,
            "num_games": metrics["num_games"],
            "sample_match_percentages": metrics["match_percentages"][:5],
        }
        save_data.update({key: value for key, value in metrics.items() if key.startswith("avg_")})

        with open(filepath, 'w') as f:
            json.dump(save_data, f, indent=2)

        self._cleanup_old_metrics_files()

        print(f"Metrics saved to {filepath}")
        return filepath

    def _cleanup_old_metrics_files(self):
        metrics_files = sorted(f for f in os.listdir(self.output_dir)
                               if f.startswith("heatmap_metrics_") and f.endswith(".json"))

        for old_file in metrics_files[:-2]:
            old_path = os.path.join(self.output_dir, old_file)
            try:
                os.remove(old_path)
                print(f"Removed old metrics file: {old_path}")
            except OSError as e:
                print(f"Error removing old metrics file {old_path}: {e}")

    def generate_plots(self, metrics, save_dir=None):
        """
        Generate and save plots for metrics visualization

        Returns:
            list: Paths to saved plot files
        """
        if save_dir is None:
            save_dir = self.output_dir

        os.makedirs(save_dir, exist_ok=True)
        saved_files = []
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        # Plot match percentage distribution
        plt.figure(figsize=(10, 6))
        plt.hist(metrics["match_percentages"], bins=20, alpha=0.7, color='blue')
        plt.axvline(metrics["avg_match_percentage"], color='red', linestyle='dashed', linewidth=2)
        plt.title('Distribution of Match Percentages')
        plt.xlabel('Match Percentage')
        plt.ylabel('Frequency')
        plt.grid(True, alpha=0.3)
        plt.text(0.95, 0.95, f"Avg: {metrics['avg_match_percentage']:.2%}",
                 transform=plt.gca().transAxes, ha='right', va='top',
                 bbox=dict(boxstyle='round', facecolor='white', alpha=0.8))

        plot_path = os.path.join(save_dir, f"match_percentage_dist_{timestamp}.png")
        plt.savefig(plot_path)
        saved_files.append(plot_path)
        plt.close()

        # Bar chart of key metrics
        plt.figure(figsize=(10, 6))
        metrics_names = ['Avg Match %', 'Avg Ship Cell Heat', 'Avg Empty Cell Heat', 'Best Target Hit Rate']
        metrics_values = [
            metrics["avg_match_percentage"],
            metrics["avg_ship_cell_prob"],
            metrics["avg_empty_cell_prob"],
            metrics["avg_best_target_hit_rate"],
        ]

        plt.bar(metrics_names, metrics_values, color=['blue', 'green', 'red', 'purple'])
        plt.title('Key Performance Metrics')
        plt.ylabel('Value')
        plt.grid(True, axis='y', alpha=0.3)
        for i, v in enumerate(metrics_values):
            plt.text(i, v + 0.02, f"{v:.3f}", ha='center')

        plot_path = os.path.join(save_dir, f"key_metrics_{timestamp}.png")
        plt.savefig(plot_path)
        saved_files.append(plot_path)
        plt.close()

        print(f"Plots saved to {save_dir}")
        return saved_files


def _mean(values):
    return float(np.mean(values)) if values else 0.0


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Collect accuracy metrics for the targeting heatmap')
    parser.add_argument('--games', type=int, default=50, help='Number of games to simulate')
    parser.add_argument('--size', type=int, default=9, help='Board size of the simulated games')
    parser.add_argument('--seed', type=int, help='Seed for reproducible simulations')
    parser.add_argument('--output-dir', type=str, default='metrics', help='Directory to save metrics and plots')
    parser.add_argument('--skip-plots', action='store_true', help='Skip generating plots')
    args = parser.parse_args()

    collector = MetricsCollector(output_dir=args.output_dir, grid_size=args.size, seed=args.seed)

    print(f"Running battleship simulations with {args.games} games...")
    metrics = collector.run_simulations(num_games=args.games)
    collector.save_metrics(metrics)

    if not args.skip_plots:
        print("Generating plots...")
        collector.generate_plots(metrics)

    print("\nMetrics collection complete!")
    print("Summary of results:")
    print(f"  - Average match percentage: {metrics['avg_match_percentage']:.2%}")
    print(f"  - Average precision / recall / F1: {metrics['avg_precision']:.3f} / "
          f"{metrics['avg_recall']:.3f} / {metrics['avg_f1_score']:.3f}")
    print(f"  - Average ship cell heat: {metrics['avg_ship_cell_prob']:.3f}")
    print(f"  - Average empty cell heat: {metrics['avg_empty_cell_prob']:.3f}")
    print(f"  - Best target hit rate: {metrics['avg_best_target_hit_rate']:.3f}")
