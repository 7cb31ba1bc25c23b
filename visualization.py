"""
TSP Tour Engine - Visualization Module
Plot tours, strategy comparisons and search progress.
"""

import matplotlib.pyplot as plt
from typing import List, Optional, Sequence

from solver_api import SolutionSet
from tsp_core import Point, Tour, tour_length


class TourVisualizer:
    """Visualize tours over a point set and local-search progress."""

    def __init__(self, figsize=(12, 8)):
        self.figsize = figsize

    def _finish(self, fig, save_path: Optional[str], show: bool, label: str):
        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"{label} saved to {save_path}")

        if show:
            plt.show()
        else:
            plt.close(fig)

    def _draw_tour(self, ax, points: Sequence[Point], tour: Tour, title: str, label_points: bool):
        if len(tour) == 0:
            ax.text(0.5, 0.5, 'No points in tour', ha='center', va='center', fontsize=14)
            ax.set_title(title, fontsize=12, weight='bold')
            return

        x_coords = [points[i].x for i in tour]
        y_coords = [points[i].y for i in tour]

        # Plot points
        ax.scatter([p.x for p in points], [p.y for p in points],
                   c='red', s=120, zorder=3, edgecolors='darkred', linewidth=1.5)

        # Plot tour path (already closed)
        ax.plot(x_coords, y_coords, 'b-', linewidth=2, alpha=0.6, zorder=1)

        if label_points:
            for p in points:
                ax.annotate(str(p.id), (p.x, p.y), fontsize=8,
                            ha='center', va='center', color='white', weight='bold')

        # Highlight anchor
        anchor = points[tour[0]]
        ax.scatter([anchor.x], [anchor.y], c='green', s=250, zorder=4,
                   marker='*', edgecolors='darkgreen', linewidth=1.5)

        length = tour_length(points, tour)
        ax.set_title(f"{title}\nLength: {length:.2f}", fontsize=12, weight='bold')
        ax.grid(True, alpha=0.3)
        ax.set_aspect('equal')

    def plot_tour(
        self,
        points: Sequence[Point],
        tour: Tour,
        title: str = "TSP Tour",
        save_path: str = None,
        show: bool = True,
    ):
        """
        Plot a single tour.

        Args:
            points: Point set the tour refers to
            tour: The tour to visualize
            title: Plot title
            save_path: Optional path to save the figure
            show: Open a window; pass False for headless use
        """
        fig, ax = plt.subplots(figsize=self.figsize)
        self._draw_tour(ax, points, tour, title, label_points=True)
        ax.set_xlabel('X Coordinate', fontsize=12)
        ax.set_ylabel('Y Coordinate', fontsize=12)
        self._finish(fig, save_path, show, "Tour")
        return fig

    def plot_solution_set(
        self,
        solutions: SolutionSet,
        names: Optional[List[str]] = None,
        save_path: str = None,
        show: bool = True,
    ):
        """Plot every tour of a SolutionSet side by side."""
        names = names or solutions.names()
        n_tours = max(len(names), 1)
        fig, axes = plt.subplots(1, n_tours, figsize=(6 * n_tours, 6))

        if n_tours == 1:
            axes = [axes]

        for ax, name in zip(axes, names):
            title = name.replace('_', ' ').title()
            self._draw_tour(ax, solutions.points, solutions.get(name), title, label_points=False)

        self._finish(fig, save_path, show, "Comparison")
        return fig

    def plot_convergence(
        self,
        history: List[float],
        title: str = "Local Search Progress",
        xlabel: str = "Accepted Move",
        ylabel: str = "Tour Length",
        save_path: str = None,
        show: bool = True,
    ):
        """
        Plot the tour length after every accepted move.

        Args:
            history: Tour lengths, starting with the initial tour
            title: Plot title
            xlabel: X-axis label
            ylabel: Y-axis label
            save_path: Optional path to save the figure
            show: Open a window; pass False for headless use
        """
        fig, ax = plt.subplots(figsize=(10, 6))

        iterations = range(len(history))
        ax.plot(iterations, history, 'b-', linewidth=2, label='Tour Length')

        initial = history[0]
        final = history[-1]
        improvement = ((initial - final) / initial) * 100 if initial > 0 else 0.0

        ax.axhline(y=final, color='g', linestyle='--', linewidth=1.5, label=f'Final: {final:.2f}')
        ax.axhline(y=initial, color='r', linestyle='--', linewidth=1.5, label=f'Initial: {initial:.2f}')

        ax.set_xlabel(xlabel, fontsize=12)
        ax.set_ylabel(ylabel, fontsize=12)
        ax.set_title(f"{title}\nImprovement: {improvement:.2f}%", fontsize=14, weight='bold')
        ax.grid(True, alpha=0.3)
        ax.legend(loc='upper right', fontsize=10)

        self._finish(fig, save_path, show, "Convergence plot")
        return fig
