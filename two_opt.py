"""
2-opt Local Search
First-improvement segment reversal with a bounded number of accepted moves.
"""

import threading
from typing import Callable, List, Optional, Sequence, Tuple

from tsp_core import (
    DistanceMatrix,
    Point,
    Tour,
    two_opt_improvement_cap,
    validate_points,
    validate_tour,
)


class TwoOptSearch:
    """
    2-opt improvement over a closed tour.

    - position 0 and the closing duplicate are never moved
    - the first improving reversal is applied and the scan restarts
    - stops after a full scan without improvement or after
      min(200, 8 * n) accepted moves
    """

    name = "two_opt"

    def __init__(
        self,
        points: Sequence[Point],
        max_improvements: Optional[int] = None,
        distance_matrix: Optional[DistanceMatrix] = None,
    ):
        validate_points(points)
        self.points = list(points)
        self.n_cities = len(self.points)
        self.max_improvements = two_opt_improvement_cap(self.n_cities, max_improvements)
        self.distance_matrix = distance_matrix or DistanceMatrix(self.points)

        # Stats of the last solve() call
        self.improvements = 0
        self.converged = False
        self.cancelled = False
        self.history: List[float] = []

    # --------------------------------------------------------
    # SINGLE PASS
    # --------------------------------------------------------
    def find_move(self, order: Sequence[int]) -> Optional[Tuple[int, int]]:
        """Return the first improving (i, j) reversal, or None."""
        d = self.distance_matrix.rows
        m = len(order)

        for i in range(1, m - 2):
            a = order[i - 1]
            b = order[i]
            for j in range(i + 1, m - 1):
                c = order[j]
                e = order[j + 1]

                removed = d[a][b] + d[c][e]
                added = d[a][c] + d[b][e]

                if added < removed:
                    return i, j
        return None

    def improve(self, tour: Tour) -> Optional[Tour]:
        """Apply the first improving reversal to a copy of the tour."""
        move = self.find_move(tour.order)
        if move is None:
            return None

        i, j = move
        new = tour.clone()
        new.order[i:j + 1] = reversed(new.order[i:j + 1])
        return new

    # --------------------------------------------------------
    # FULL SEARCH
    # --------------------------------------------------------
    def solve(
        self,
        tour: Tour,
        verbose: bool = False,
        cancel_event: Optional[threading.Event] = None,
        callback: Optional[Callable[['TwoOptSearch', Tour], None]] = None,
    ) -> Tour:
        """Run 2-opt until no reversal improves, the cap is reached or cancel_event is set."""
        validate_tour(self.points, tour)

        best = tour.clone()
        self.improvements = 0
        self.converged = False
        self.cancelled = False
        self.history = [self.distance_matrix.tour_length(best.order)]

        while self.improvements < self.max_improvements:
            if cancel_event is not None and cancel_event.is_set():
                self.cancelled = True
                break

            candidate = self.improve(best)
            if candidate is None:
                self.converged = True
                break

            best = candidate
            self.improvements += 1
            self.history.append(self.distance_matrix.tour_length(best.order))

            if callback:
                callback(self, best.clone())

        if not self.converged and not self.cancelled and self.find_move(best.order) is None:
            self.converged = True

        if verbose:
            if self.cancelled:
                status = "cancelled"
            elif self.converged:
                status = "converged"
            else:
                status = "hit iteration cap"
            print(f"[2-opt] {self.improvements} improvements ({status}), "
                  f"length {self.history[0]:.2f} -> {self.history[-1]:.2f}")

        return best
