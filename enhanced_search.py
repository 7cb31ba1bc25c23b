"""
Enhanced Local Search
Rounds of 2-opt, city swap and Or-opt moves, tried in priority order.
"""

import threading
from typing import Callable, Dict, List, Optional, Sequence

from move_operators import CitySwap, MoveOperator, OrOptRelocate, max_chain_length
from tsp_core import (
    DistanceMatrix,
    Point,
    Tour,
    enhanced_iteration_cap,
    validate_points,
    validate_tour,
)
from two_opt import TwoOptSearch


class EnhancedLocalSearch:
    """
    Multi-operator local search.

    Every round tries, in order, one 2-opt pass, one city swap pass and one
    Or-opt pass per chain length 1 .. max_chain_length(n). The first
    operator that improves the tour wins and the round restarts. The search
    ends when a round finds nothing or after min(300, 10 * n) applied moves.

    Cancellation is only checked between rounds.
    """

    name = "enhanced"

    def __init__(
        self,
        points: Sequence[Point],
        max_iterations: Optional[int] = None,
        distance_matrix: Optional[DistanceMatrix] = None,
    ):
        validate_points(points)
        self.points = list(points)
        self.n_cities = len(self.points)
        self.max_iterations = enhanced_iteration_cap(self.n_cities, max_iterations)
        self.distance_matrix = distance_matrix or DistanceMatrix(self.points)

        self.two_opt = TwoOptSearch(self.points, distance_matrix=self.distance_matrix)
        self.operators: List[MoveOperator] = [
            CitySwap(self.points, distance_matrix=self.distance_matrix)
        ]
        for k in range(1, max_chain_length(self.n_cities) + 1):
            self.operators.append(
                OrOptRelocate(self.points, chain_length=k, distance_matrix=self.distance_matrix)
            )

        # Stats of the last solve() call
        self.iterations = 0
        self.converged = False
        self.cancelled = False
        self.history: List[float] = []
        self.moves: Dict[str, int] = {}

    def _round(self, tour: Tour) -> Optional[Tour]:
        """One round: the first operator that improves the tour wins."""
        candidate = self.two_opt.improve(tour)
        if candidate is not None:
            self.moves[self.two_opt.name] += 1
            return candidate

        for op in self.operators:
            candidate = op.improve(tour)
            if candidate is not None:
                self.moves[op.name] += 1
                return candidate
        return None

    def solve(
        self,
        tour: Tour,
        verbose: bool = False,
        cancel_event: Optional[threading.Event] = None,
        callback: Optional[Callable[['EnhancedLocalSearch', Tour], None]] = None,
    ) -> Tour:
        """Refine a copy of the tour until no operator improves it."""
        validate_tour(self.points, tour)

        best = tour.clone()
        self.iterations = 0
        self.converged = False
        self.cancelled = False
        self.history = [self.distance_matrix.tour_length(best.order)]
        self.moves = {self.two_opt.name: 0}
        for op in self.operators:
            self.moves[op.name] = 0

        while self.iterations < self.max_iterations:
            if cancel_event is not None and cancel_event.is_set():
                self.cancelled = True
                break

            candidate = self._round(best)
            if candidate is None:
                self.converged = True
                break

            best = candidate
            self.iterations += 1
            self.history.append(self.distance_matrix.tour_length(best.order))

            if callback:
                callback(self, best.clone())

        if verbose:
            if self.cancelled:
                status = "cancelled"
            elif self.converged:
                status = "converged"
            else:
                status = "hit iteration cap"
            moves = ", ".join(f"{k}={v}" for k, v in self.moves.items())
            print(f"[Enhanced] {self.iterations} moves ({status}; {moves}), "
                  f"length {self.history[0]:.2f} -> {self.history[-1]:.2f}")

        return best
