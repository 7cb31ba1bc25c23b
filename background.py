"""
Background Solver
Runs a refinement on a worker thread so an interactive loop stays
responsive. Progress is posted to a queue that the caller drains.
"""

import queue
import threading
import time
import traceback
from typing import List, Optional, Sequence

from enhanced_search import EnhancedLocalSearch
from nearest_neighbor import NearestNeighborConstructor
from solver_api import ENHANCED, TWO_OPT, TourLike
from tsp_core import DistanceMatrix, InvalidInputError, Point, Tour
from two_opt import TwoOptSearch


class BackgroundSolver:
    """
    Refine a tour on a daemon thread.

    Updates are dicts put on `updates`:
        {'type': 'progress', 'tour', 'distance', 'iteration', 'time'}
        {'type': 'done' | 'cancelled', 'tour', 'distance', 'time'}
        {'type': 'error', 'error'}
    """

    def __init__(
        self,
        points: Sequence[Point],
        starting_tour: Optional[TourLike] = None,
        strategy: str = ENHANCED,
        verbose: bool = False,
    ):
        if not points:
            raise InvalidInputError("Cannot refine a tour over an empty point set.")
        if strategy not in (ENHANCED, TWO_OPT):
            raise ValueError(f"Unknown strategy: {strategy}")

        self.points = list(points)
        self.strategy = strategy
        self.verbose = verbose
        self.distance_matrix = DistanceMatrix(self.points)

        if starting_tour is None:
            self.starting_tour = NearestNeighborConstructor(
                self.points, distance_matrix=self.distance_matrix
            ).construct()
        else:
            self.starting_tour = Tour.coerce(starting_tour)

        self.updates: "queue.Queue[dict]" = queue.Queue()
        self._cancel_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._result: Optional[Tour] = None
        self.error: Optional[BaseException] = None

    # --------------------------------------------------------
    def start(self) -> 'BackgroundSolver':
        if self._thread is not None:
            raise RuntimeError("BackgroundSolver already started")
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        return self

    def cancel(self) -> None:
        """Ask the search to stop at the next round boundary."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker; returns True once it has finished."""
        if self._thread is None:
            return False
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll(self) -> List[dict]:
        """Drain every pending update without blocking."""
        pending = []
        while True:
            try:
                pending.append(self.updates.get_nowait())
            except queue.Empty:
                return pending

    def result(self, timeout: Optional[float] = None) -> Optional[Tour]:
        """
        Final tour once finished; re-raises an error from the worker.

        Raises TimeoutError if the worker is still running after `timeout`.
        Returns None if the solver was never started.
        """
        if self._thread is not None and not self.join(timeout):
            raise TimeoutError(f"{self.strategy} refinement still running")
        if self.error is not None:
            raise self.error
        return self._result.clone() if self._result is not None else None

    # --------------------------------------------------------
    def _run(self):
        start_time = time.time()
        try:
            if self.verbose:
                print(f"[Background] Starting {self.strategy} refinement "
                      f"on {len(self.points)} points...")

            if self.strategy == ENHANCED:
                search = EnhancedLocalSearch(self.points, distance_matrix=self.distance_matrix)
            else:
                search = TwoOptSearch(self.points, distance_matrix=self.distance_matrix)

            def on_round(solver_instance, tour):
                iteration = (solver_instance.iterations if self.strategy == ENHANCED
                             else solver_instance.improvements)
                self.updates.put({
                    'type': 'progress',
                    'tour': tour,
                    'distance': solver_instance.history[-1],
                    'iteration': iteration,
                    'time': time.time() - start_time,
                })

            tour = search.solve(
                self.starting_tour,
                verbose=self.verbose,
                cancel_event=self._cancel_event,
                callback=on_round,
            )
            was_cancelled = search.cancelled

            self._result = tour
            self.updates.put({
                'type': 'cancelled' if was_cancelled else 'done',
                'tour': tour.clone(),
                'distance': self.distance_matrix.tour_length(tour.order),
                'time': time.time() - start_time,
            })

            if self.verbose:
                print(f"[Background] Finished in {time.time() - start_time:.2f}s.")

        except Exception as e:
            self.error = e
            self.updates.put({'type': 'error', 'error': e})
            if self.verbose:
                print(f"[Background] Error: {e}")
                traceback.print_exc()
