"""
TSP Tour Engine - Public Operations
Entry points used by a game/presentation layer, plus the SolutionSet that
holds one tour per strategy over the same point set.
"""

import threading
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from enhanced_search import EnhancedLocalSearch
from nearest_neighbor import NearestNeighborConstructor
from tsp_core import (
    DistanceMatrix,
    InvalidInputError,
    Point,
    Tour,
    tour_length as _tour_length,
    validate_points,
)
from two_opt import TwoOptSearch


NEAREST_NEIGHBOR = "nearest_neighbor"
TWO_OPT = "two_opt"
ENHANCED = "enhanced"

STRATEGIES = (NEAREST_NEIGHBOR, TWO_OPT, ENHANCED)

TourLike = Union[Tour, Sequence[int]]


def build_nearest_neighbor(points: Sequence[Point], verbose: bool = False) -> Tour:
    """Greedy tour from the anchor; an empty point set gives an empty tour."""
    return NearestNeighborConstructor(points).construct(verbose=verbose)


def refine_two_opt(points: Sequence[Point], starting_tour: TourLike, verbose: bool = False) -> Tour:
    """2-opt refinement of a copy of starting_tour."""
    if not points:
        raise InvalidInputError("Cannot refine a tour over an empty point set.")
    return TwoOptSearch(points).solve(Tour.coerce(starting_tour), verbose=verbose)


def refine_enhanced(
    points: Sequence[Point],
    starting_tour: TourLike,
    verbose: bool = False,
    cancel_event: Optional[threading.Event] = None,
    callback: Optional[Callable[[EnhancedLocalSearch, Tour], None]] = None,
) -> Tour:
    """Multi-operator refinement of a copy of starting_tour."""
    if not points:
        raise InvalidInputError("Cannot refine a tour over an empty point set.")
    search = EnhancedLocalSearch(points)
    return search.solve(
        Tour.coerce(starting_tour),
        verbose=verbose,
        cancel_event=cancel_event,
        callback=callback,
    )


def tour_length(points: Sequence[Point], tour: TourLike) -> float:
    """Length of a tour over points; 0 for tours of fewer than two stops."""
    return _tour_length(points, tour)


class SolutionSet:
    """
    Named tours over one point set.

    Tours are copied when stored and when read, so strategies never share
    a mutable tour.
    """

    def __init__(self, points: Sequence[Point]):
        validate_points(points, allow_empty=True)
        self.points = list(points)
        self._tours: Dict[str, Tour] = {}

    def add(self, name: str, tour: TourLike) -> None:
        self._tours[name] = Tour.coerce(tour)

    def get(self, name: str) -> Tour:
        return self._tours[name].clone()

    def names(self) -> List[str]:
        return list(self._tours)

    def length(self, name: str) -> float:
        return _tour_length(self.points, self._tours[name])

    def lengths(self) -> Dict[str, float]:
        return {name: self.length(name) for name in self._tours}

    def rank(self) -> List[Tuple[str, float]]:
        """Strategies sorted from shortest to longest tour."""
        return sorted(self.lengths().items(), key=lambda item: item[1])

    def best(self) -> Tuple[str, Tour, float]:
        if not self._tours:
            raise KeyError("SolutionSet is empty")
        name, length = self.rank()[0]
        return name, self.get(name), length

    def compare(self, length: float) -> Dict[str, float]:
        """Difference between a given tour length and every stored tour."""
        return {name: length - other for name, other in self.lengths().items()}

    def __contains__(self, name):
        return name in self._tours

    def __len__(self):
        return len(self._tours)

    def __repr__(self):
        parts = ", ".join(f"{name}={length:.2f}" for name, length in self.lengths().items())
        return f"SolutionSet({parts})"


def solve_all(
    points: Sequence[Point],
    starting_tour: Optional[TourLike] = None,
    verbose: bool = False,
) -> SolutionSet:
    """
    Build the baseline and refine independent copies with each strategy.

    When starting_tour is given it replaces the nearest neighbor baseline
    as the starting point of both refinements.
    """
    solutions = SolutionSet(points)
    if not points:
        solutions.add(NEAREST_NEIGHBOR, Tour())
        return solutions

    distance_matrix = DistanceMatrix(points)
    baseline = NearestNeighborConstructor(points, distance_matrix=distance_matrix).construct(verbose=verbose)
    solutions.add(NEAREST_NEIGHBOR, baseline)

    start = Tour.coerce(starting_tour) if starting_tour is not None else baseline

    two_opt = TwoOptSearch(points, distance_matrix=distance_matrix)
    solutions.add(TWO_OPT, two_opt.solve(start.clone(), verbose=verbose))

    enhanced = EnhancedLocalSearch(points, distance_matrix=distance_matrix)
    solutions.add(ENHANCED, enhanced.solve(start.clone(), verbose=verbose))

    return solutions
