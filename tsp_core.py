"""
TSP Tour Engine - Core Module
Contains the fundamental data structures for points, tours and distances.
"""

import math
import numpy as np
from typing import Iterable, List, NamedTuple, Optional, Sequence, Union


# ==========================================
# CONFIGURATION
# ==========================================
ANCHOR_ID = 0                       # tours always start and end here
OR_OPT_EPSILON = 0.001              # minimum gain for an Or-opt relocation
TWO_OPT_MAX_IMPROVEMENTS = 200
TWO_OPT_IMPROVEMENTS_PER_CITY = 8
ENHANCED_MAX_ITERATIONS = 300
ENHANCED_ITERATIONS_PER_CITY = 10
MAX_OR_OPT_CHAIN = 3
OR_OPT_CITIES_PER_CHAIN = 5


class InvalidInputError(ValueError):
    """Raised when a point set cannot be used by an operation."""


class MalformedTourError(ValueError):
    """Raised when a tour violates the closed-walk / permutation invariant."""


class Point(NamedTuple):
    """Represents an immutable point with x, y coordinates and a stable id."""

    x: float
    y: float
    id: int

    def distance_to(self, other: 'Point') -> float:
        """Calculate Euclidean distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        return float(np.sqrt(dx * dx + dy * dy))

    def __repr__(self):
        return f"Point({self.id}: {self.x:.2f}, {self.y:.2f})"


def distance(p1: Point, p2: Point) -> float:
    """Straight-line distance between two points."""
    return p1.distance_to(p2)


class Tour:
    """Represents a tour as an ordered, closed sequence of point ids."""

    def __init__(self, order: Iterable[int] = None):
        self.order: List[int] = [int(i) for i in order] if order is not None else []

    @classmethod
    def coerce(cls, tour: Union['Tour', Sequence[int]]) -> 'Tour':
        """Return an independent Tour from a Tour or a plain id sequence."""
        if isinstance(tour, Tour):
            return tour.clone()
        return cls(tour)

    def clone(self) -> 'Tour':
        """Create a deep copy of the tour."""
        return Tour(self.order.copy())

    def __len__(self):
        return len(self.order)

    def __iter__(self):
        return iter(self.order)

    def __getitem__(self, index):
        return self.order[index]

    def __eq__(self, other):
        if isinstance(other, Tour):
            return self.order == other.order
        if isinstance(other, (list, tuple)):
            return self.order == list(other)
        return NotImplemented

    def __repr__(self):
        return f"Tour({self.order})"


class DistanceMatrix:
    """Precomputed distance matrix for efficient distance lookups."""

    def __init__(self, points: Sequence[Point]):
        self.points = list(points)
        self.n = len(self.points)
        self.matrix = np.zeros((self.n, self.n), dtype=np.float64)

        if self.n:
            coords = np.array([[p.x, p.y] for p in self.points], dtype=np.float64)
            diff = coords[:, None, :] - coords[None, :, :]
            self.matrix = np.sqrt(np.sum(diff * diff, axis=-1))

        # Nested lists are much faster than numpy scalars inside move scans
        self.rows: List[List[float]] = self.matrix.tolist() if self.n else []

    def get_distance(self, p1: Point, p2: Point) -> float:
        """Get precomputed distance between two points."""
        return float(self.matrix[p1.id, p2.id])

    def tour_length(self, order: Sequence[int]) -> float:
        if len(order) <= 1:
            return 0.0
        idx = np.asarray(order, dtype=np.intp)
        return float(np.sum(self.matrix[idx[:-1], idx[1:]], dtype=np.float64))


def tour_length(points: Sequence[Point], tour: Union[Tour, Sequence[int]]) -> float:
    """
    Total length of a tour: the sum of distances over consecutive ids.

    Sequences of length 0 or 1 have length 0. The sum is accumulated with
    numpy float64 pairwise summation. Ids outside the point list raise
    MalformedTourError instead of wrapping around.
    """
    order = tour.order if isinstance(tour, Tour) else list(tour)
    n = len(points)
    for city in order:
        if not 0 <= city < n:
            raise MalformedTourError(f"Tour references unknown point id {city}.")
    if len(order) <= 1:
        return 0.0
    coords = np.array([[points[i].x, points[i].y] for i in order], dtype=np.float64)
    steps = np.diff(coords, axis=0)
    return float(np.sum(np.hypot(steps[:, 0], steps[:, 1]), dtype=np.float64))


def points_from_coordinates(coords: Iterable[Sequence[float]]) -> List[Point]:
    """Build a point list from (x, y) pairs, assigning ids in order."""
    return [Point(float(x), float(y), i) for i, (x, y) in enumerate(coords)]


def validate_points(points: Sequence[Point], allow_empty: bool = False) -> None:
    """Check that ids equal indices and that coordinates are finite."""
    if not points:
        if allow_empty:
            return
        raise InvalidInputError("At least one point is required.")

    for index, p in enumerate(points):
        if p.id != index:
            raise InvalidInputError(
                f"Point at index {index} has id {p.id}; ids must equal their index."
            )
        if not (math.isfinite(p.x) and math.isfinite(p.y)):
            raise InvalidInputError(f"Point {index} has non-finite coordinates.")


def validate_tour(points: Sequence[Point], tour: Tour) -> None:
    """
    Check the closed-walk invariant of a tour over the given points.

    Raises MalformedTourError if the tour is not closed, has the wrong
    number of stops, repeats a point or references an unknown id.
    """
    n = len(points)
    order = tour.order

    if len(order) != n + 1:
        raise MalformedTourError(
            f"Tour has {len(order)} entries; expected {n + 1} for {n} points."
        )
    if order[0] != order[-1]:
        raise MalformedTourError(
            f"Tour is not closed: starts at {order[0]} but ends at {order[-1]}."
        )

    seen = set()
    for city in order[:-1]:
        if city < 0 or city >= n:
            raise MalformedTourError(f"Tour references unknown point id {city}.")
        if city in seen:
            raise MalformedTourError(f"Tour visits point {city} more than once.")
        seen.add(city)


def two_opt_improvement_cap(n_cities: int, max_improvements: Optional[int] = None) -> int:
    if max_improvements is not None:
        return max_improvements
    return min(TWO_OPT_MAX_IMPROVEMENTS, TWO_OPT_IMPROVEMENTS_PER_CITY * n_cities)


def enhanced_iteration_cap(n_cities: int, max_iterations: Optional[int] = None) -> int:
    if max_iterations is not None:
        return max_iterations
    return min(ENHANCED_MAX_ITERATIONS, ENHANCED_ITERATIONS_PER_CITY * n_cities)
