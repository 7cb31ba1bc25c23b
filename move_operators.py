"""
Local Search Move Operators
City exchange and Or-opt chain relocation, used by the enhanced search.

Each operator scans in a fixed order and applies the first improving move
it finds to a copy of the tour. `improve()` returns that copy, or None when
no improving move of its kind exists.
"""

from typing import Optional, Sequence, Tuple

from tsp_core import (
    MAX_OR_OPT_CHAIN,
    OR_OPT_CITIES_PER_CHAIN,
    OR_OPT_EPSILON,
    DistanceMatrix,
    Point,
    Tour,
    validate_points,
)


def max_chain_length(n_cities: int) -> int:
    """Longest Or-opt chain tried for a tour over n_cities points."""
    return min(MAX_OR_OPT_CHAIN, n_cities // OR_OPT_CITIES_PER_CHAIN)


class MoveOperator:
    """Shared setup for operators working on one fixed point set."""

    name = "move"

    def __init__(self, points: Sequence[Point], distance_matrix: Optional[DistanceMatrix] = None):
        validate_points(points)
        self.points = list(points)
        self.n_cities = len(self.points)
        self.distance_matrix = distance_matrix or DistanceMatrix(self.points)

    def find_move(self, order: Sequence[int]):
        raise NotImplementedError

    def apply_move(self, order: Sequence[int], move) -> list:
        raise NotImplementedError

    def improve(self, tour: Tour) -> Optional[Tour]:
        move = self.find_move(tour.order)
        if move is None:
            return None
        return Tour(self.apply_move(tour.order, move))

    def __repr__(self):
        return f"{type(self).__name__}(n_cities={self.n_cities})"


class CitySwap(MoveOperator):
    """
    Exchange the positions of two non-adjacent interior cities.

    Adjacent pairs (j == i + 1) are skipped: swapping neighbours is the
    same move as a 2-opt reversal of length two.
    """

    name = "swap"

    def find_move(self, order: Sequence[int]) -> Optional[Tuple[int, int]]:
        d = self.distance_matrix.rows
        m = len(order)

        for i in range(1, m - 3):
            prev_i = order[i - 1]
            city_i = order[i]
            next_i = order[i + 1]
            for j in range(i + 2, m - 1):
                prev_j = order[j - 1]
                city_j = order[j]
                next_j = order[j + 1]

                before = (d[prev_i][city_i] + d[city_i][next_i]
                          + d[prev_j][city_j] + d[city_j][next_j])
                after = (d[prev_i][city_j] + d[city_j][next_i]
                         + d[prev_j][city_i] + d[city_i][next_j])

                if after < before:
                    return i, j
        return None

    def apply_move(self, order: Sequence[int], move: Tuple[int, int]) -> list:
        i, j = move
        new = list(order)
        new[i], new[j] = new[j], new[i]
        return new


class OrOptRelocate(MoveOperator):
    """
    Move a chain of `chain_length` consecutive cities elsewhere in the tour.

    The chain keeps its direction. A relocation is accepted when
    removal gain + insertion cost < -epsilon, which keeps floating point
    noise from being taken as an improvement.
    """

    name = "or_opt"

    def __init__(
        self,
        points: Sequence[Point],
        chain_length: int = 1,
        epsilon: float = OR_OPT_EPSILON,
        distance_matrix: Optional[DistanceMatrix] = None,
    ):
        super().__init__(points, distance_matrix=distance_matrix)
        if chain_length < 1:
            raise ValueError(f"chain_length must be at least 1, got {chain_length}")
        self.chain_length = chain_length
        self.epsilon = epsilon
        self.name = f"or_opt_{chain_length}"

    def find_move(self, order: Sequence[int]) -> Optional[Tuple[int, int]]:
        """Return the first improving (chain start, insertion position)."""
        d = self.distance_matrix.rows
        k = self.chain_length
        m = len(order)

        # Chain t[i .. i+k-1] must stay inside positions 1 .. m-2
        for i in range(1, m - k):
            prev = order[i - 1]
            first = order[i]
            last = order[i + k - 1]
            nxt = order[i + k]

            removal_gain = d[prev][nxt] - d[prev][first] - d[last][nxt]

            # Insert between t[j-1] and t[j]; edges inside or bordering the
            # chain (j in [i, i+k]) are not candidates.
            for j in range(1, m):
                if i <= j <= i + k:
                    continue
                left = order[j - 1]
                right = order[j]
                insertion_cost = d[left][first] + d[last][right] - d[left][right]

                if removal_gain + insertion_cost < -self.epsilon:
                    return i, j
        return None

    def apply_move(self, order: Sequence[int], move: Tuple[int, int]) -> list:
        i, j = move
        k = self.chain_length
        chain = list(order[i:i + k])
        new = list(order[:i]) + list(order[i + k:])

        insert_at = j - k if j > i else j
        new[insert_at:insert_at] = chain
        return new

    def __repr__(self):
        return f"OrOptRelocate(n_cities={self.n_cities}, chain_length={self.chain_length})"
