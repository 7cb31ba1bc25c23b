"""
Nearest Neighbor Constructor
Greedy baseline tour that always starts from the anchor point.
"""

from typing import List, Optional, Sequence

from tsp_core import ANCHOR_ID, DistanceMatrix, Point, Tour, validate_points


class NearestNeighborConstructor:
    """
    Builds a closed tour by repeatedly walking to the nearest unvisited point.

    The walk starts at the anchor (id 0), so results are reproducible for a
    fixed point order. Ties go to the lowest id because candidates are
    scanned in id order and only a strictly shorter distance replaces the
    current choice.
    """

    def __init__(self, points: Sequence[Point], distance_matrix: Optional[DistanceMatrix] = None):
        validate_points(points, allow_empty=True)
        self.points = list(points)
        self.n_cities = len(self.points)
        self.distance_matrix = distance_matrix or DistanceMatrix(self.points)

    def construct(self, verbose: bool = False) -> Tour:
        if self.n_cities == 0:
            return Tour()

        visited = [False] * self.n_cities
        path: List[int] = [ANCHOR_ID]
        visited[ANCHOR_ID] = True

        while len(path) < self.n_cities:
            last = path[-1]
            nearest = -1
            shortest = float("inf")

            for i in range(self.n_cities):
                if visited[i]:
                    continue
                d = self.distance_matrix.rows[last][i]
                if d < shortest:
                    shortest = d
                    nearest = i

            path.append(nearest)
            visited[nearest] = True

        # Return to the anchor
        path.append(path[0])

        tour = Tour(path)
        if verbose:
            print(f"[NN] Built tour over {self.n_cities} points, "
                  f"length {self.distance_matrix.tour_length(path):.2f}")
        return tour
