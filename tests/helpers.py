from __future__ import annotations

from hypothesis import strategies as st

from tsp_core import ANCHOR_ID, Tour, points_from_coordinates

LENGTH_TOL = 1e-9

coordinate = st.floats(min_value=0.0, max_value=100.0, allow_nan=False, allow_infinity=False)


@st.composite
def point_sets(draw, min_size: int = 1, max_size: int = 20):
    coords = draw(st.lists(st.tuples(coordinate, coordinate), min_size=min_size, max_size=max_size))
    return points_from_coordinates(coords)


def assert_valid_cycle(points, tour: Tour) -> None:
    """Closed at the anchor and a permutation of every point id."""
    order = list(tour)
    assert len(order) == len(points) + 1
    assert order[0] == order[-1] == ANCHOR_ID
    assert sorted(order[:-1]) == list(range(len(points)))
