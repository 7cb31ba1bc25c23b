import math
import threading

import pytest
from hypothesis import assume, given

from data_generator import generate_circle_points
from nearest_neighbor import NearestNeighborConstructor
from tests.helpers import LENGTH_TOL, assert_valid_cycle, point_sets
from tsp_core import InvalidInputError, MalformedTourError, Tour, tour_length
from two_opt import TwoOptSearch


def test_unit_square_is_already_optimal(unit_square):
    start = NearestNeighborConstructor(unit_square).construct()
    search = TwoOptSearch(unit_square)
    tour = search.solve(start)
    assert tour == [0, 1, 2, 3, 0]
    assert tour_length(unit_square, tour) == pytest.approx(4.0)
    assert search.improvements == 0
    assert search.converged


def test_collinear_cannot_improve(collinear):
    tour = TwoOptSearch(collinear).solve(Tour([0, 1, 2, 0]))
    assert tour_length(collinear, tour) == pytest.approx(20.0)


def test_uncrosses_square(unit_square):
    search = TwoOptSearch(unit_square)
    assert search.find_move([0, 2, 1, 3, 0]) == (1, 2)

    tour = search.solve(Tour([0, 2, 1, 3, 0]))
    assert tour == [0, 1, 2, 3, 0]
    assert search.history == pytest.approx([2 + 2 * math.sqrt(2), 4.0])


def test_improve_returns_none_at_local_optimum(unit_square):
    assert TwoOptSearch(unit_square).improve(Tour([0, 1, 2, 3, 0])) is None


def test_solve_does_not_mutate_input(unit_square):
    start = Tour([0, 2, 1, 3, 0])
    TwoOptSearch(unit_square).solve(start)
    assert start == [0, 2, 1, 3, 0]


def test_improvement_cap_is_respected():
    points = generate_circle_points(8)
    star = Tour([0, 4, 1, 5, 2, 6, 3, 7, 0])

    search = TwoOptSearch(points, max_improvements=1)
    tour = search.solve(star)

    assert search.improvements == 1
    assert not search.converged
    assert tour_length(points, tour) < tour_length(points, star)


def test_default_cap_scales_with_size():
    assert TwoOptSearch(generate_circle_points(10)).max_improvements == 80
    assert TwoOptSearch(generate_circle_points(40)).max_improvements == 200


def test_anchor_never_moves():
    points = generate_circle_points(9)
    tour = TwoOptSearch(points).solve(Tour([0, 5, 2, 7, 1, 8, 3, 6, 4, 0]))
    assert tour[0] == 0 and tour[-1] == 0
    assert_valid_cycle(points, tour)


def test_preset_cancel_event_leaves_tour_unchanged():
    points = generate_circle_points(8)
    star = Tour([0, 4, 1, 5, 2, 6, 3, 7, 0])
    event = threading.Event()
    event.set()

    search = TwoOptSearch(points)
    tour = search.solve(star, cancel_event=event)

    assert tour == star
    assert search.cancelled
    assert not search.converged
    assert search.improvements == 0


def test_cancel_from_callback_stops_after_current_move():
    points = generate_circle_points(8)
    star = Tour([0, 4, 1, 5, 2, 6, 3, 7, 0])
    event = threading.Event()
    received = []

    def on_move(solver, tour):
        received.append(tour)
        event.set()

    search = TwoOptSearch(points)
    tour = search.solve(star, cancel_event=event, callback=on_move)

    assert search.cancelled
    assert search.improvements == 1
    assert received == [tour]
    assert received[0] is not tour
    assert tour_length(points, tour) < tour_length(points, star)


def test_rejects_malformed_tour(unit_square):
    with pytest.raises(MalformedTourError):
        TwoOptSearch(unit_square).solve(Tour([0, 1, 2, 0]))


def test_rejects_empty_point_set():
    with pytest.raises(InvalidInputError):
        TwoOptSearch([])


@given(point_sets())
def test_never_worse_than_nearest_neighbor(points):
    start = NearestNeighborConstructor(points).construct()
    tour = TwoOptSearch(points).solve(start)

    assert_valid_cycle(points, tour)
    length = tour_length(points, tour)
    assert math.isfinite(length) and length >= 0
    assert length <= tour_length(points, start) + LENGTH_TOL


@given(point_sets(min_size=4))
def test_converged_output_is_a_fixed_point(points):
    start = NearestNeighborConstructor(points).construct()
    first = TwoOptSearch(points)
    tour = first.solve(start)
    assume(first.converged)

    second = TwoOptSearch(points)
    again = second.solve(tour)
    assert second.improvements == 0
    assert again == tour
    assert tour_length(points, again) == tour_length(points, tour)
