import math

import pytest
from hypothesis import given

from solver_api import (
    ENHANCED,
    NEAREST_NEIGHBOR,
    TWO_OPT,
    SolutionSet,
    build_nearest_neighbor,
    refine_enhanced,
    refine_two_opt,
    solve_all,
    tour_length,
)
from tests.helpers import LENGTH_TOL, assert_valid_cycle, point_sets
from tsp_core import InvalidInputError, MalformedTourError, Tour


# ---------------------------------------------------------------------------
#  Concrete rounds
# ---------------------------------------------------------------------------
def test_unit_square_round(unit_square):
    nn = build_nearest_neighbor(unit_square)
    assert nn == [0, 1, 2, 3, 0]
    assert tour_length(unit_square, nn) == pytest.approx(4.0)

    refined = refine_two_opt(unit_square, nn)
    assert refined == [0, 1, 2, 3, 0]
    assert tour_length(unit_square, refined) == pytest.approx(4.0)


def test_collinear_round(collinear):
    nn = build_nearest_neighbor(collinear)
    for tour in (nn, refine_two_opt(collinear, nn), refine_enhanced(collinear, nn)):
        assert tour_length(collinear, tour) == pytest.approx(20.0)


# ---------------------------------------------------------------------------
#  Input handling
# ---------------------------------------------------------------------------
def test_empty_points():
    assert build_nearest_neighbor([]) == Tour()
    assert tour_length([], Tour()) == 0.0

    with pytest.raises(InvalidInputError):
        refine_two_opt([], Tour())
    with pytest.raises(InvalidInputError):
        refine_enhanced([], Tour())


def test_refine_accepts_plain_sequences(unit_square):
    assert refine_two_opt(unit_square, [0, 2, 1, 3, 0]) == [0, 1, 2, 3, 0]
    assert tour_length(unit_square, refine_enhanced(unit_square, (0, 2, 1, 3, 0))) == pytest.approx(4.0)


def test_refine_never_mutates_the_callers_tour(unit_square):
    start = Tour([0, 2, 1, 3, 0])
    refine_two_opt(unit_square, start)
    refine_enhanced(unit_square, start)
    assert start == [0, 2, 1, 3, 0]


@pytest.mark.parametrize("refine", [refine_two_opt, refine_enhanced])
@pytest.mark.parametrize("order", [[0, 1, 2, 0], [0, 1, 2, 3], [0, 1, 1, 3, 0]])
def test_refine_rejects_malformed_tours(unit_square, refine, order):
    with pytest.raises(MalformedTourError):
        refine(unit_square, order)


# ---------------------------------------------------------------------------
#  SolutionSet
# ---------------------------------------------------------------------------
def test_solution_set_copies_on_add_and_get(unit_square):
    solutions = SolutionSet(unit_square)
    tour = Tour([0, 1, 2, 3, 0])
    solutions.add("player", tour)

    tour.order.reverse()
    assert solutions.get("player") == [0, 1, 2, 3, 0]

    fetched = solutions.get("player")
    fetched.order[1], fetched.order[2] = fetched.order[2], fetched.order[1]
    assert solutions.get("player") == [0, 1, 2, 3, 0]


def test_solution_set_rank_best_compare(unit_square):
    solutions = SolutionSet(unit_square)
    solutions.add("crossed", [0, 2, 1, 3, 0])
    solutions.add("square", [0, 1, 2, 3, 0])

    assert [name for name, _ in solutions.rank()] == ["square", "crossed"]
    name, tour, length = solutions.best()
    assert name == "square"
    assert tour == [0, 1, 2, 3, 0]
    assert length == pytest.approx(4.0)

    diff = solutions.compare(5.0)
    assert diff["square"] == pytest.approx(1.0)
    assert diff["crossed"] == pytest.approx(5.0 - (2 + 2 * math.sqrt(2)))

    assert "square" in solutions
    assert len(solutions) == 2


def test_empty_solution_set_has_no_best():
    with pytest.raises(KeyError):
        SolutionSet([]).best()


def test_solve_all_unit_square(unit_square):
    solutions = solve_all(unit_square)
    assert solutions.names() == [NEAREST_NEIGHBOR, TWO_OPT, ENHANCED]
    for length in solutions.lengths().values():
        assert length == pytest.approx(4.0)


def test_solve_all_with_starting_tour(unit_square):
    solutions = solve_all(unit_square, starting_tour=[0, 2, 1, 3, 0])
    assert solutions.get(NEAREST_NEIGHBOR) == [0, 1, 2, 3, 0]
    assert solutions.length(TWO_OPT) == pytest.approx(4.0)
    assert solutions.length(ENHANCED) == pytest.approx(4.0)


def test_solve_all_empty():
    solutions = solve_all([])
    assert solutions.names() == [NEAREST_NEIGHBOR]
    assert solutions.length(NEAREST_NEIGHBOR) == 0.0


@given(point_sets(max_size=20))
def test_refinements_never_worse_than_baseline(points):
    solutions = solve_all(points)
    baseline = solutions.length(NEAREST_NEIGHBOR)

    for name in (TWO_OPT, ENHANCED):
        assert_valid_cycle(points, solutions.get(name))
        length = solutions.length(name)
        assert math.isfinite(length) and length >= 0
        assert length <= baseline + LENGTH_TOL
