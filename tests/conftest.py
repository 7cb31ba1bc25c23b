from __future__ import annotations

import random

import matplotlib
import numpy as np
import pytest

matplotlib.use("Agg")

try:
    from hypothesis import HealthCheck, settings
except ImportError:  # pragma: no cover
    settings = None
    HealthCheck = None

from tsp_core import points_from_coordinates


TEST_SEED = 1337
random.seed(TEST_SEED)
np.random.seed(TEST_SEED)

if settings is not None:  # pragma: no branch
    settings.register_profile(
        "ci",
        max_examples=40,
        deadline=None,
        derandomize=True,
        print_blob=True,
        suppress_health_check=(
            HealthCheck.filter_too_much,
            HealthCheck.too_slow,
        ),
    )
    settings.load_profile("ci")


@pytest.fixture
def unit_square():
    return points_from_coordinates([(0, 0), (0, 1), (1, 1), (1, 0)])


@pytest.fixture
def collinear():
    return points_from_coordinates([(0, 0), (5, 0), (10, 0)])


@pytest.fixture
def crossed_five():
    """Square plus a point below it; [0, 2, 1, 3, 4, 0] crosses itself."""
    return points_from_coordinates([(0, 0), (0, 2), (2, 2), (2, 0), (1, -1)])


@pytest.fixture
def line_points():
    return points_from_coordinates([(x, 0) for x in range(6)])
