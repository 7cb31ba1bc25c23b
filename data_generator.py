import os
import re
from typing import List, Optional

import numpy as np

from tsp_core import InvalidInputError, Point


DIFFICULTY_LEVELS = {
    "easy": 10,
    "medium": 15,
    "hard": 25,
    "expert": 40,
}


def load_tsp_file(path) -> List[Point]:
    """
    TSPLIB coordinate loader.
    Reads the NODE_COORD_SECTION (or bare "index x y" lines when the
    section header is missing) and returns points with ids 0..n-1 in
    file order. Handles:
        - lowercase/uppercase section names
        - blank lines
        - trailing EOF marker
    """

    if not os.path.exists(path):
        raise FileNotFoundError(f"TSP file not found: {path}")

    with open(path, "r") as f:
        raw_lines = [l.strip() for l in f if l.strip()]

    lines_upper = [l.upper() for l in raw_lines]

    # --------------------------------------------
    # 1. Find the start of NODE_COORD_SECTION
    # --------------------------------------------
    start_index = None
    for i, line in enumerate(lines_upper):
        if "NODE_COORD_SECTION" in line:
            start_index = i + 1
            break

    if start_index is None:
        for i, line in enumerate(raw_lines):
            if re.match(r"^\s*\d+\s+[-]?\d+(\.\d+)?\s+[-]?\d+(\.\d+)?", line):
                start_index = i
                break

    if start_index is None:
        raise ValueError(f"Could not find coordinate section in: {path}")

    # --------------------------------------------
    # 2. Parse coordinates
    # --------------------------------------------
    points = []
    for line in raw_lines[start_index:]:
        if line.upper().startswith("EOF"):
            break

        if not re.match(r"^\d+", line):
            continue

        parts = re.split(r"\s+", line)
        if len(parts) < 3:
            continue

        try:
            x = float(parts[1])
            y = float(parts[2])
        except ValueError:
            continue
        points.append(Point(x, y, len(points)))

    if len(points) == 0:
        raise ValueError(f"No coordinates parsed in: {path}")

    return points


def generate_random_points(
    n: int,
    width: float = 100,
    height: float = 100,
    margin: float = 0.0,
    min_separation: float = 0.0,
    seed: Optional[int] = None,
    max_attempts: int = 1000,
) -> List[Point]:
    """
    Generate random points, optionally kept apart from each other.

    Args:
        n: Number of points to generate
        width: Width of the area
        height: Height of the area
        margin: Distance kept free along every border
        min_separation: Minimum distance between any two points
        seed: Seed for the numpy generator
        max_attempts: Draws tried per point before giving up

    Returns:
        List of points with ids 0..n-1
    """
    if n < 0:
        raise InvalidInputError(f"Point count must be non-negative, got {n}")
    if width - 2 * margin <= 0 or height - 2 * margin <= 0:
        raise InvalidInputError("Margin leaves no room to place points.")

    rng = np.random.default_rng(seed)
    points: List[Point] = []

    for i in range(n):
        for _ in range(max_attempts):
            x = float(rng.uniform(margin, width - margin))
            y = float(rng.uniform(margin, height - margin))
            candidate = Point(x, y, i)
            if all(candidate.distance_to(p) >= min_separation for p in points):
                points.append(candidate)
                break
        else:
            raise InvalidInputError(
                f"Could not place point {i} at least {min_separation} away from "
                f"the others after {max_attempts} attempts."
            )
    return points


def generate_circle_points(n: int, radius: float = 50, center_x: float = 50, center_y: float = 50) -> List[Point]:
    """
    Generate points arranged on a circle (for testing).

    Args:
        n: Number of points
        radius: Circle radius
        center_x: Circle center X coordinate
        center_y: Circle center Y coordinate

    Returns:
        List of points arranged in a circle
    """
    points = []
    for i in range(n):
        angle = 2 * np.pi * i / n
        x = center_x + radius * np.cos(angle)
        y = center_y + radius * np.sin(angle)
        points.append(Point(float(x), float(y), i))
    return points


def points_for_difficulty(
    level: str,
    custom_count: Optional[int] = None,
    width: float = 100,
    height: float = 100,
    seed: Optional[int] = None,
) -> List[Point]:
    """Random round for a difficulty level ("custom" uses custom_count)."""
    if level == "custom":
        if custom_count is None or custom_count < 1:
            raise InvalidInputError("A positive custom_count is required for 'custom'.")
        n = custom_count
    elif level in DIFFICULTY_LEVELS:
        n = DIFFICULTY_LEVELS[level]
    else:
        raise InvalidInputError(f"Unknown difficulty level: {level}")

    # Keep points apart the way a clickable board needs them
    min_separation = min(width, height) / (4 * np.sqrt(n))
    return generate_random_points(
        n,
        width=width,
        height=height,
        margin=min(width, height) * 0.05,
        min_separation=float(min_separation),
        seed=seed,
    )
