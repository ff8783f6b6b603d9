from typing import NamedTuple, Sequence, Union

import numpy as np


class Point(NamedTuple):
    x: float
    y: float


Points = Union[Sequence[Point], np.ndarray]

# Fitness of a zero-length tour. Finite so that summing a whole population of
# them during roulette selection cannot overflow to inf.
MAX_FITNESS = 1e300


def as_coords(points: Points) -> np.ndarray:
    """Return points as an (n, 2) float array; arrays already in that shape pass through."""
    if isinstance(points, np.ndarray) and points.dtype == np.float64 and points.ndim == 2:
        return points
    return np.asarray(points, dtype=np.float64).reshape(-1, 2)


def distance(points: Points, route: Sequence[int]) -> float:
    """Length of the closed tour visiting ``points`` in ``route`` order."""
    if len(route) == 0:
        return 0.0
    coords = as_coords(points)[np.asarray(route, dtype=np.intp)]
    step = np.roll(coords, -1, axis=0) - coords
    return float(np.hypot(step[:, 0], step[:, 1]).sum())


def fitness_from_distance(dist: float) -> float:
    if dist <= 0.0:
        return MAX_FITNESS
    return min(1.0 / dist, MAX_FITNESS)


def fitness(points: Points, route: Sequence[int]) -> float:
    return fitness_from_distance(distance(points, route))


def is_degenerate(points: Points) -> bool:
    """True when every tour over ``points`` has zero length."""
    coords = as_coords(points)
    if len(coords) < 2:
        return True
    return bool(np.all(coords == coords[0]))


def all_finite(points: Points) -> bool:
    return bool(np.isfinite(as_coords(points)).all())
