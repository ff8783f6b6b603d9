import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import tsplib95

from .errors import InvalidConfiguration
from .evaluation import Point, distance

logger = logging.getLogger(__name__)


@dataclass
class Instance:
    name: str
    path: Optional[Path]
    points: List[Point]
    optimum: Optional[float]


def random_point(size: float, rng: random.Random) -> Point:
    """Point with both coordinates in ``[-size/2, size/2)``."""
    return Point((rng.random() - 0.5) * size, (rng.random() - 0.5) * size)


def random_points(n: int, size: float = 50.0, rng: random.Random = None) -> List[Point]:
    rng = rng or random.Random()
    return [random_point(size, rng) for _ in range(n)]


def random_instance(n: int, size: float = 50.0, rng: random.Random = None) -> Instance:
    return Instance(name=f"random{n}", path=None, points=random_points(n, size, rng), optimum=None)


def parse_points(text: str) -> List[Point]:
    """Parse ``"x,y;x,y;..."`` into points. Blank entries are skipped."""
    points = []
    for chunk in text.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        coords = chunk.split(",")
        if len(coords) != 2:
            raise InvalidConfiguration(f"expected 'x,y', got {chunk!r}")
        try:
            points.append(Point(float(coords[0]), float(coords[1])))
        except ValueError as exc:
            raise InvalidConfiguration(f"bad coordinate in {chunk!r}") from exc
    return points


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    for ext in (".opt.tour", ".opt", ".tour"):
        yield path.parent / "solutions" / f"{path.stem}{ext}"


def _load_optimum(points: List[Point], index_of: Dict[int, int], path: Path) -> Optional[float]:
    for candidate in _solution_candidates(path):
        if not candidate.exists():
            continue
        try:
            tour_file = tsplib95.parse(candidate.read_text())
            tour = [index_of[node] for node in tour_file.tours[0]]
        except (KeyError, IndexError, ValueError) as exc:
            logger.warning("ignoring unreadable tour %s: %s", candidate, exc)
            continue
        return distance(points, tour)
    return None


def load_instance(path: Path) -> Instance:
    path = Path(path)
    problem = tsplib95.load(path)
    if not problem.node_coords:
        raise InvalidConfiguration(f"{path} has no node coordinates")
    nodes = sorted(problem.node_coords)
    index_of = {node: i for i, node in enumerate(nodes)}
    points = [Point(float(problem.node_coords[n][0]), float(problem.node_coords[n][1])) for n in nodes]
    optimum = _load_optimum(points, index_of, path)
    return Instance(name=problem.name or path.stem, path=path, points=points, optimum=optimum)
