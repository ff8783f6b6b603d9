import logging
import math
import numbers
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidConfiguration
from .evaluation import Point, all_finite, as_coords, distance, fitness_from_distance, is_degenerate
from .operators import crossover, cumulative_fitness, random_permutation, spin, swap_mutation

logger = logging.getLogger(__name__)


@dataclass
class EvolutionConfig:
    population_size: int = 100
    generations: int = 10000
    crossover_probability: float = 0.3
    mutation_probability: float = 0.005
    random_seed: Optional[int] = None

    def validate(self) -> None:
        _check_count("generations", self.generations)
        if self.generations < 0:
            raise InvalidConfiguration(f"generations must be >= 0, got {self.generations}")
        _check_population_args(self.population_size, self.crossover_probability, self.mutation_probability)


def _check_count(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")


def _check_population_args(size: int, crossover_probability: float, mutation_probability: float) -> None:
    _check_count("population size", size)
    if size < 2:
        raise InvalidConfiguration(f"population size must be >= 2, got {size}")
    for name, value in (
        ("crossover probability", crossover_probability),
        ("mutation probability", mutation_probability),
    ):
        if not 0.0 <= value <= 1.0:
            raise InvalidConfiguration(f"{name} must be within [0, 1], got {value}")


@dataclass(frozen=True)
class Individual:
    chromosome: Tuple[int, ...]
    distance: float
    fitness: float

    @staticmethod
    def from_chromosome(coords: np.ndarray, chromosome: Sequence[int]) -> "Individual":
        dist = distance(coords, chromosome)
        return Individual(chromosome=tuple(chromosome), distance=dist, fitness=fitness_from_distance(dist))


class Population:
    """One generation of candidate tours over a fixed point list.

    The engine persists across generations; ``advance_generation`` replaces
    ``current`` wholesale with a bred list of the same size. Odd sizes drop
    the second child of the final pair.
    """

    def __init__(
        self,
        size: int,
        crossover_probability: float,
        mutation_probability: float,
        points: Sequence[Point],
        rng: random.Random = None,
    ):
        _check_population_args(size, crossover_probability, mutation_probability)
        if len(points) == 0:
            raise InvalidConfiguration("at least one point is required")
        if not all_finite(points):
            raise InvalidConfiguration("point coordinates must be finite")
        self.points: Tuple[Point, ...] = tuple(Point(float(x), float(y)) for x, y in points)
        self.coords = as_coords(self.points)
        self.size = size
        self.crossover_probability = crossover_probability
        self.mutation_probability = mutation_probability
        self.rng = rng or random.Random()
        self.generation = 0
        if is_degenerate(self.coords):
            logger.warning("all %d points coincide; every tour has zero length", len(self.points))
        self.current: List[Individual] = [
            Individual.from_chromosome(self.coords, random_permutation(len(self.points), self.rng))
            for _ in range(size)
        ]
        self._fittest = self._find_fittest()

    @classmethod
    def from_config(cls, config: EvolutionConfig, points: Sequence[Point], rng: random.Random = None) -> "Population":
        return cls(
            config.population_size,
            config.crossover_probability,
            config.mutation_probability,
            points,
            rng=rng or random.Random(config.random_seed),
        )

    @property
    def fittest(self) -> Individual:
        return self._fittest

    def _find_fittest(self) -> Individual:
        best = self.current[0]
        for ind in self.current[1:]:
            if ind.fitness > best.fitness:
                best = ind
        return best

    def _two_children(self, cumulative: List[float]) -> Tuple[Individual, Individual]:
        mom = self.current[spin(cumulative, self.rng)].chromosome
        dad = self.current[spin(cumulative, self.rng)].chromosome
        if self.rng.random() < self.crossover_probability:
            first, second = crossover(mom, dad, self.rng)
        else:
            first, second = mom, dad
        first = swap_mutation(first, self.mutation_probability, self.rng)
        second = swap_mutation(second, self.mutation_probability, self.rng)
        return (
            Individual.from_chromosome(self.coords, first),
            Individual.from_chromosome(self.coords, second),
        )

    def advance_generation(self) -> None:
        cumulative = cumulative_fitness([ind.fitness for ind in self.current])
        evolved: List[Individual] = []
        while len(evolved) < self.size:
            evolved.extend(self._two_children(cumulative))
        self.current = evolved[: self.size]
        self._fittest = self._find_fittest()
        self.generation += 1


@dataclass
class SolveResult:
    route: List[Point]
    chromosome: Tuple[int, ...]
    distance: float
    fitness: float
    found_at: int
    generations: int
    optimum: Optional[float] = None

    @property
    def gap(self) -> float:
        if self.optimum is None or math.isclose(self.optimum, 0.0):
            return float("inf")
        return (self.distance - self.optimum) / self.optimum


def solve(
    points: Sequence[Point],
    config: EvolutionConfig,
    rng: random.Random = None,
    optimum: Optional[float] = None,
) -> SolveResult:
    """Run ``config.generations`` generations and return the best tour seen in any of them."""
    config.validate()
    population = Population.from_config(config, points, rng=rng)
    logger.info(
        "solving %d points: population=%d generations=%d pc=%s pm=%s",
        len(population.points),
        config.population_size,
        config.generations,
        config.crossover_probability,
        config.mutation_probability,
    )
    best = population.fittest
    found_at = 0
    for _ in range(config.generations):
        population.advance_generation()
        candidate = population.fittest
        if candidate.fitness > best.fitness:
            best = candidate
            found_at = population.generation
            logger.debug("gen %d: new best distance=%.6f", found_at, best.distance)
    logger.info("best distance %.6f found at generation %d", best.distance, found_at)
    return SolveResult(
        route=[population.points[i] for i in best.chromosome],
        chromosome=best.chromosome,
        distance=best.distance,
        fitness=best.fitness,
        found_at=found_at,
        generations=population.generation,
        optimum=optimum,
    )
