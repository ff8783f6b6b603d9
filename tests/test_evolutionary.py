import dataclasses
import logging
import math
import random

import pytest

from route_ga.errors import InvalidConfiguration, SelectionInvariantViolation
from route_ga.evaluation import MAX_FITNESS, Point, distance
from route_ga.evolutionary import EvolutionConfig, Individual, Population, SolveResult, solve
from route_ga.operators import cumulative_fitness

from .helpers import SQUARE, is_permutation


def _points(n, seed=0):
    rng = random.Random(seed)
    return [Point(rng.uniform(0, 100), rng.uniform(0, 100)) for _ in range(n)]


def test_initial_population():
    points = _points(10)
    pop = Population(20, 0.7, 0.02, points, rng=random.Random(1))
    assert pop.generation == 0
    assert len(pop.current) == 20
    for ind in pop.current:
        assert is_permutation(ind.chromosome, 10)
        assert ind.distance == pytest.approx(distance(points, ind.chromosome))
        assert ind.fitness == pytest.approx(1 / ind.distance)
    assert pop.fittest.fitness == max(ind.fitness for ind in pop.current)


def test_every_generation_keeps_permutations():
    pop = Population(16, 1.0, 0.5, _points(12), rng=random.Random(2))
    for g in range(1, 30):
        pop.advance_generation()
        assert pop.generation == g
        assert len(pop.current) == 16
        assert all(is_permutation(ind.chromosome, 12) for ind in pop.current)
        assert pop.fittest in pop.current
        assert pop.fittest.fitness == max(ind.fitness for ind in pop.current)


def test_odd_population_size_is_kept():
    pop = Population(5, 0.5, 0.1, _points(6), rng=random.Random(3))
    for _ in range(10):
        pop.advance_generation()
        assert len(pop.current) == 5


def test_odd_population_drops_second_child_of_last_pair():
    points = _points(6)
    pop = Population(5, 0.5, 0.1, points, rng=random.Random(13))
    twin = Population(5, 0.5, 0.1, points, rng=random.Random(13))
    assert twin.current == pop.current

    cumulative = cumulative_fitness([ind.fitness for ind in twin.current])
    children = []
    for _ in range(3):
        children.extend(twin._two_children(cumulative))

    pop.advance_generation()
    assert pop.current == children[:5]
    assert pop.current[-1] == children[4]


def test_previous_generation_is_not_modified():
    pop = Population(10, 1.0, 1.0, _points(8), rng=random.Random(4))
    old = list(pop.current)
    snapshot = [ind.chromosome for ind in old]
    pop.advance_generation()
    assert [ind.chromosome for ind in old] == snapshot
    with pytest.raises(dataclasses.FrozenInstanceError):
        old[0].fitness = 0.0


@pytest.mark.parametrize(
    "size, pc, pm, points",
    [
        (1, 0.5, 0.5, SQUARE),
        (0, 0.5, 0.5, SQUARE),
        (10, -0.1, 0.5, SQUARE),
        (10, 0.5, 1.5, SQUARE),
        (10, float("nan"), 0.5, SQUARE),
        (10, 0.5, 0.5, []),
        (10, 0.5, 0.5, [Point(0, 0), Point(float("inf"), 1)]),
        (2.5, 0.5, 0.5, SQUARE),
        (4.0, 0.5, 0.5, SQUARE),
        (True, 0.5, 0.5, SQUARE),
    ],
)
def test_invalid_configuration(size, pc, pm, points):
    with pytest.raises(InvalidConfiguration):
        Population(size, pc, pm, points, rng=random.Random(0))


@pytest.mark.parametrize(
    "cfg",
    [
        EvolutionConfig(population_size=10, generations=-1),
        EvolutionConfig(population_size=10, generations=1.5),
        EvolutionConfig(population_size=10, generations=None),
        EvolutionConfig(population_size=10.0, generations=3),
    ],
)
def test_invalid_configuration_is_a_value_error(cfg, monkeypatch):
    def no_population(*args, **kwargs):
        raise AssertionError("configuration must be rejected before building a population")

    monkeypatch.setattr(Population, "from_config", no_population)
    with pytest.raises(ValueError):
        solve(SQUARE, cfg)
    with pytest.raises(InvalidConfiguration):
        cfg.validate()


def test_single_point_and_coincident_points(caplog):
    with caplog.at_level(logging.WARNING, logger="route_ga.evolutionary"):
        pop = Population(4, 0.7, 0.3, [Point(3, 3)] * 5, rng=random.Random(5))
    assert "coincide" in caplog.text
    pop.advance_generation()
    assert all(ind.fitness == MAX_FITNESS for ind in pop.current)

    result = solve([Point(1, 2)], EvolutionConfig(population_size=2, generations=3, random_seed=1))
    assert result.route == [Point(1, 2)]
    assert result.distance == 0.0
    assert result.fitness == MAX_FITNESS


def test_broken_fitness_bookkeeping_aborts_the_run():
    pop = Population(4, 0.5, 0.1, SQUARE, rng=random.Random(6))
    pop.current = [Individual(chromosome=(0, 1, 2, 3), distance=4.0, fitness=-0.25)] * 4
    with pytest.raises(SelectionInvariantViolation):
        pop.advance_generation()


def test_selection_never_fails_on_valid_runs():
    for seed in range(5):
        solve(_points(7, seed), EvolutionConfig(population_size=7, generations=40, random_seed=seed))


def test_seeded_populations_are_identical():
    points = _points(15)
    a = Population(12, 0.7, 0.05, points, rng=random.Random(42))
    b = Population(12, 0.7, 0.05, points, rng=random.Random(42))
    for _ in range(25):
        assert a.current == b.current
        a.advance_generation()
        b.advance_generation()
    assert a.current == b.current


def test_seeded_solve_is_reproducible():
    points = _points(15)
    cfg = EvolutionConfig(population_size=20, generations=60, crossover_probability=0.7, mutation_probability=0.02, random_seed=9)
    assert solve(points, cfg) == solve(points, cfg)
    assert solve(points, cfg, rng=random.Random(1)) == solve(points, cfg, rng=random.Random(1))


def test_unit_square_converges_to_perimeter():
    cfg = EvolutionConfig(
        population_size=50,
        generations=200,
        mutation_probability=0.02,
        crossover_probability=0.7,
        random_seed=2024,
    )
    result = solve(SQUARE, cfg)
    assert result.distance == pytest.approx(4.0)
    assert result.fitness == pytest.approx(0.25)
    assert sorted(result.route) == sorted(SQUARE)
    for i, p in enumerate(result.route):
        q = result.route[(i + 1) % 4]
        assert math.hypot(p.x - q.x, p.y - q.y) == pytest.approx(1.0)
    assert result.generations == 200


def test_zero_generations_returns_initial_fittest(monkeypatch):
    points = _points(9)
    cfg = EvolutionConfig(population_size=10, generations=0, random_seed=3)
    initial = Population.from_config(cfg, points).fittest

    def no_breeding(self):
        raise AssertionError("advance_generation should not run")

    monkeypatch.setattr(Population, "advance_generation", no_breeding)
    result = solve(points, cfg)
    assert result.chromosome == initial.chromosome
    assert result.distance == initial.distance
    assert result.route == [points[i] for i in initial.chromosome]
    assert result.found_at == 0
    assert result.generations == 0


def test_solve_keeps_best_ever():
    points = _points(12)
    cfg = EvolutionConfig(population_size=10, generations=50, crossover_probability=0.9, mutation_probability=0.3, random_seed=5)
    pop = Population.from_config(cfg, points)
    best_seen = pop.fittest.fitness
    for _ in range(cfg.generations):
        pop.advance_generation()
        best_seen = max(best_seen, pop.fittest.fitness)
    result = solve(points, cfg)
    assert result.fitness == best_seen
    assert 0 <= result.found_at <= 50


def test_gap():
    result = SolveResult(route=[], chromosome=(), distance=11.0, fitness=1 / 11, found_at=0, generations=0, optimum=10.0)
    assert result.gap == pytest.approx(0.1)
    assert dataclasses.replace(result, optimum=None).gap == float("inf")
