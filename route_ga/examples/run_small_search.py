import random

from route_ga.data import random_points
from route_ga.evolutionary import EvolutionConfig, Population


def main(generations: int = 50, seed: int = 7):
    rng = random.Random(seed)
    points = random_points(12, rng=rng)
    cfg = EvolutionConfig(population_size=30, crossover_probability=0.7, mutation_probability=0.02)
    population = Population.from_config(cfg, points, rng=rng)
    best = population.fittest
    for g in range(generations):
        population.advance_generation()
        if population.fittest.fitness > best.fitness:
            best = population.fittest
        print(f"gen {g+1}: fittest={population.fittest.distance:.2f} best={best.distance:.2f}")
    return best


if __name__ == "__main__":
    main()
