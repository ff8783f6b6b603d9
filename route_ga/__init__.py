"""
Genetic algorithm for closed-tour TSP over 2D points: roulette selection,
ordered crossover and swap mutation on index permutations.
"""

from .errors import InvalidConfiguration, RouteGAError, SelectionInvariantViolation
from .evaluation import MAX_FITNESS, Point, distance, fitness
from .evolutionary import EvolutionConfig, Individual, Population, SolveResult, solve

__all__ = [
    "InvalidConfiguration",
    "RouteGAError",
    "SelectionInvariantViolation",
    "MAX_FITNESS",
    "Point",
    "distance",
    "fitness",
    "EvolutionConfig",
    "Individual",
    "Population",
    "SolveResult",
    "solve",
]
