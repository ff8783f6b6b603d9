"""
Permutation-preserving genetic operators for index-based tours.

Every operator takes its random source explicitly and returns new lists; no
operator edits a chromosome it was given.
"""

import math
import random
from bisect import bisect_right
from itertools import accumulate
from typing import List, Sequence, Tuple

from .errors import SelectionInvariantViolation


def random_permutation(size: int, rng: random.Random) -> List[int]:
    """Fisher-Yates shuffle of ``0..size-1``."""
    perm = list(range(size))
    for i in range(size - 1, 0, -1):
        j = rng.randrange(i + 1)
        perm[i], perm[j] = perm[j], perm[i]
    return perm


def cumulative_fitness(fitnesses: Sequence[float]) -> List[float]:
    """Running totals of ``fitnesses``, checked once per generation before any draw."""
    if not fitnesses:
        raise SelectionInvariantViolation("roulette selection over an empty population")
    for i, f in enumerate(fitnesses):
        if not math.isfinite(f) or f < 0:
            raise SelectionInvariantViolation(f"invalid fitness {f!r} at index {i}")
    return list(accumulate(fitnesses))


def spin(cumulative: Sequence[float], rng: random.Random) -> int:
    """Draw an index from a ``cumulative_fitness`` table.

    Picks the first individual whose running total exceeds a threshold drawn
    uniformly from ``[0, total)``. A zero total, or a threshold that rounding
    leaves above every running total, selects the last individual.
    """
    last = len(cumulative) - 1
    total = cumulative[-1]
    if total <= 0.0:
        return last
    threshold = rng.random() * total
    return min(bisect_right(cumulative, threshold), last)


def roulette(fitnesses: Sequence[float], rng: random.Random) -> int:
    """Fitness-proportional selection, returns the index of the chosen individual."""
    return spin(cumulative_fitness(fitnesses), rng)


def ordered_crossover(seg_parent: Sequence[int], other_parent: Sequence[int], start: int, end: int) -> List[int]:
    """OX1: keep ``seg_parent[start:end]`` in place, fill the rest from ``other_parent``.

    Free slots are filled starting at ``end`` and wrapping around, taking the
    other parent's genes in its own order, also read from ``end`` onwards.
    """
    n = len(seg_parent)
    if len(other_parent) != n:
        raise ValueError("parents must have the same length")
    if not 0 <= start <= end <= n:
        raise ValueError(f"invalid cut points ({start}, {end}) for length {n}")
    child = list(seg_parent)
    kept = set(seg_parent[start:end])
    pos = end
    for i in range(n):
        gene = other_parent[(end + i) % n]
        if gene in kept:
            continue
        child[pos % n] = gene
        pos += 1
    return child


def crossover(mom: Sequence[int], dad: Sequence[int], rng: random.Random) -> Tuple[List[int], List[int]]:
    n = len(mom)
    a, b = rng.randrange(n), rng.randrange(n)
    start, end = min(a, b), max(a, b)
    return ordered_crossover(mom, dad, start, end), ordered_crossover(dad, mom, start, end)


def swap_mutation(chromosome: Sequence[int], rate: float, rng: random.Random) -> List[int]:
    genes = list(chromosome)
    n = len(genes)
    for i in range(n):
        if rng.random() < rate:
            j = rng.randrange(n)
            genes[i], genes[j] = genes[j], genes[i]
    return genes
