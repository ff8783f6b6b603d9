import random

from route_ga.evaluation import Point

SQUARE = [Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, 1.0), Point(0.0, 1.0)]


class FixedRandom(random.Random):
    """Random source whose ``random()`` replays a fixed list of values."""

    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)

    def random(self):
        return self._values.pop(0)


def is_permutation(chromosome, n):
    return len(chromosome) == n and sorted(chromosome) == list(range(n))
