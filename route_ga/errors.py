class RouteGAError(Exception):
    """Base class for errors raised by route_ga."""


class InvalidConfiguration(RouteGAError, ValueError):
    """Rejected input: population size, points, probabilities or generation count."""


class SelectionInvariantViolation(RouteGAError, RuntimeError):
    """Roulette selection could not pick an individual.

    Only reachable when fitness bookkeeping is broken (empty population,
    negative or NaN fitness). The run is aborted rather than continued with
    an incomplete generation.
    """
