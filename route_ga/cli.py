import argparse
import json
import logging
import random
import time
from pathlib import Path
from typing import List, Optional

from route_ga.data import Instance, load_instance, parse_points, random_instance
from route_ga.errors import InvalidConfiguration
from route_ga.evolutionary import EvolutionConfig, SolveResult, solve

logger = logging.getLogger("route_ga")


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(asctime)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def _choose_instance(args, rng: random.Random) -> Instance:
    if args.tsplib:
        return load_instance(Path(args.tsplib))
    if args.nodes:
        points = parse_points(args.nodes)
        return Instance(name="nodes", path=None, points=points, optimum=None)
    return random_instance(args.random_nodes, args.coord_size, rng)


def format_result(result: SolveResult) -> str:
    route = ", ".join(f"({p.x:g}, {p.y:g})" for p in result.route)
    return f"Fittest: {{distance: {result.distance:f}, fitness: {result.fitness:f}, route: [{route}]}}"


def result_to_dict(result: SolveResult) -> dict:
    out = {
        "distance": result.distance,
        "fitness": result.fitness,
        "route": [[p.x, p.y] for p in result.route],
        "order": list(result.chromosome),
        "found_at": result.found_at,
        "generations": result.generations,
    }
    if result.optimum is not None:
        out["optimum"] = result.optimum
        out["gap"] = result.gap
    return out


def run(args) -> SolveResult:
    cfg = EvolutionConfig(
        population_size=args.popsize,
        generations=args.ngens,
        crossover_probability=args.pc,
        mutation_probability=args.pm,
        random_seed=args.seed,
    )
    rng = random.Random(cfg.random_seed)
    instance = _choose_instance(args, rng)
    if not args.json:
        print("genetic algorithm: shortest route")
        print("---------------------------------")
        print(
            f"Population size: {cfg.population_size}, generations: {cfg.generations}, "
            f"crossover probability: {cfg.crossover_probability:f}, "
            f"mutation probability: {cfg.mutation_probability:f}, nodes: {len(instance.points)}"
        )
        print("Solving...")
    t0 = time.perf_counter()
    result = solve(instance.points, cfg, rng=rng, optimum=instance.optimum)
    logger.info("solved %s in %.2fs", instance.name, time.perf_counter() - t0)
    if args.json:
        print(json.dumps(result_to_dict(result), indent=2))
    else:
        print(format_result(result))
        if result.optimum is not None:
            print(f"Optimum: {result.optimum:f}, gap: {result.gap:.2%}")
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Genetic algorithm for the shortest closed route through 2D points")
    parser.add_argument("--pc", type=float, default=0.3, help="crossover probability (0.0-1.0)")
    parser.add_argument("--pm", type=float, default=0.005, help="mutation probability (0.0-1.0)")
    parser.add_argument("--popsize", type=int, default=100, help="population size (>= 2)")
    parser.add_argument("--ngens", type=int, default=10000, help="number of generations (>= 0)")
    src = parser.add_mutually_exclusive_group()
    src.add_argument("--nodes", help="semicolon-separated list of 2D points, e.g. '0,0;1,0;1,1'")
    src.add_argument("--tsplib", help="TSPLIB .tsp file with node coordinates")
    parser.add_argument("--random-nodes", type=int, default=20, help="size of the random instance used without --nodes")
    parser.add_argument("--coord-size", type=float, default=50.0, help="coordinate range of the random instance")
    parser.add_argument("--seed", type=int, default=None, help="random seed for reproducible runs")
    parser.add_argument("--json", action="store_true", help="print the result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every improvement")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    try:
        run(args)
    except InvalidConfiguration as exc:
        parser.error(str(exc))
    except OSError as exc:
        parser.error(f"cannot read {exc.filename or args.tsplib}: {exc.strerror or exc}")


if __name__ == "__main__":
    main()
