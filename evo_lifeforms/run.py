"""
CLI entry: run a simulation headless (or live with --live) and print a short report.
"""
import argparse
import logging

from evo_lifeforms.runner import simulate
from evo_lifeforms.world import WorldConfig


def parse_args(argv=None) -> argparse.Namespace:
    d = WorldConfig()
    p = argparse.ArgumentParser(description="Evolve neural-net lifeforms on a grid.")
    p.add_argument("--size", type=int, default=d.size, help="world width and height")
    p.add_argument("--population", type=int, default=d.initial_population, help="initial population")
    p.add_argument("--mutation-rate", type=float, default=d.mutation_rate)
    p.add_argument("--tick-rate", type=int, default=d.tick_rate_ms, help="ms per tick in live mode")
    p.add_argument("--inner-neurons", type=int, default=d.inner_neurons)
    p.add_argument("--genome-size", type=int, default=d.genome_size)
    p.add_argument("--max-lifespan", type=int, default=d.max_lifespan)
    p.add_argument("--seed", type=int, default=d.seed)
    p.add_argument("--ticks", type=int, default=2000)
    p.add_argument("--live", action="store_true", help="open the matplotlib viewer")
    p.add_argument("-v", "--verbose", action="store_true", help="log every event")
    return p.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> WorldConfig:
    return WorldConfig(
        size=args.size,
        initial_population=args.population,
        mutation_rate=args.mutation_rate,
        tick_rate_ms=args.tick_rate,
        inner_neurons=args.inner_neurons,
        genome_size=args.genome_size,
        max_lifespan=args.max_lifespan,
        seed=args.seed,
    )


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cfg = config_from_args(args)
    if args.live:
        from evo_lifeforms.viewer import run_live
        run_live(cfg, steps=args.ticks)
        return
    stats = simulate(cfg, ticks=args.ticks)
    for k, v in stats.items():
        print(f"{k:>16}: {v}")


if __name__ == "__main__":
    main()
