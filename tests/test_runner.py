from evo_lifeforms.run import config_from_args, parse_args
from evo_lifeforms.runner import simulate
from evo_lifeforms.world import WorldConfig


def test_simulate_reports_stats():
    stats = simulate(WorldConfig(size=12, initial_population=15, seed=4), ticks=30, progress=False)
    assert set(stats) == {"ticks", "population", "average_age", "oldest_lifespan",
                          "births", "deaths", "attacks", "matings"}
    assert 1 <= stats["ticks"] <= 30
    assert stats["births"] >= 15


def test_simulate_stops_on_extinction():
    cfg = WorldConfig(size=10, initial_population=0, food=0, water=0, heals=0, dangers=0)
    stats = simulate(cfg, ticks=50, progress=False)
    assert stats["ticks"] == 1
    assert stats["population"] == 0


def test_cli_args_build_config():
    args = parse_args(["--size", "16", "--population", "4", "--mutation-rate", "0.3",
                       "--inner-neurons", "5", "--genome-size", "6", "--seed", "11"])
    cfg = config_from_args(args)
    assert (cfg.size, cfg.initial_population, cfg.mutation_rate) == (16, 4, 0.3)
    assert (cfg.inner_neurons, cfg.genome_size, cfg.seed) == (5, 6, 11)
    assert not args.live
