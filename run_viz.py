from evo_lifeforms.viewer import run_live
from evo_lifeforms.world import WorldConfig

if __name__ == "__main__":
    # Watch a small population evolve; q quits, p pauses, arrows select / change speed.
    run_live(WorldConfig(size=40, initial_population=30, seed=21, tick_rate_ms=60))
