"""
Runner: headless simulation loop.
This is the single entrypoint you can call from a script or notebook.
"""
from typing import Dict
import logging
from tqdm import trange

from .world import EventKind, World, WorldConfig

log = logging.getLogger(__name__)


def simulate(cfg: WorldConfig, ticks: int = 1000, progress: bool = True) -> Dict[str, float]:
    world = World(cfg)
    log.info("starting run: size=%d population=%d seed=%d", cfg.size, len(world.population), cfg.seed)
    for _ in trange(ticks, desc="simulate", disable=not progress):
        world.tick()
        if not world.population:
            log.info("population went extinct at tick %d", world.tick_count())
            break
    return report(world)


def report(world: World) -> Dict[str, float]:
    oldest = world.oldest()
    stats = {
        "ticks": world.tick_count(),
        "population": len(world.population),
        "average_age": world.average_age(),
        "oldest_lifespan": oldest.lifespan if oldest else 0,
        "births": world.event_counts[EventKind.CREATION],
        "deaths": world.event_counts[EventKind.DEATH],
        "attacks": world.event_counts[EventKind.ATTACK],
        "matings": world.event_counts[EventKind.MATE],
    }
    log.info("run finished: %s", stats)
    return stats
