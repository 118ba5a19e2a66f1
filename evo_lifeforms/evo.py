"""
Evolution operators: fitness, mutation gating, point mutation, crossover,
and the two ways of making a child (mating and asexual cloning).

All functions are stateless; randomness comes from the generator passed in.
"""
from typing import Tuple
import numpy as np

from .agents import LifeForm
from .direction import Direction
from .errors import EmptyGenomePrecondition
from .genome import Genome, random_weight
from .neurons import NeuronCatalog

GENE_FIELDS = ("weight", "from_id", "to_id")


def fitness(lf: LifeForm) -> int:
    return lf.lifespan


def should_mutate(mutation_rate: float, rng: np.random.Generator) -> bool:
    if not 0.0 <= mutation_rate <= 1.0:
        raise ValueError(f"mutation rate must be within [0, 1], got {mutation_rate}")
    return bool(rng.random() < mutation_rate)


def mutate(genome: Genome, catalog: NeuronCatalog, rng: np.random.Generator) -> None:
    """Point-mutate one field of one gene in place.

    The modified clone is re-registered over the slot it came from, so no
    edge is added or removed and gene order is unchanged.
    """
    if len(genome) == 0:
        raise EmptyGenomePrecondition("cannot mutate an empty genome")

    idx = int(rng.integers(0, len(genome)))
    gene = genome.genes[idx]
    which = GENE_FIELDS[int(rng.integers(0, 3))]

    draw = {
        "weight": lambda: random_weight(rng),
        "from_id": lambda: catalog.random_from_neuron(rng),
        "to_id": lambda: catalog.random_to_neuron(rng),
    }[which]
    value = draw()
    while value == getattr(gene, which):
        value = draw()

    genome.register_gene(gene.replace(**{which: value}), index=idx)


def crossover(genome1: Genome, genome2: Genome, rng: np.random.Generator,
              excess_gene_rate: float = 0.25) -> Genome:
    """Uniform crossover over the shared length; the longer parent's excess
    genes are each inherited with probability `excess_gene_rate`."""
    shared = min(len(genome1), len(genome2))
    child = Genome()
    for i in range(shared):
        src = genome1 if rng.random() < 0.5 else genome2
        child.register_gene(src.genes[i])

    longer = genome1 if len(genome1) > len(genome2) else genome2
    for gene in longer.genes[shared:]:
        if rng.random() < excess_gene_rate:
            child.register_gene(gene)
    return child


def _clamp(loc: Tuple[int, int], grid_size: int) -> Tuple[int, int]:
    x, y = loc
    return (int(np.clip(x, 0, grid_size - 1)), int(np.clip(y, 0, grid_size - 1)))


def mate(parent1: LifeForm, parent2: LifeForm, child_id: int, rng: np.random.Generator,
         grid_size: int, excess_gene_rate: float = 0.25) -> LifeForm:
    genome = crossover(parent1.genome, parent2.genome, rng, excess_gene_rate)
    (x1, y1), (x2, y2) = parent1.location, parent2.location
    loc = _clamp(((x1 + x2) // 2, (y1 + y2) // 2), grid_size)
    return LifeForm.from_genome(child_id, genome, parent1.neural_net.catalog, loc, Direction.random(rng))


def clone(parent: LifeForm, child_id: int, rng: np.random.Generator, grid_size: int,
          mutation_rate: float) -> LifeForm:
    """Asexual offspring: copied genome, point-mutated when the rate allows."""
    catalog = parent.neural_net.catalog
    genome = parent.genome.copy()
    if should_mutate(mutation_rate, rng):
        mutate(genome, catalog, rng)
    dx, dy = Direction.random(rng).vector
    x, y = parent.location
    loc = _clamp((x + dx, y + dy), grid_size)
    return LifeForm.from_genome(child_id, genome, catalog, loc, Direction.random(rng))
