"""
Genome: an ordered list of genes, each a weighted edge between two neurons.

New genes are appended in registration order; a point mutation writes its
gene back into the same slot. Duplicate (from, to) pairs are kept; their
weights add up when the net is evaluated.
"""
from dataclasses import dataclass, field, replace
from typing import Iterator, List, Optional, Tuple
import numpy as np

from .neurons import NeuronCatalog, NeuronId, NeuronLayer

WEIGHT_RANGE: Tuple[float, float] = (-4.0, 4.0)


def random_weight(rng: np.random.Generator) -> float:
    lo, hi = WEIGHT_RANGE
    return float(rng.uniform(lo, hi))


@dataclass(frozen=True)
class Gene:
    from_id: NeuronId
    to_id: NeuronId
    weight: float

    def __post_init__(self):
        if self.from_id.layer is NeuronLayer.OUTPUT:
            raise ValueError(f"gene cannot start at output neuron {self.from_id}")
        if self.to_id.layer is NeuronLayer.INPUT:
            raise ValueError(f"gene cannot end at input neuron {self.to_id}")

    def replace(self, **changes) -> "Gene":
        return replace(self, **changes)

    @classmethod
    def random(cls, catalog: NeuronCatalog, rng: np.random.Generator) -> "Gene":
        return cls(catalog.random_from_neuron(rng), catalog.random_to_neuron(rng), random_weight(rng))

    def __str__(self) -> str:
        return f"{self.from_id}->{self.to_id} ({self.weight:+.2f})"


@dataclass
class Genome:
    genes: List[Gene] = field(default_factory=list)

    @classmethod
    def random(cls, catalog: NeuronCatalog, size: int, rng: np.random.Generator) -> "Genome":
        if size < 1:
            raise ValueError(f"genome size must be >= 1, got {size}")
        return cls([Gene.random(catalog, rng) for _ in range(size)])

    def register_gene(self, gene: Gene, index: Optional[int] = None) -> None:
        """Append `gene`, or write it over slot `index` when one is given."""
        if index is None:
            self.genes.append(gene)
        else:
            self.genes[index] = gene

    def copy(self) -> "Genome":
        # genes are frozen, a shallow list copy is enough
        return Genome(list(self.genes))

    def __len__(self) -> int:
        return len(self.genes)

    def __iter__(self) -> Iterator[Gene]:
        return iter(self.genes)
