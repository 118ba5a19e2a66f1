"""
Lifeforms: a genome, the net compiled from it, and a body on the grid.

The world feeds each lifeform a sensor snapshot; the lifeform thinks (runs its
net) and decides on an Intent, which the world then applies.
"""
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple
import numpy as np

from .direction import Direction
from .genome import Genome
from .neural_net import NeuralNet
from .neurons import InputNeuronType, MOVEMENT_OUTPUTS, NeuronCatalog, OutputNeuronType

ACTIVATION_THRESHOLD = 0.5


@dataclass
class Intent:
    move: Optional[OutputNeuronType] = None
    mate: bool = False
    attack: bool = False
    reproduce: bool = False


@dataclass
class LifeForm:
    id: int
    genome: Genome
    neural_net: NeuralNet
    location: Tuple[int, int]
    orientation: Direction = Direction.NORTH
    health: float = 1.0
    lifespan: int = 0
    most_recent_output_neuron_values: Optional[Dict[OutputNeuronType, float]] = field(default=None, repr=False)

    @classmethod
    def from_genome(cls, lf_id: int, genome: Genome, catalog: NeuronCatalog,
                    location: Tuple[int, int], orientation: Direction = Direction.NORTH) -> "LifeForm":
        return cls(id=lf_id, genome=genome, neural_net=NeuralNet(genome, catalog),
                   location=location, orientation=orientation)

    @classmethod
    def random(cls, lf_id: int, catalog: NeuronCatalog, genome_size: int, grid_size: int,
               rng: np.random.Generator) -> "LifeForm":
        genome = Genome.random(catalog, genome_size, rng)
        loc = (int(rng.integers(0, grid_size)), int(rng.integers(0, grid_size)))
        return cls.from_genome(lf_id, genome, catalog, loc, Direction.random(rng))

    # ---------------------------------------------------------------------

    @property
    def alive(self) -> bool:
        return self.health > 0

    def heal(self, amount: float) -> None:
        self.health = float(np.clip(self.health + amount, 0.0, 1.0))

    def hurt(self, amount: float) -> None:
        self.health = float(np.clip(self.health - amount, 0.0, 1.0))

    def forward_cell(self, grid_size: int) -> Tuple[int, int]:
        dx, dy = self.orientation.vector
        x, y = self.location
        return (int(np.clip(x + dx, 0, grid_size - 1)), int(np.clip(y + dy, 0, grid_size - 1)))

    # ---------------------------------------------------------------------

    def think(self, snapshot: Mapping[InputNeuronType, float]) -> Dict[OutputNeuronType, float]:
        outputs = self.neural_net.evaluate(snapshot)
        self.most_recent_output_neuron_values = dict(outputs)
        return outputs

    def decide(self, outputs: Mapping[OutputNeuronType, float]) -> Intent:
        intent = Intent()
        # strongest movement output wins, ties go to the earlier kind
        best = max(MOVEMENT_OUTPUTS, key=lambda kind: outputs[kind])
        if outputs[best] > 0:
            intent.move = best
        intent.mate = outputs[OutputNeuronType.MATE] > ACTIVATION_THRESHOLD
        intent.attack = outputs[OutputNeuronType.ATTACK] > ACTIVATION_THRESHOLD
        intent.reproduce = outputs[OutputNeuronType.REPRODUCE] > ACTIVATION_THRESHOLD
        return intent

    def __str__(self) -> str:
        x, y = self.location
        return f"LifeForm {self.id} @({x},{y}) hp={self.health:.2f} age={self.lifespan}"
