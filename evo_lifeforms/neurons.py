"""
Neuron catalog: the fixed sensor (input) and actuator (output) kinds, the inner
neuron pool, and the random endpoint pickers used when building or mutating genes.

Ids live in three disjoint layers. Input ids are indexed by InputNeuronType,
output ids by OutputNeuronType, inner ids run 0..N-1.
"""
from enum import Enum
from typing import List, NamedTuple
import numpy as np


class NeuronLayer(Enum):
    INPUT = "input"
    INNER = "inner"
    OUTPUT = "output"


class NeuronId(NamedTuple):
    layer: NeuronLayer
    index: int

    def __str__(self) -> str:
        return f"{self.layer.value}{self.index}"


class InputNeuronType(Enum):
    FOOD_DISTANCE = 0
    FOOD_BEARING = 1
    WATER_DISTANCE = 2
    WATER_BEARING = 3
    HEAL_DISTANCE = 4
    HEAL_BEARING = 5
    DANGER_DISTANCE = 6
    DANGER_BEARING = 7
    LIFEFORM_DISTANCE = 8
    HEALTH = 9
    LIFESPAN = 10


class OutputNeuronType(Enum):
    MOVE_FORWARD = 0
    TURN_LEFT = 1
    TURN_RIGHT = 2
    MATE = 3
    ATTACK = 4
    REPRODUCE = 5


MOVEMENT_OUTPUTS = (OutputNeuronType.MOVE_FORWARD, OutputNeuronType.TURN_LEFT, OutputNeuronType.TURN_RIGHT)


class NeuronCatalog:
    def __init__(self, inner_neurons: int):
        if inner_neurons < 0:
            raise ValueError(f"inner neuron count must be >= 0, got {inner_neurons}")
        self.inner_neurons = inner_neurons
        self.input_ids: List[NeuronId] = [NeuronId(NeuronLayer.INPUT, t.value) for t in InputNeuronType]
        self.inner_ids: List[NeuronId] = [NeuronId(NeuronLayer.INNER, i) for i in range(inner_neurons)]
        self.output_ids: List[NeuronId] = [NeuronId(NeuronLayer.OUTPUT, t.value) for t in OutputNeuronType]

        # gene endpoints: never out of an output, never into an input
        self.from_ids: List[NeuronId] = self.input_ids + self.inner_ids
        self.to_ids: List[NeuronId] = self.inner_ids + self.output_ids

    def random_from_neuron(self, rng: np.random.Generator) -> NeuronId:
        return self.from_ids[int(rng.integers(0, len(self.from_ids)))]

    def random_to_neuron(self, rng: np.random.Generator) -> NeuronId:
        return self.to_ids[int(rng.integers(0, len(self.to_ids)))]

    def input_type(self, nid: NeuronId) -> InputNeuronType:
        return InputNeuronType(nid.index)

    def output_type(self, nid: NeuronId) -> OutputNeuronType:
        return OutputNeuronType(nid.index)

    def contains(self, nid: NeuronId) -> bool:
        if nid.layer is NeuronLayer.INNER:
            return 0 <= nid.index < self.inner_neurons
        if nid.layer is NeuronLayer.INPUT:
            return 0 <= nid.index < len(self.input_ids)
        return 0 <= nid.index < len(self.output_ids)

    def is_valid_from(self, nid: NeuronId) -> bool:
        return nid.layer is not NeuronLayer.OUTPUT and self.contains(nid)

    def is_valid_to(self, nid: NeuronId) -> bool:
        return nid.layer is not NeuronLayer.INPUT and self.contains(nid)

    def __repr__(self) -> str:
        return (f"NeuronCatalog(inputs={len(self.input_ids)}, inner={self.inner_neurons}, "
                f"outputs={len(self.output_ids)})")
