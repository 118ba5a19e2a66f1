"""
Neural net compiled from a genome.

The graph is an edge list over a flat value vector laid out as
[inputs | inner | outputs]. Genes may form cycles (inner -> inner, self loops),
so evaluation runs a fixed number of synchronous relaxation passes: every
inner/output value is recomputed from the previous pass's vector.
Inner and output values start from zero on every evaluation.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple
import numpy as np

from .errors import MissingSensorValue, StructuralMismatch
from .genome import Genome
from .neurons import InputNeuronType, NeuronCatalog, NeuronId, OutputNeuronType

RELAXATION_PASSES = 3


@dataclass
class Neuron:
    id: NeuronId
    kind: Optional[Enum] = None
    value: float = 0.0


class NeuralNet:
    def __init__(self, genome: Genome, catalog: NeuronCatalog, passes: int = RELAXATION_PASSES):
        self.genome = genome
        self.catalog = catalog
        self.passes = passes

        self.input_neurons: Dict[NeuronId, Neuron] = {
            nid: Neuron(nid, catalog.input_type(nid)) for nid in catalog.input_ids
        }
        self.inner_neurons: Dict[NeuronId, Neuron] = {nid: Neuron(nid) for nid in catalog.inner_ids}
        self.output_neurons: Dict[NeuronId, Neuron] = {
            nid: Neuron(nid, catalog.output_type(nid)) for nid in catalog.output_ids
        }

        order = list(self.input_neurons) + list(self.inner_neurons) + list(self.output_neurons)
        self._slot: Dict[NeuronId, int] = {nid: i for i, nid in enumerate(order)}
        self._n_inputs = len(self.input_neurons)
        self._edges: Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]] = None

    # ---------- compilation ----------
    def _compile(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        src, dst, w = [], [], []
        for gene in self.genome:
            if gene.from_id not in self._slot or gene.to_id not in self._slot:
                raise StructuralMismatch(f"gene {gene} references a neuron missing from {self.catalog!r}")
            src.append(self._slot[gene.from_id])
            dst.append(self._slot[gene.to_id])
            w.append(gene.weight)
        return (np.array(src, dtype=np.intp), np.array(dst, dtype=np.intp),
                np.array(w, dtype=np.float64))

    @property
    def edges(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        if self._edges is None:
            self._edges = self._compile()
        return self._edges

    # ---------- evaluation ----------
    def evaluate(self, sensor_values: Mapping[InputNeuronType, float]) -> Dict[OutputNeuronType, float]:
        src, dst, w = self.edges

        values = np.zeros(len(self._slot), dtype=np.float64)
        for nid, neuron in self.input_neurons.items():
            if neuron.kind not in sensor_values:
                raise MissingSensorValue(f"no value for sensor {neuron.kind.name}")
            values[self._slot[nid]] = float(sensor_values[neuron.kind])

        k = self._n_inputs
        for _ in range(self.passes):
            sums = np.zeros_like(values)
            np.add.at(sums, dst, values[src] * w)
            values[k:] = np.tanh(sums[k:])

        for nid, neuron in self.input_neurons.items():
            neuron.value = float(values[self._slot[nid]])
        for nid, neuron in self.inner_neurons.items():
            neuron.value = float(values[self._slot[nid]])
        out: Dict[OutputNeuronType, float] = {}
        for nid, neuron in self.output_neurons.items():
            neuron.value = float(values[self._slot[nid]])
            out[neuron.kind] = neuron.value
        return out

    def __repr__(self) -> str:
        return (f"NeuralNet(genes={len(self.genome)}, inner={len(self.inner_neurons)}, "
                f"passes={self.passes})")
