import numpy as np
import pytest

from evo_lifeforms.neurons import NeuronCatalog, InputNeuronType


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def catalog():
    return NeuronCatalog(3)


@pytest.fixture
def zero_snapshot():
    return {kind: 0.0 for kind in InputNeuronType}
