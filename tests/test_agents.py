import math

import pytest

from evo_lifeforms.agents import LifeForm
from evo_lifeforms.direction import Direction
from evo_lifeforms.genome import Gene, Genome
from evo_lifeforms.neurons import InputNeuronType, NeuronId, NeuronLayer, OutputNeuronType


def outputs(**values):
    out = {kind: 0.0 for kind in OutputNeuronType}
    for name, v in values.items():
        out[OutputNeuronType[name]] = v
    return out


@pytest.fixture
def lifeform(catalog, rng):
    return LifeForm.random(0, catalog, 4, 10, rng)


def test_random_lifeform(lifeform):
    assert len(lifeform.genome) == 4
    assert lifeform.health == 1.0 and lifeform.lifespan == 0
    assert lifeform.most_recent_output_neuron_values is None
    x, y = lifeform.location
    assert 0 <= x < 10 and 0 <= y < 10


def test_decide_picks_strongest_movement(lifeform):
    intent = lifeform.decide(outputs(MOVE_FORWARD=0.2, TURN_LEFT=0.6, TURN_RIGHT=0.1))
    assert intent.move is OutputNeuronType.TURN_LEFT


def test_decide_no_movement_when_all_negative(lifeform):
    intent = lifeform.decide(outputs(MOVE_FORWARD=-0.2, TURN_LEFT=-0.6, TURN_RIGHT=0.0))
    assert intent.move is None


def test_decide_thresholds(lifeform):
    intent = lifeform.decide(outputs(MATE=0.51, ATTACK=0.5, REPRODUCE=0.9))
    assert intent.mate and not intent.attack and intent.reproduce


def test_think_records_output_snapshot(catalog):
    src = NeuronId(NeuronLayer.INPUT, InputNeuronType.HEALTH.value)
    dst = NeuronId(NeuronLayer.OUTPUT, OutputNeuronType.REPRODUCE.value)
    lf = LifeForm.from_genome(7, Genome([Gene(src, dst, 2.0)]), catalog, (1, 1))
    snap = {kind: 0.0 for kind in InputNeuronType}
    snap[InputNeuronType.HEALTH] = 1.0
    out = lf.think(snap)
    assert lf.most_recent_output_neuron_values == out
    assert out[OutputNeuronType.REPRODUCE] == pytest.approx(math.tanh(2.0))


def test_health_is_clamped(lifeform):
    lifeform.heal(5.0)
    assert lifeform.health == 1.0
    lifeform.hurt(3.0)
    assert lifeform.health == 0.0
    assert not lifeform.alive


def test_forward_cell_clamped(lifeform):
    lifeform.location = (9, 9)
    lifeform.orientation = Direction.NORTH_EAST
    assert lifeform.forward_cell(10) == (9, 9)
    lifeform.orientation = Direction.SOUTH_WEST
    assert lifeform.forward_cell(10) == (8, 8)
