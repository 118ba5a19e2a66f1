import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from evo_lifeforms import viewer  # noqa: E402
from evo_lifeforms.neural_net import NeuralNet  # noqa: E402
from evo_lifeforms.genome import Genome  # noqa: E402
from evo_lifeforms.world import World, WorldConfig  # noqa: E402


def test_health_color_tiers():
    assert viewer.health_color(1.0) == "#76ff03"
    assert viewer.health_color(0.55) == "#8e24aa"
    assert viewer.health_color(0.05) == "#d50000"


def test_neuron_layout_places_every_neuron(catalog, rng):
    net = NeuralNet(Genome.random(catalog, 4, rng), catalog)
    layout = viewer.neuron_layout(net, 10.0, 10.0)
    assert len(layout) == len(net.input_neurons) + len(net.inner_neurons) + len(net.output_neurons)
    rows = {y for _, (_, y) in layout.values()}
    assert rows == {9.0, 5.0, 1.0}
    assert layout[net.catalog.inner_ids[0]][0] == "Inner0"


def test_panels_draw_without_touching_world():
    world = World(WorldConfig(size=12, initial_population=6, seed=2))
    world.tick()
    before = [(lf.id, lf.location, lf.health) for lf in world.lifeforms()]
    fig, axes = plt.subplots(2, 3)
    lf = world.lifeforms()[0]
    viewer._draw_world(axes[0][0], world, lf)
    viewer._draw_info(axes[0][1], world, 100, False)
    viewer._draw_events(axes[0][2], world)
    viewer._draw_values(axes[1][0], lf)
    viewer._draw_net(axes[1][1], lf)
    plt.close(fig)
    assert [(o.id, o.location, o.health) for o in world.lifeforms()] == before
    assert world.tick_count() == 1
