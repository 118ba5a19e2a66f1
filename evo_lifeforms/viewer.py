"""
Live viewer. Read-only over a World: it ticks the world and draws it, never
touching lifeforms or resources directly.

Panels:
- World: water/food/heal/danger cells, lifeforms as triangles pointing where they
  face, coloured by health (selected lifeform in white, stacks show a count)
- World information + event feed (newest first)
- Selected lifeform: input/output neuron values and its neural net

Controls:
  q = quit | p = pause | Up/Down = select lifeform | Left/Right = change tick rate
"""
from collections import Counter
from typing import Dict, Optional, Tuple
import matplotlib.pyplot as plt
from matplotlib.patches import Circle

from .agents import LifeForm
from .direction import Direction
from .neural_net import NeuralNet
from .neurons import NeuronId
from .world import EventKind, World, WorldConfig

FEED_LINES = 14
MIN_TICK_RATE_MS = 10
TICK_RATE_STEP_MS = 25

EVENT_COLORS = {
    EventKind.DEATH: "#1e88e5",
    EventKind.CREATION: "#00bcd4",
    EventKind.MATE: "#d81b60",
    EventKind.ATTACK: "#e53935",
    EventKind.ASEXUALLY_REPRODUCE: "#9ccc65",
}

# (min health, colour), checked top-down
HEALTH_COLORS = [
    (0.9, "#76ff03"), (0.8, "#43a047"), (0.7, "#4fc3f7"), (0.6, "#1e88e5"),
    (0.5, "#8e24aa"), (0.4, "#e040fb"), (0.3, "#fdd835"), (0.2, "#fff59d"),
    (0.1, "#ff8a80"),
]


def health_color(health: float) -> str:
    for floor, color in HEALTH_COLORS:
        if health >= floor:
            return color
    return "#d50000"


def neuron_layout(net: NeuralNet, width: float, height: float) -> Dict[NeuronId, Tuple[str, Tuple[float, float]]]:
    """neuron id -> (label, (x, y)): inputs on the top row, inner in the middle, outputs at the bottom."""
    rows = [
        (net.input_neurons, height - 1.0),
        (net.inner_neurons, height / 2.0),
        (net.output_neurons, 1.0),
    ]
    layout: Dict[NeuronId, Tuple[str, Tuple[float, float]]] = {}
    for neurons, y in rows:
        spacing = width / (len(neurons) + 1)
        for i, (nid, neuron) in enumerate(neurons.items()):
            label = neuron.kind.name if neuron.kind is not None else f"Inner{nid.index}"
            layout[nid] = (label, ((i + 1) * spacing, y))
    return layout


# ---------------------------------------------------------------------------

def _draw_world(ax, world: World, selected: Optional[LifeForm]) -> None:
    size = world.cfg.size
    ax.cla()
    ax.set_facecolor("#2b2b2b")
    ax.set_xlim(-0.5, size - 0.5); ax.set_ylim(-0.5, size - 0.5)
    ax.set_xticks([]); ax.set_yticks([])
    ax.set_title("World")

    for cells, color, marker in ((world.water, "#1e88e5", "s"), (world.food, "#43a047", "s"),
                                 (world.heals, "#e53935", "P"), (world.danger, "#ffffff", "X")):
        if cells:
            xs, ys = zip(*cells)
            ax.scatter(xs, ys, s=18, c=color, marker=marker)

    stacks = Counter(lf.location for lf in world.population.values())
    for direction in Direction:
        group = [lf for lf in world.lifeforms() if lf.orientation is direction and stacks[lf.location] == 1]
        if not group:
            continue
        colors = ["white" if selected is not None and lf.id == selected.id else health_color(lf.health)
                  for lf in group]
        ax.scatter([lf.location[0] for lf in group], [lf.location[1] for lf in group],
                   s=40, c=colors, marker=(3, 0, -45 * direction.value))
    for (x, y), n in stacks.items():
        if n > 1:
            ax.text(x, y, str(n) if n < 10 else "!", color="white", fontsize=7, ha="center", va="center")


def _draw_info(ax, world: World, tick_rate_ms: int, paused: bool) -> None:
    ax.cla(); ax.axis("off")
    oldest = world.oldest()
    lines = [
        f"tick rate: {tick_rate_ms}ms | iteration: {world.tick_count()}" + (" | PAUSED" if paused else ""),
        f"lifeforms: {len(world.population)}",
        f"average age: {world.average_age():.1f}",
        f"oldest: {oldest.id} ({oldest.lifespan})" if oldest else "oldest: -",
    ]
    ax.text(0, 1, "\n".join(lines), va="top", family="monospace", fontsize=8)
    ax.set_title("World Information", fontsize=9)


def _draw_events(ax, world: World) -> None:
    ax.cla(); ax.axis("off")
    recent = world.events()[-FEED_LINES:][::-1]
    for i, ev in enumerate(recent):
        ax.text(0, 1 - i / FEED_LINES, f"{ev.tick:>5}  {ev.description}", va="top",
                color=EVENT_COLORS[ev.kind], family="monospace", fontsize=7)
    ax.set_title("Events", fontsize=9)


def _draw_values(ax, lf: Optional[LifeForm]) -> None:
    ax.cla(); ax.axis("off")
    if lf is None:
        return
    lines = [f"Input neuron values for {lf.id}"]
    lines += [f"  {n.kind.name}: {n.value:.3f}" for n in lf.neural_net.input_neurons.values()]
    if lf.most_recent_output_neuron_values is not None:
        lines.append("Output neuron values")
        lines += [f"  {k.name}: {v:.3f}" for k, v in lf.most_recent_output_neuron_values.items()]
    ax.text(0, 1, "\n".join(lines), va="top", family="monospace", fontsize=7)


def _draw_net(ax, lf: Optional[LifeForm]) -> None:
    ax.cla(); ax.axis("off")
    if lf is None:
        return
    width, height = 10.0, 10.0
    ax.set_xlim(0, width); ax.set_ylim(0, height)
    ax.set_title("Neural Net", fontsize=9)
    locs = neuron_layout(lf.neural_net, width, height)
    n = max(1, len(lf.genome))
    for idx, gene in enumerate(lf.genome):
        if gene.from_id not in locs or gene.to_id not in locs:
            continue
        shade = str(0.2 + 0.6 * idx / n)  # later genes lighter
        (x1, y1), (x2, y2) = locs[gene.from_id][1], locs[gene.to_id][1]
        if gene.from_id == gene.to_id:
            ax.add_patch(Circle((x1, y1 + 0.3), 0.3, fill=False, color=shade))
        else:
            ax.plot([x1, x2], [y1, y2], color=shade, lw=0.5 + abs(gene.weight) / 2)
    for label, (x, y) in locs.values():
        ax.text(x, y, label, ha="center", va="center", fontsize=5,
                bbox=dict(facecolor="white", alpha=0.7, lw=0))


# ---------------------------------------------------------------------------

def run_live(cfg: WorldConfig, steps: Optional[int] = None) -> World:
    world = World(cfg)
    state = {"paused": False, "selected": 0, "tick_rate": cfg.tick_rate_ms}

    fig = plt.figure(figsize=(14, 8))
    try: fig.canvas.manager.set_window_title("Evo Lifeforms")
    except Exception: pass
    gs = fig.add_gridspec(2, 3)
    ax_world = fig.add_subplot(gs[:, 0])
    ax_info, ax_events = fig.add_subplot(gs[0, 1]), fig.add_subplot(gs[0, 2])
    ax_values, ax_net = fig.add_subplot(gs[1, 1]), fig.add_subplot(gs[1, 2])

    def on_key(ev):
        if ev.key == "q": plt.close(fig)
        elif ev.key == "p": state["paused"] = not state["paused"]
        elif ev.key == "up": state["selected"] -= 1
        elif ev.key == "down": state["selected"] += 1
        elif ev.key == "left": state["tick_rate"] += TICK_RATE_STEP_MS
        elif ev.key == "right":
            state["tick_rate"] = max(MIN_TICK_RATE_MS, state["tick_rate"] - TICK_RATE_STEP_MS)

    fig.canvas.mpl_connect("key_press_event", on_key)

    while plt.fignum_exists(fig.number):
        if steps is not None and world.tick_count() >= steps:
            break
        if not state["paused"]:
            world.tick()

        lfs = world.lifeforms()
        selected = lfs[state["selected"] % len(lfs)] if lfs else None
        _draw_world(ax_world, world, selected)
        _draw_info(ax_info, world, state["tick_rate"], state["paused"])
        _draw_events(ax_events, world)
        _draw_values(ax_values, selected)
        _draw_net(ax_net, selected)
        plt.pause(state["tick_rate"] / 1000.0)

    plt.close(fig)
    return world
