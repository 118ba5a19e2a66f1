"""
World: a square grid with food, water, heal and danger cells, a population of
lifeforms, and the tick loop that runs sense -> think -> act -> selection.

Coordinates are (x, y) with 0 <= x, y < size; y grows northwards.
Lifeforms act once per tick in ascending id order. Children born during a tick
act from the next tick on.
"""
from collections import Counter, deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, List, Optional, Set, Tuple
import logging
import math
import numpy as np

from . import evo
from .agents import Intent, LifeForm
from .direction import Direction
from .errors import StructuralMismatch
from .genome import Genome
from .neurons import InputNeuronType, NeuronCatalog, OutputNeuronType

log = logging.getLogger(__name__)

Cell = Tuple[int, int]


@dataclass(frozen=True)
class WorldConfig:
    size: int = 40
    initial_population: int = 30
    mutation_rate: float = 0.1
    tick_rate_ms: int = 100
    inner_neurons: int = 3
    genome_size: int = 8
    max_lifespan: int = 500

    # resources
    food: int = 40
    water: int = 40
    heals: int = 8
    dangers: int = 8

    # selection / reproduction
    min_population: int = 10
    max_population: int = 200
    excess_gene_rate: float = 0.25
    reproduce_cost: float = 0.3
    reproduce_min_health: float = 0.5

    # physiology (health units per tick / per contact)
    decay: float = 0.01
    food_gain: float = 0.3
    water_gain: float = 0.2
    heal_gain: float = 0.5
    danger_damage: float = 0.4
    attack_damage: float = 0.3

    event_log_size: int = 1000
    seed: int = 7

    def __post_init__(self):
        if self.size < 1:
            raise ValueError("world size must be >= 1")
        if self.genome_size < 1:
            raise ValueError("genome size must be >= 1")
        if self.max_lifespan < 1:
            raise ValueError("max lifespan must be >= 1")
        if self.inner_neurons < 0:
            raise ValueError("inner neuron count must be >= 0")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError("mutation rate must be within [0, 1]")
        if self.food + self.water + self.heals + self.dangers > self.size * self.size:
            raise ValueError("more resources than grid cells")
        if self.initial_population < 0 or self.max_population < 0 or self.min_population < 0:
            raise ValueError("population counts must be >= 0")


class EventKind(Enum):
    DEATH = "death"
    CREATION = "creation"
    MATE = "mate"
    ATTACK = "attack"
    ASEXUALLY_REPRODUCE = "asexually_reproduce"


@dataclass(frozen=True)
class Event:
    kind: EventKind
    description: str
    tick: int


class World:
    def __init__(self, cfg: WorldConfig):
        self.cfg = cfg
        self.rng = np.random.default_rng(cfg.seed)
        self.catalog = NeuronCatalog(cfg.inner_neurons)
        self.tics = 0

        self.food: Set[Cell] = set()
        self.water: Set[Cell] = set()
        self.heals: Set[Cell] = set()
        self.danger: Set[Cell] = set()

        self.population: Dict[int, LifeForm] = {}
        self.next_id: int = 0

        # capped: oldest events fall off; totals live in event_counts
        self.event_log: Deque[Event] = deque(maxlen=cfg.event_log_size)
        self.event_counts: Counter = Counter()

        self._seed_resources()
        for _ in range(cfg.initial_population):
            self.add_lifeform()

    # ---------- event logging ----------
    def log_event(self, kind: EventKind, description: str) -> None:
        self.event_log.append(Event(kind, description, self.tics))
        self.event_counts[kind] += 1
        log.debug("[tick %d] %s: %s", self.tics, kind.value, description)

    # ---------- read accessors ----------
    def lifeforms(self) -> List[LifeForm]:
        return [self.population[i] for i in sorted(self.population)]

    def events(self) -> List[Event]:
        return list(self.event_log)

    def tick_count(self) -> int:
        return self.tics

    def get(self, lf_id: int) -> Optional[LifeForm]:
        return self.population.get(lf_id)

    def average_age(self) -> float:
        if not self.population:
            return 0.0
        return float(np.mean([lf.lifespan for lf in self.population.values()]))

    def oldest(self) -> Optional[LifeForm]:
        if not self.population:
            return None
        return max(self.lifeforms(), key=lambda lf: (evo.fitness(lf), -lf.id))

    # ---------- helpers ----------
    def _seed_resources(self) -> None:
        cfg = self.cfg
        counts = [cfg.food, cfg.water, cfg.heals, cfg.dangers]
        picks = self.rng.choice(cfg.size * cfg.size, size=sum(counts), replace=False)
        cells = [(int(i % cfg.size), int(i // cfg.size)) for i in picks]
        start = 0
        for target, n in zip((self.food, self.water, self.heals, self.danger), counts):
            target.update(cells[start:start + n])
            start += n

    def _respawn(self, resource: Set[Cell]) -> None:
        taken = self.food | self.water | self.heals | self.danger
        size = self.cfg.size
        free = [(x, y) for y in range(size) for x in range(size) if (x, y) not in taken]
        if not free:
            log.warning("no free cell left to respawn a resource on")
            return
        resource.add(free[int(self.rng.choice(len(free)))])

    def _take_id(self) -> int:
        lf_id = self.next_id
        self.next_id += 1
        return lf_id

    def add_lifeform(self, genome: Optional[Genome] = None, location: Optional[Cell] = None,
                     orientation: Optional[Direction] = None, health: float = 1.0) -> LifeForm:
        lf_id = self._take_id()
        lf = LifeForm.random(lf_id, self.catalog, self.cfg.genome_size, self.cfg.size, self.rng)
        if genome is not None:
            lf = LifeForm.from_genome(lf_id, genome, self.catalog, lf.location, lf.orientation)
        if location is not None:
            lf.location = location
        if orientation is not None:
            lf.orientation = orientation
        lf.health = health
        self.population[lf_id] = lf
        self.log_event(EventKind.CREATION, f"LifeForm {lf_id} was created")
        return lf

    def _neighbours(self, lf: LifeForm, radius: int = 1) -> List[LifeForm]:
        x, y = lf.location
        near = [o for o in self.population.values()
                if o.id != lf.id and max(abs(o.location[0] - x), abs(o.location[1] - y)) <= radius]
        return sorted(near, key=lambda o: o.id)

    # ---------- sensing ----------
    @staticmethod
    def _nearest(points, origin: Cell) -> Optional[Cell]:
        if not points:
            return None
        arr = np.array(sorted(points))
        d = np.max(np.abs(arr - np.array(origin)), axis=1)
        nx, ny = arr[int(np.argmin(d))]
        return int(nx), int(ny)

    def _distance(self, origin: Cell, target: Optional[Cell]) -> float:
        if target is None:
            return 1.0
        return max(abs(target[0] - origin[0]), abs(target[1] - origin[1])) / self.cfg.size

    @staticmethod
    def _bearing(lf: LifeForm, target: Optional[Cell]) -> float:
        """Signed angle to target relative to heading, scaled to [-1, 1]."""
        if target is None or target == lf.location:
            return 0.0
        dx, dy = target[0] - lf.location[0], target[1] - lf.location[1]
        rel = math.atan2(dx, dy) - lf.orientation.angle
        rel = (rel + math.pi) % (2 * math.pi) - math.pi
        return rel / math.pi

    def sense(self, lf: LifeForm) -> Dict[InputNeuronType, float]:
        loc = lf.location
        snapshot: Dict[InputNeuronType, float] = {}
        for points, dist_kind, bearing_kind in (
            (self.food, InputNeuronType.FOOD_DISTANCE, InputNeuronType.FOOD_BEARING),
            (self.water, InputNeuronType.WATER_DISTANCE, InputNeuronType.WATER_BEARING),
            (self.heals, InputNeuronType.HEAL_DISTANCE, InputNeuronType.HEAL_BEARING),
            (self.danger, InputNeuronType.DANGER_DISTANCE, InputNeuronType.DANGER_BEARING),
        ):
            target = self._nearest(points, loc)
            snapshot[dist_kind] = self._distance(loc, target)
            snapshot[bearing_kind] = self._bearing(lf, target)

        others = [o.location for o in self.population.values() if o.id != lf.id]
        snapshot[InputNeuronType.LIFEFORM_DISTANCE] = self._distance(loc, self._nearest(others, loc))
        snapshot[InputNeuronType.HEALTH] = lf.health
        snapshot[InputNeuronType.LIFESPAN] = lf.lifespan / self.cfg.max_lifespan
        return snapshot

    # ---------- dynamics ----------
    def tick(self) -> None:
        """Advance the simulation by one step."""
        for lf_id in sorted(self.population):
            lf = self.population.get(lf_id)
            if lf is None:  # killed earlier this tick
                continue
            self._live(lf)
        self._top_up()
        self.tics += 1

    def _kill(self, lf: LifeForm, description: str) -> None:
        del self.population[lf.id]
        self.log_event(EventKind.DEATH, description)

    def _live(self, lf: LifeForm) -> None:
        if not lf.alive:
            self._kill(lf, f"LifeForm {lf.id} died at age {lf.lifespan}")
            return

        try:
            outputs = lf.think(self.sense(lf))
        except StructuralMismatch as e:
            log.warning("removing non-viable lifeform %d: %s", lf.id, e)
            self._kill(lf, f"LifeForm {lf.id} was not viable")
            return

        intent = lf.decide(outputs)
        self._apply(lf, intent)

        if not lf.alive:
            self._kill(lf, f"LifeForm {lf.id} died at age {lf.lifespan}")
            return
        if lf.lifespan > self.cfg.max_lifespan:
            self._kill(lf, f"LifeForm {lf.id} died of old age ({lf.lifespan})")
            return

        self._reproduce(lf, intent)
        if intent.attack:
            self._attack(lf)

    def _apply(self, lf: LifeForm, intent: Intent) -> None:
        cfg = self.cfg
        if intent.move is OutputNeuronType.MOVE_FORWARD:
            lf.location = lf.forward_cell(cfg.size)
        elif intent.move is OutputNeuronType.TURN_LEFT:
            lf.orientation = lf.orientation.turn_left()
        elif intent.move is OutputNeuronType.TURN_RIGHT:
            lf.orientation = lf.orientation.turn_right()

        cell = lf.location
        if cell in self.food:
            self.food.discard(cell); lf.heal(cfg.food_gain)
            self._respawn(self.food)
        if cell in self.water:
            self.water.discard(cell); lf.heal(cfg.water_gain)
            self._respawn(self.water)
        if cell in self.heals:
            lf.heal(cfg.heal_gain)
        if cell in self.danger:
            lf.hurt(cfg.danger_damage)

        lf.hurt(cfg.decay)
        lf.lifespan += 1

    def _reproduce(self, lf: LifeForm, intent: Intent) -> None:
        cfg = self.cfg
        if len(self.population) >= cfg.max_population or lf.health < cfg.reproduce_min_health:
            return

        if intent.mate:
            partner = next((o for o in self._neighbours(lf) if o.health >= cfg.reproduce_min_health), None)
            if partner is not None:
                child = evo.mate(lf, partner, self._take_id(), self.rng, cfg.size, cfg.excess_gene_rate)
                lf.hurt(cfg.reproduce_cost)
                partner.hurt(cfg.reproduce_cost)
                self.population[child.id] = child
                self.log_event(EventKind.MATE, f"LifeForm {lf.id} mated with LifeForm {partner.id}")
                self.log_event(EventKind.CREATION,
                               f"LifeForm {child.id} was born to {lf.id} and {partner.id}")
                return

        if intent.reproduce:
            self._clone(lf)
            lf.hurt(cfg.reproduce_cost)

    def _clone(self, parent: LifeForm) -> LifeForm:
        child = evo.clone(parent, self._take_id(), self.rng, self.cfg.size, self.cfg.mutation_rate)
        self.population[child.id] = child
        self.log_event(EventKind.ASEXUALLY_REPRODUCE,
                       f"LifeForm {parent.id} reproduced asexually")
        self.log_event(EventKind.CREATION, f"LifeForm {child.id} was budded from {parent.id}")
        return child

    def _attack(self, lf: LifeForm) -> None:
        targets = self._neighbours(lf)
        if not targets:
            return
        x, y = lf.location
        target = min(targets, key=lambda o: (max(abs(o.location[0] - x), abs(o.location[1] - y)), o.id))
        target.hurt(self.cfg.attack_damage)
        self.log_event(EventKind.ATTACK, f"LifeForm {lf.id} attacked LifeForm {target.id}")
        if not target.alive:
            self._kill(target, f"LifeForm {target.id} was killed by LifeForm {lf.id}")

    def _top_up(self) -> None:
        """Selection: the fittest survivor buds once while the population is thin."""
        n = len(self.population)
        if n == 0 or n >= self.cfg.min_population or n >= self.cfg.max_population:
            return
        self._clone(self.oldest())
