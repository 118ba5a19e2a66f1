import numpy as np
import pytest

from evo_lifeforms import evo
from evo_lifeforms.agents import LifeForm
from evo_lifeforms.errors import EmptyGenomePrecondition
from evo_lifeforms.genome import Gene, Genome
from evo_lifeforms.neurons import NeuronId, NeuronLayer

FIELDS = ("from_id", "to_id", "weight")


def make_lifeform(lf_id, genome, catalog, location=(5, 5)):
    return LifeForm.from_genome(lf_id, genome, catalog, location)


def changed_fields(a, b):
    return [f for f in FIELDS if getattr(a, f) != getattr(b, f)]


# ---------- fitness / gating ----------

@pytest.mark.parametrize("lifespan", [0, 1, 100000])
def test_fitness_is_lifespan(catalog, rng, lifespan):
    lf = make_lifeform(0, Genome.random(catalog, 2, rng), catalog)
    lf.lifespan = lifespan
    assert evo.fitness(lf) == lifespan


def test_should_mutate_never_at_zero(rng):
    assert not any(evo.should_mutate(0.0, rng) for _ in range(1000))


def test_should_mutate_always_at_one(rng):
    assert all(evo.should_mutate(1.0, rng) for _ in range(1000))


def test_should_mutate_half_rate(rng):
    hits = sum(evo.should_mutate(0.5, rng) for _ in range(10000))
    assert abs(hits / 10000 - 0.5) < 0.05


def test_should_mutate_rejects_bad_rate(rng):
    with pytest.raises(ValueError):
        evo.should_mutate(1.5, rng)


# ---------- mutation ----------

def test_mutate_changes_exactly_one_field_of_one_gene(catalog):
    for seed in range(200):
        rng = np.random.default_rng(seed)
        genome = Genome.random(catalog, 1 + seed % 6, rng)
        before = list(genome.genes)

        evo.mutate(genome, catalog, rng)

        assert len(genome) == len(before)
        diffs = [changed_fields(a, b) for a, b in zip(before, genome.genes)]
        changed = [d for d in diffs if d]
        assert len(changed) == 1, f"seed {seed}: {len(changed)} genes changed"
        assert len(changed[0]) == 1


def test_mutate_keeps_endpoints_valid(catalog, rng):
    genome = Genome.random(catalog, 5, rng)
    for _ in range(300):
        evo.mutate(genome, catalog, rng)
    for gene in genome:
        assert catalog.is_valid_from(gene.from_id)
        assert catalog.is_valid_to(gene.to_id)


def test_mutate_touches_every_field_kind(catalog, rng):
    seen = set()
    for _ in range(200):
        genome = Genome.random(catalog, 1, rng)
        before = genome.genes[0]
        evo.mutate(genome, catalog, rng)
        seen.update(changed_fields(before, genome.genes[0]))
    assert seen == set(FIELDS)


def test_mutate_empty_genome_raises(catalog, rng):
    with pytest.raises(EmptyGenomePrecondition):
        evo.mutate(Genome(), catalog, rng)


# ---------- crossover / mating ----------

def _tagged(n, base):
    src = NeuronId(NeuronLayer.INPUT, 0)
    dst = NeuronId(NeuronLayer.OUTPUT, 0)
    return Genome([Gene(src, dst, base + i) for i in range(n)])


def test_crossover_picks_each_position_from_a_parent(rng):
    g1, g2 = _tagged(6, 100.0), _tagged(6, 200.0)
    child = evo.crossover(g1, g2, rng)
    assert len(child) == 6
    for i, gene in enumerate(child):
        assert gene in (g1.genes[i], g2.genes[i])


def test_crossover_mixes_parents(rng):
    g1, g2 = _tagged(40, 100.0), _tagged(40, 200.0)
    child = evo.crossover(g1, g2, rng)
    from_first = sum(1 for gene in child if gene.weight < 200)
    assert 0 < from_first < 40


def test_crossover_excess_genes(rng):
    short, long_ = _tagged(2, 100.0), _tagged(10, 200.0)
    assert len(evo.crossover(short, long_, rng, excess_gene_rate=0.0)) == 2
    full = evo.crossover(long_, short, rng, excess_gene_rate=1.0)
    assert len(full) == 10
    assert full.genes[2:] == long_.genes[2:]


def test_mate_builds_fresh_child(catalog, rng):
    p1 = make_lifeform(1, Genome.random(catalog, 4, rng), catalog, (2, 2))
    p2 = make_lifeform(2, Genome.random(catalog, 4, rng), catalog, (4, 6))
    p1.lifespan, p1.health = 50, 0.4
    child = evo.mate(p1, p2, 3, rng, grid_size=10)
    assert child.id == 3
    assert child.location == (3, 4)
    assert child.health == 1.0 and child.lifespan == 0
    assert child.neural_net.genome is child.genome
    assert child.genome is not p1.genome and child.genome is not p2.genome
    assert len(child.genome) == 4


def test_clone_stays_in_bounds(catalog, rng):
    parent = make_lifeform(1, Genome.random(catalog, 4, rng), catalog, (0, 0))
    for i in range(50):
        child = evo.clone(parent, 10 + i, rng, grid_size=3, mutation_rate=1.0)
        x, y = child.location
        assert 0 <= x < 3 and 0 <= y < 3
        assert max(abs(x), abs(y)) <= 1
        assert len(child.genome) == 4


def test_clone_without_mutation_copies_genome(catalog, rng):
    parent = make_lifeform(1, Genome.random(catalog, 4, rng), catalog)
    child = evo.clone(parent, 2, rng, grid_size=10, mutation_rate=0.0)
    assert child.genome.genes == parent.genome.genes
    assert child.genome is not parent.genome


def test_mutate_keeps_other_slots_in_place(catalog):
    for seed in range(50):
        rng = np.random.default_rng(seed)
        genome = Genome.random(catalog, 6, rng)
        before = list(genome.genes)
        evo.mutate(genome, catalog, rng)
        same = sum(1 for a, b in zip(before, genome.genes) if a == b)
        assert same == 5
