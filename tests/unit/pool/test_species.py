"""
Unit tests for neatevo.pool.species module.

This module contains tests for the Species class, which represents
a cluster of genetically similar genomes in NEAT.
"""

import numpy as np
import pytest

from neatevo.genotype import Genome
from neatevo.pool.species import Species


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def founder(registry):
    """Genome with 2 inputs, bias and output, connected 0->3 and 1->3."""
    genome = Genome.create_minimal(2, 1, registry)
    genome.add_connection(0, 3, 0.5)
    genome.add_connection(1, 3, -0.5)
    genome.fitness = 10.0
    return genome


def with_fitness(genome, fitness):
    clone = genome.clone()
    clone.fitness = fitness
    return clone


# ============================================================================
# Test Species Initialization
# ============================================================================

class TestSpeciesInit:
    """Test Species.__init__ method."""

    def test_init_sets_basic_attributes(self, founder):
        species = Species(1, founder)
        assert species.id == 1
        assert species.members == [founder]
        assert species.best_fitness == -np.inf
        assert species.age_without_improvement == 0

    def test_representative_is_a_snapshot(self, founder):
        species = Species(1, founder)
        assert species.representative is not founder
        assert species.representative.to_dict() == founder.to_dict()

        founder.conn_genes[0].weight = 3.0
        assert species.representative.conn_genes[0].weight == 0.5


# ============================================================================
# Test Membership
# ============================================================================

class TestTryAdd:
    """Test Species.try_add method."""

    def test_accepts_compatible_genome(self, founder):
        species = Species(1, founder)
        other   = with_fitness(founder, 1.0)
        assert species.try_add(other, 3.0, 1.0, 1.0, 0.4)
        assert species.members == [founder, other]

    def test_rejects_incompatible_genome(self, founder):
        species = Species(1, founder)
        other   = founder.clone()
        other.add_connection(2, 3, 1.0)      # one excess gene => distance 1/3
        assert not species.try_add(other, 0.3, 1.0, 1.0, 0.4)
        assert species.members == [founder]

    def test_distance_equal_to_threshold_is_accepted(self, founder):
        species = Species(1, founder)
        other   = founder.clone()
        other.conn_genes[0].weight = 1.5     # weight difference 1.0 on one of two matching genes
        assert species.try_add(other, 0.5, 1.0, 1.0, 1.0)


# ============================================================================
# Test Generation Reset
# ============================================================================

class TestResetForNextGen:
    """Test Species.reset_for_next_gen method."""

    def test_representative_is_copy_of_a_member(self, founder, rng):
        species = Species(1, founder)
        members = [with_fitness(founder, f) for f in (1.0, 2.0, 3.0)]
        members[1].conn_genes[0].weight = 0.9
        members[2].conn_genes[0].weight = -0.9
        species.members = members

        species.reset_for_next_gen(rng)

        assert species.members == []
        assert all(species.representative is not m for m in members)
        assert species.representative.to_dict() in [m.to_dict() for m in members]

    def test_reset_without_members_keeps_representative(self, founder, rng):
        species = Species(1, founder)
        species.members = []
        representative = species.representative
        species.reset_for_next_gen(rng)
        assert species.representative is representative

    def test_reset_preserves_stagnation_tracking(self, founder, rng):
        species = Species(1, founder)
        species.update_stagnation(5.0)
        species.update_stagnation(4.0)
        species.reset_for_next_gen(rng)
        assert species.best_fitness == 5.0
        assert species.age_without_improvement == 1


# ============================================================================
# Test Stagnation
# ============================================================================

class TestStagnation:
    """Test Species.update_stagnation and Species.is_stagnant."""

    def test_improvement_resets_age(self, founder):
        species = Species(1, founder)
        species.update_stagnation(1.0)
        assert species.best_fitness == 1.0
        assert species.age_without_improvement == 0

        species.update_stagnation(0.5)
        species.update_stagnation(0.5)
        assert species.best_fitness == 1.0
        assert species.age_without_improvement == 2

        species.update_stagnation(2.0)
        assert species.best_fitness == 2.0
        assert species.age_without_improvement == 0

    def test_equal_fitness_is_not_improvement(self, founder):
        species = Species(1, founder)
        species.update_stagnation(1.0)
        species.update_stagnation(1.0)
        assert species.age_without_improvement == 1

    def test_is_stagnant_at_limit(self, founder):
        species = Species(1, founder)
        species.update_stagnation(1.0)
        for _ in range(14):
            species.update_stagnation(1.0)
        assert not species.is_stagnant(15)
        species.update_stagnation(1.0)
        assert species.is_stagnant(15)


# ============================================================================
# Test Ranking
# ============================================================================

class TestRanking:
    """Test sort_members, top_member and total_fitness."""

    def test_sort_members_descending(self, founder):
        species = Species(1, founder)
        species.members = [with_fitness(founder, f) for f in (2.0, 9.0, 5.0)]
        species.sort_members()
        assert [m.fitness for m in species.members] == [9.0, 5.0, 2.0]
        assert species.top_member.fitness == 9.0

    def test_total_fitness(self, founder):
        species = Species(1, founder)
        species.members = [with_fitness(founder, f) for f in (2.0, 9.0, 5.0)]
        assert species.total_fitness == 16.0
        assert len(species) == 3

    def test_empty_species(self, founder, rng):
        species = Species(1, founder)
        species.reset_for_next_gen(rng)
        assert species.top_member is None
        assert species.total_fitness == 0
