"""
NEAT Species Module

This module implements the Species class for the NEAT algorithm.
A species represents a cluster of genetically similar genomes
that compete primarily within their own niche.

Classes:
    Species: Represents a single species with members and stagnation tracking
"""

import numpy as np
import random

from neatevo.genotype import Genome

class Species:
    """
    A species representing a cluster of genetically similar genomes in NEAT.

    In NEAT, the population is divided into species based on genetic similarity,
    allowing different evolutionary niches to develop independently. This protects
    innovative structures from being eliminated by competition with more mature
    solutions, as genomes only compete for offspring within their own species.

    Each species keeps a representative genome used for distance calculations
    during speciation. The representative is a snapshot (a clone) taken when the
    species is created or reset, so it is never affected by what happens to the
    genome it was copied from. Membership is recomputed from scratch every generation.

    Public Attributes:
        id:                      Unique species identifier
        representative:          Genome used for distance calculations during speciation
        members:                 The genomes that are part of this species
        best_fitness:            Best (shared) fitness ever achieved by this species
        age_without_improvement: Generations since 'best_fitness' last improved

    Public Properties:
        top_member:    The first member (the fittest, once members are sorted)
        total_fitness: Sum of the fitness of all members

    Public Methods:
        try_add(genome, threshold, c1, c2, c3): Add a genome if it is compatible
        reset_for_next_gen(rng):                Pick a new representative, drop all members
        update_stagnation(generation_best):     Track improvement of the best fitness
        is_stagnant(max_stagnation_period):     Whether the species stopped improving
        sort_members():                         Sort members by fitness, fittest first
    """

    def __init__(self, species_id: int, founder: Genome):
        """
        Initialize a new species.

        Parameters:
            species_id: unique species identifier
            founder:    the genome that starts the species; it becomes its only member,
                        and a snapshot of it becomes the representative
        """
        self.id                     : int          = species_id
        self.representative         : Genome       = founder.clone()
        self.members                : list[Genome] = [founder]
        self.best_fitness           : float        = -np.inf
        self.age_without_improvement: int          = 0

    def try_add(self, genome: Genome, threshold: float, c1: float, c2: float, c3: float) -> bool:
        """
        Add a genome to this species, if it is close enough to the representative.

        Parameters:
            genome:     the candidate member
            threshold:  the largest compatibility distance accepted
            c1, c2, c3: coefficients of the compatibility distance

        Returns:
            True if the genome was added, False if the species was left unchanged
        """
        if Genome.compatibility_distance(self.representative, genome, c1, c2, c3) <= threshold:
            self.members.append(genome)
            return True
        return False

    def reset_for_next_gen(self, rng: random.Random | None = None) -> None:
        """
        Prepare the species for being assigned the genomes of a new generation.
        A snapshot of a random current member becomes the new representative.
        """
        rng = random if rng is None else rng
        if self.members:
            self.representative = rng.choice(self.members).clone()
        self.members = []

    def update_stagnation(self, generation_best: float) -> None:
        if generation_best > self.best_fitness:
            self.best_fitness            = generation_best
            self.age_without_improvement = 0
        else:
            self.age_without_improvement += 1

    def is_stagnant(self, max_stagnation_period: int) -> bool:
        return self.age_without_improvement >= max_stagnation_period

    def sort_members(self) -> None:
        self.members.sort(key=lambda genome: genome.fitness, reverse=True)

    @property
    def top_member(self) -> Genome | None:
        return self.members[0] if self.members else None

    @property
    def total_fitness(self) -> float:
        return sum(genome.fitness for genome in self.members)

    def __len__(self):
        return len(self.members)

    def __repr__(self):
        return (f"Species(id={self.id}, members={len(self.members)}, "
                f"best_fitness={self.best_fitness:.4f}, stagnant_for={self.age_without_improvement})")
