"""
NEAT Breeder Module

This module implements parent selection and crossover for the NEAT algorithm.

Classes:
    Breeder: Stateless collection of selection and crossover operators
"""

import random
from typing import Sequence

from neatevo.genotype.genome import Genome

class Breeder:
    """
    Selection and crossover operators for NEAT genomes.

    Static Methods:
        select_parent(pool, total_fitness): Fitness-proportional (roulette wheel) selection
        crossover(a, b):                    NEAT crossover, aligning genes by innovation number
    """

    @staticmethod
    def select_parent(pool         : Sequence[Genome],
                      total_fitness: float,
                      rng          : random.Random | None = None) -> Genome:
        """
        Select a genome from a pool with probability proportional to its fitness.

        A number is drawn uniformly from [0, total_fitness); the pool is then walked
        in order, accumulating fitness, and the first genome whose cumulative fitness
        reaches the drawn number is selected. If rounding errors prevent this from
        happening, the last genome in the pool is selected.

        Fitness values are assumed to be non-negative. If all of them are zero, the
        first genome of the pool is selected.

        An empty pool is a caller error, like a connection to a missing node:
        there is no genome to fall back on. Population only selects from species,
        which are never empty, and fills an empty generation by cloning or by
        creating minimal genomes instead of calling this.

        Parameters:
            pool:          genomes to choose from
            total_fitness: sum of the fitness of all genomes in the pool
            rng:           random number generator

        Returns:
            the selected genome

        Raises:
            ValueError: if the pool is empty
        """
        if not pool:
            raise ValueError("cannot select a parent from an empty pool")

        rng  = random if rng is None else rng
        pick = rng.random() * total_fitness

        cumulative = 0.0
        for genome in pool:
            cumulative += genome.fitness
            if cumulative >= pick:
                return genome

        return pool[-1]

    @staticmethod
    def crossover(a: Genome, b: Genome, rng: random.Random | None = None) -> Genome:
        """
        Perform NEAT crossover between two genomes to create offspring.

        The fitter parent is the 'primary' parent (a coin flip decides between
        parents of equal fitness), the other one is the 'secondary' parent.

        - Node genes:       the union of both parents' node genes (by node ID)
        - Matching genes:   inherit a copy from either parent, at random
        - Disjoint/excess genes of the primary parent:   inherited
        - Disjoint/excess genes of the secondary parent: not inherited

        Parameters:
            a, b: the two parent genomes
            rng:  random number generator

        Returns:
            New offspring genome (fitness 0.0), sharing the primary parent's registry
        """
        rng = random if rng is None else rng

        if b.fitness > a.fitness or (a.fitness == b.fitness and rng.random() < 0.5):
            primary, secondary = b, a
        else:
            primary, secondary = a, b

        child = Genome(primary.innovations)

        for node in primary.node_genes.values():
            child.add_node(node.id, node.type)
        for node in secondary.node_genes.values():
            child.add_node(node.id, node.type)

        for innov, conn_primary in primary.conn_genes.items():
            conn_secondary = secondary.conn_genes.get(innov)
            if conn_secondary is not None and rng.random() < 0.5:
                child.conn_genes[innov] = conn_secondary.clone()
            else:
                child.conn_genes[innov] = conn_primary.clone()

        return child
