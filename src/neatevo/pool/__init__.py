"""
NEAT Pool Package

This package manages the evolving population and its division into species.

Modules:
    species:    Species class
    population: Population class, with its Checkpoint and GenerationStats records

Exported Classes:
    Species:         Cluster of genetically similar genomes
    Population:      Top-level evolutionary coordinator
    Checkpoint:      Notification carrying a new per-species champion
    GenerationStats: Summary of one generation
"""

from neatevo.pool.species    import Species
from neatevo.pool.population import Checkpoint, GenerationStats, Population

__all__ = ['Checkpoint',
           'GenerationStats',
           'Population',
           'Species']
