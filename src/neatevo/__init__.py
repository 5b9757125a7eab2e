"""
NEAT (NeuroEvolution of Augmenting Topologies) - A Python implementation.

This package provides an implementation of the NEAT algorithm for evolving
feedforward neural networks through genetic algorithms, with adaptive
speciation and adaptive structural mutation rates.

Main components:
- genotype:  Genetic encoding (genomes, genes, innovation numbers) and its operators
- phenotype: Neural network expression of a genome
- pool:      Population and speciation management
- run:       Trial execution and configuration

Example:
    >>> from neatevo import Config, Trial
    >>> config = Config("config.ini")
    >>> class MyTrial(Trial):
    ...     def _evaluate_fitness(self, genome):
    ...         # Implement fitness evaluation
    ...         pass
    >>> trial = MyTrial(config)
    >>> trial.run()
"""

__version__ = "0.1.0"

# Import main classes for convenient access
from neatevo.run.config               import Config
from neatevo.run.trial                import Trial
from neatevo.genotype.genome          import Genome
from neatevo.genotype.node_gene       import NodeGene, NodeType
from neatevo.genotype.connection_gene import ConnectionGene
from neatevo.phenotype.network        import NetworkEvaluator
from neatevo.pool.population          import Population
