"""
NEAT Phenotype Package

This package expresses NEAT genomes as executable feedforward networks.

Modules:
    network: NetworkEvaluator class

Exported Classes:
    NetworkEvaluator: Feedforward network built from a snapshot of a genome
"""

from neatevo.phenotype.network import NetworkEvaluator

__all__ = ['NetworkEvaluator']
