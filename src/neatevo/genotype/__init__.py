"""
NEAT Genotype Package

This package implements the genotype representation for the NEAT (NeuroEvolution of
Augmenting Topologies) algorithm, together with the operators that vary it.

The NEAT genotype consists of two types of genes:
- Node genes:       Encode individual neurons and their role (input, bias, hidden, output)
- Connection genes: Encode weighted connections between neurons with innovation numbers

Modules:
    node_gene:           NodeType enumeration and NodeGene class
    connection_gene:     ConnectionGene class
    innovation_registry: InnovationRegistry class
    genome:              Genome class
    mutator:             Mutator class
    breeder:             Breeder class

Exported Classes:
    NodeType:           Enumeration for node types (INPUT, HIDDEN, OUTPUT, BIAS)
    NodeGene:           Gene encoding a single network node
    ConnectionGene:     Gene encoding a weighted connection between nodes
    Genome:             Complete genome representing a neural network
    InnovationRegistry: Source of innovation numbers for new connections
    Mutator:            Weight and structural mutation operators
    Breeder:            Parent selection and crossover operators
"""

from neatevo.genotype.breeder             import Breeder
from neatevo.genotype.connection_gene     import ConnectionGene
from neatevo.genotype.genome              import Genome
from neatevo.genotype.innovation_registry import InnovationRegistry
from neatevo.genotype.mutator             import Mutator
from neatevo.genotype.node_gene           import NodeType, NodeGene

__all__ = ['Breeder',
           'ConnectionGene',
           'Genome',
           'InnovationRegistry',
           'Mutator',
           'NodeGene',
           'NodeType']
