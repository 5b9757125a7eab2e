"""
NEAT Mutator Module

This module implements the mutation operators of the NEAT algorithm.

Classes:
    Mutator: Stateless collection of weight and structural mutation operators
"""

import random

from neatevo.genotype.connection_gene import ConnectionGene
from neatevo.genotype.genome          import Genome
from neatevo.genotype.node_gene       import NodeType, NodeGene

class Mutator:
    """
    Mutation operators for NEAT genomes.

    All operators modify the genome they receive in place. They keep no state of
    their own: the only state they touch is the genome and, when new connections
    are created, the InnovationRegistry of that genome.

    Each operator accepts an optional random number generator ('rng'); the
    module-level generator of the 'random' module is used when none is given.

    Static Methods:
        mutate_weights(genome, perturb_chance, step_size): Perturb or replace all weights
        add_connection(genome, max_attempts):             Connect two unconnected nodes
        add_node(genome):                                 Split a connection with a hidden node
    """

    @staticmethod
    def mutate_weights(genome        : Genome,
                       perturb_chance: float = 0.9,
                       step_size     : float = 0.1,
                       rng           : random.Random | None = None) -> None:
        """
        Mutate the weight of every connection, enabled or not.

        Each weight is either perturbed, with probability 'perturb_chance', by adding
        a value drawn uniformly from [-step_size, step_size], or replaced by a value
        drawn uniformly from [-1, 1]. The resulting weights are not clamped.

        Parameters:
            genome:         the genome to mutate
            perturb_chance: probability of perturbing (rather than replacing) a weight
            step_size:      largest possible perturbation
            rng:            random number generator
        """
        rng = random if rng is None else rng
        for conn in genome.conn_genes.values():
            if rng.random() < perturb_chance:
                conn.weight += rng.uniform(-step_size, step_size)
            else:
                conn.weight = rng.uniform(-1.0, 1.0)

    @staticmethod
    def add_connection(genome      : Genome,
                       max_attempts: int = 100,
                       rng         : random.Random | None = None) -> ConnectionGene | None:
        """
        Add a new connection between two nodes which are not yet connected.

        The two ends of the new connection are selected at random. A pair is rejected
        when both nodes are outputs, both are inputs (the bias node counts as an input),
        or both are the same node. The direction is chosen so that the connection never
        starts at an output node and never ends at an input or bias node. A pair is
        also rejected if the two nodes are already joined by a connection in either
        direction (enabled or not), or if the new connection would close a cycle.

        Finding no acceptable pair within 'max_attempts' trials is not an error:
        the genome is simply left unchanged.

        Parameters:
            genome:       the genome to mutate
            max_attempts: number of random pairs to try
            rng:          random number generator

        Returns:
            the new connection gene, or None if no connection was added
        """
        rng = random if rng is None else rng

        nodes = list(genome.node_genes.values())
        if len(nodes) < 2:
            return None

        for _ in range(max_attempts):
            a = rng.choice(nodes)
            b = rng.choice(nodes)

            # Carry out quick checks first
            if a.type == NodeType.OUTPUT and b.type == NodeType.OUTPUT:
                continue
            if a.type.is_source_only and b.type.is_source_only:
                continue
            if a.id == b.id:
                continue

            # Signals flow from inputs towards outputs
            if a.type == NodeType.OUTPUT or b.type.is_source_only:
                node_in, node_out = b.id, a.id
            else:
                node_in, node_out = a.id, b.id

            if genome.has_connection(node_in, node_out):
                continue

            # Carry out expensive check last
            if genome.would_create_cycle(node_in, node_out):
                continue

            weight = rng.uniform(-1.0, 1.0)
            return genome.add_connection(node_in, node_out, weight)

        return None

    @staticmethod
    def add_node(genome: Genome, rng: random.Random | None = None) -> NodeGene | None:
        """
        Split an existing connection by adding a new hidden node.

        The connection to split is picked uniformly at random among all connections.
        If it happens to be disabled, nothing is done: disabled connections are
        never split, and no other connection is tried in their place.

        Otherwise the picked connection is disabled and replaced by two new ones:
         + source -> new node,      weight 1.0
         + new node -> destination, weight of the split connection
        so that the network initially computes (nearly) what it computed before.

        Parameters:
            genome: the genome to mutate
            rng:    random number generator

        Returns:
            the new node gene, or None if the genome was left unchanged
        """
        rng = random if rng is None else rng

        if not genome.conn_genes:
            return None

        split_conn = rng.choice(genome.connections)
        if not split_conn.enabled:
            return None

        split_conn.enabled = False

        new_node_id = genome.next_node_id()
        genome.add_node(new_node_id, NodeType.HIDDEN)
        genome.add_connection(split_conn.node_in, new_node_id, 1.0)
        genome.add_connection(new_node_id, split_conn.node_out, split_conn.weight)

        return genome.node_genes[new_node_id]
