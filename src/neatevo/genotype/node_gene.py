"""
NEAT Node Gene Module.

This module implements the NodeGene class and NodeType enumeration
for the NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    NodeType: Enumeration for node types (INPUT, HIDDEN, OUTPUT, BIAS)
    NodeGene: Gene encoding a single network node
"""

from enum import Enum

class NodeType(Enum):
    """
    Nodes come in four types: input, hidden, output, bias.
    """
    INPUT  = "I"
    HIDDEN = "H"
    OUTPUT = "O"
    BIAS   = "B"

    @property
    def is_source_only(self) -> bool:
        """Whether nodes of this type may only appear at the 'from' end of a connection."""
        return self in (NodeType.INPUT, NodeType.BIAS)

class NodeGene:
    """
    A gene describing a node in a Neural Network.

    A node gene carries nothing but an identity and a role. The role decides
    how the node is treated when the genome is expressed as a network:
     + INPUT  nodes receive the values of the sensor vector
     + BIAS   nodes hold a constant value
     + HIDDEN and OUTPUT nodes sum their weighted inputs and apply 'tanh'

    Node genes are identified by an ID which is unique within one genome.

    Public Attributes:
        id:   Identifier for this node, unique within its genome
        type: Type of node (INPUT, HIDDEN, OUTPUT or BIAS)

    Public Methods:
        clone(): Create an independent copy of this gene
    """

    def __init__(self, node_id: int, node_type: NodeType):
        """
        Initialize a node gene.

        Parameters:
            node_id:   Identifier for this node
            node_type: Type of node (INPUT, HIDDEN, OUTPUT or BIAS)
        """
        self.id  : int      = node_id
        self.type: NodeType = node_type

    def clone(self) -> 'NodeGene':
        return NodeGene(self.id, self.type)

    def __eq__(self, other):
        if not isinstance(other, NodeGene):
            return NotImplemented
        return self.id == other.id and self.type == other.type

    def __hash__(self):
        return hash((self.id, self.type))

    def __repr__(self):
        return f"NodeGene(node_id={self.id:03d}, node_type=NodeType.{self.type.name})"

    def __str__(self):
        return f"[{self.type.value}{self.id}]"
