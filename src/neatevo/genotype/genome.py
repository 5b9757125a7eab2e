"""
NEAT Genome Module

This module implements the Genome class for the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    Genome: Complete genome representing a neural network structure
"""

import json

from neatevo.genotype.connection_gene     import ConnectionGene
from neatevo.genotype.innovation_registry import InnovationRegistry
from neatevo.genotype.node_gene           import NodeType, NodeGene

# Names used for node types in the durable (dictionary/JSON) representation
_TYPE_NAMES = {NodeType.INPUT : "input",
               NodeType.BIAS  : "bias",
               NodeType.HIDDEN: "hidden",
               NodeType.OUTPUT: "output"}
_NAME_TYPES = {name: node_type for node_type, name in _TYPE_NAMES.items()}

class Genome:
    """
    A NEAT genome representing a neural network as a collection of node and connection genes.

    In the NEAT (NeuroEvolution of Augmenting Topologies) algorithm, a genome encodes
    the structure and parameters of a neural network at the genotype level. It consists of:
    - Node genes: describe network nodes (input, bias, hidden, output)
    - Connection genes: describe weighted connections between nodes, each with a unique
      innovation number for tracking historical markings during crossover

    New innovation numbers are drawn from the InnovationRegistry the genome was
    created with. Clones and offspring share the registry of their parent(s).

    Node numbering convention (established by 'create_minimal'):
        - Input nodes:  [0, num_inputs)
        - Bias node:    num_inputs
        - Output nodes: [num_inputs + 1, num_inputs + 1 + num_outputs)
        - Hidden nodes: above the output nodes, unique within one genome only

    Attributes:
        node_genes: Dictionary mapping node IDs to NodeGene objects
        conn_genes: Dictionary mapping innovation numbers to ConnectionGene objects
                    (insertion ordered)
        fitness:    Fitness assigned by the caller, overwritten every generation

    Public Properties:
        connections:         List of all connection genes
        enabled_connections: List of all enabled connection genes
        input_nodes:         List of all input node genes, sorted by ID
        bias_nodes:          List of all bias node genes, sorted by ID
        output_nodes:        List of all output node genes, sorted by ID
        hidden_nodes:        List of all hidden node genes, sorted by ID
        innovations:         The registry used to number new connections

    Public Methods:
        add_node(node_id, node_type):             Insert a node gene (idempotent)
        add_connection(node_in, node_out, weight): Append an enabled connection gene
        has_connection(node_a, node_b):           Whether the two nodes are connected
        next_node_id():                           A node ID not yet used in this genome
        would_create_cycle(from_node, to_node):   Whether a new connection would close a cycle
        clone():                                  Deep copy of this genome
        distance(other, c1, c2, c3):              Compatibility distance to another genome
        validate():                               Check the structural invariants
        to_dict() / to_json():                    Durable representation

    Class Methods:
        create_minimal(num_inputs, num_outputs, innovations): Inputs, bias and outputs only
        from_dict(genome_dict, innovations):                  Inverse of 'to_dict'
        from_json(text, innovations):                         Inverse of 'to_json'

    Static Methods:
        compatibility_distance(a, b, c1, c2, c3): The NEAT compatibility distance
    """

    def __init__(self, innovations: InnovationRegistry | None = None):
        """
        Initialize an empty Genome (no node or connection genes).

        Parameters:
            innovations: registry numbering new connections; a private one is created if None
        """
        self._innovations: InnovationRegistry = innovations if innovations is not None else InnovationRegistry()

        self.node_genes: dict[int, NodeGene]       = {}  # node ID => node gene
        self.conn_genes: dict[int, ConnectionGene] = {}  # innovation number => connection gene
        self.fitness   : float                     = 0.0

    @classmethod
    def create_minimal(cls,
                       num_inputs : int,
                       num_outputs: int,
                       innovations: InnovationRegistry | None = None) -> 'Genome':
        """
        Create a genome describing the smallest possible network: input nodes,
        one bias node and output nodes, with no connections.

        Parameters:
            num_inputs:  number of input (sensor) nodes
            num_outputs: number of output (action) nodes
            innovations: registry numbering new connections

        Returns:
            a new minimal Genome
        """
        genome = cls(innovations)
        for node_id in range(num_inputs):
            genome.add_node(node_id, NodeType.INPUT)
        genome.add_node(num_inputs, NodeType.BIAS)
        for i in range(num_outputs):
            genome.add_node(num_inputs + 1 + i, NodeType.OUTPUT)
        return genome

    @property
    def innovations(self) -> InnovationRegistry:
        return self._innovations

    @property
    def connections(self) -> list[ConnectionGene]:
        return list(self.conn_genes.values())

    @property
    def enabled_connections(self) -> list[ConnectionGene]:
        return [conn for conn in self.conn_genes.values() if conn.enabled]

    @property
    def input_nodes(self) -> list[NodeGene]:
        return self._nodes_of_type(NodeType.INPUT)

    @property
    def bias_nodes(self) -> list[NodeGene]:
        return self._nodes_of_type(NodeType.BIAS)

    @property
    def output_nodes(self) -> list[NodeGene]:
        return self._nodes_of_type(NodeType.OUTPUT)

    @property
    def hidden_nodes(self) -> list[NodeGene]:
        return self._nodes_of_type(NodeType.HIDDEN)

    def _nodes_of_type(self, node_type: NodeType) -> list[NodeGene]:
        return sorted((node for node in self.node_genes.values() if node.type == node_type),
                      key=lambda node: node.id)

    def add_node(self, node_id: int, node_type: NodeType) -> None:
        """
        Add a node gene, unless a node with the same ID is already present.

        Parameters:
            node_id:   ID of the new node
            node_type: type of the new node
        """
        if node_id not in self.node_genes:
            self.node_genes[node_id] = NodeGene(node_id, node_type)

    def add_connection(self, node_in: int, node_out: int, weight: float) -> ConnectionGene:
        """
        Add a new enabled connection gene, numbered with a fresh innovation number.

        The genome does not check whether the two nodes exist or are already
        connected; callers are responsible for requesting valid connections.

        Parameters:
            node_in:  ID of the source node
            node_out: ID of the destination node
            weight:   weight of the new connection

        Returns:
            the new connection gene
        """
        innovation = self._innovations.next_id()
        connection = ConnectionGene(node_in, node_out, weight, innovation)
        self.conn_genes[innovation] = connection
        return connection

    def has_connection(self, node_a: int, node_b: int) -> bool:
        """
        Whether a connection (enabled or disabled) joins the two nodes, in either direction.
        """
        for conn in self.conn_genes.values():
            if (conn.node_in, conn.node_out) in ((node_a, node_b), (node_b, node_a)):
                return True
        return False

    def next_node_id(self) -> int:
        """
        Return a node ID not used by any node of this genome.
        """
        return max(self.node_genes, default=-1) + 1

    def clone(self) -> 'Genome':
        """
        Create a deep copy of this genome.

        Node and connection genes are copied, so the clone can be mutated without
        affecting the original. The fitness is not copied (it starts at 0.0).
        """
        clone = Genome(self._innovations)
        for node_id, node in self.node_genes.items():
            clone.node_genes[node_id] = node.clone()
        for innovation, conn in self.conn_genes.items():
            clone.conn_genes[innovation] = conn.clone()
        return clone

    def distance(self, other: 'Genome', c1: float = 1.0, c2: float = 1.0, c3: float = 0.4) -> float:
        """
        Calculate the compatibility distance between this genome and another.
        See 'compatibility_distance' for details.
        """
        return Genome.compatibility_distance(self, other, c1, c2, c3)

    @staticmethod
    def compatibility_distance(a : 'Genome',
                               b : 'Genome',
                               c1: float = 1.0,
                               c2: float = 1.0,
                               c3: float = 0.4) -> float:
        """
        Calculate the compatibility distance between two genomes using the NEAT formula.

           distance = (c1 * E + c2 * D) / N + c3 * W̄

        Where:
        - E = number of excess connection genes
        - D = number of disjoint connection genes
        - N = number of connection genes in the larger genome (at least 1)
        - W̄ = average weight difference of matching connection genes

        Connection genes are aligned by innovation number. A gene present in only
        one genome is 'excess' if its innovation number is larger than the largest
        innovation number of the other genome, otherwise it is 'disjoint'. The
        result does not depend on the order of the arguments.

        Parameters:
            a, b:       the two genomes
            c1, c2, c3: weights of the excess, disjoint and weight difference terms

        Returns:
            the compatibility distance between 'a' and 'b'
        """
        innovs_a = set(a.conn_genes.keys())
        innovs_b = set(b.conn_genes.keys())

        max_innov_a = max(innovs_a) if innovs_a else -1
        max_innov_b = max(innovs_b) if innovs_b else -1

        matching_innovs     =  innovs_a & innovs_b
        non_matching_innovs = (innovs_a | innovs_b) - matching_innovs

        # Excess   genes: beyond the other genome's max innovation number
        # Disjoint genes: within the other genome's range but not matching
        num_excess   = 0
        num_disjoint = 0
        for innov in non_matching_innovs:
            if innov > max_innov_a or innov > max_innov_b:
                num_excess += 1
            else:
                num_disjoint += 1

        avg_weight_diff = 0.0
        if matching_innovs:
            weight_diff = sum(abs(a.conn_genes[i].weight - b.conn_genes[i].weight) for i in matching_innovs)
            avg_weight_diff = weight_diff / len(matching_innovs)

        N = max(len(a.conn_genes), len(b.conn_genes), 1)
        return (c1 * num_excess + c2 * num_disjoint) / N + c3 * avg_weight_diff

    def would_create_cycle(self, from_node: int, to_node: int) -> bool:
        """
        Check if adding a connection from_node -> to_node would create a cycle.
        Uses DFS to check if there's already a path from 'to_node' back to 'from_node'.
        Considers ALL connections (both enabled and disabled) to maintain DAG structure.

        Parameters:
            from_node: proposed start of the new connection
            to_node:   proposed end   of the new connections

        Returns:
            whether adding the new connection would create a cycle in the network
        """
        if from_node == to_node:
            return True

        successors: dict[int, list[int]] = {}
        for conn in self.conn_genes.values():
            successors.setdefault(conn.node_in, []).append(conn.node_out)

        # If we can reach 'from_node' starting at 'to_node', then adding a
        # connection 'from_node' -> 'to_node' would create a network cycle
        visited = set()
        stack   = [to_node]
        while stack:
            current = stack.pop()
            if current == from_node:
                return True
            if current in visited:
                continue
            visited.add(current)
            stack.extend(successors.get(current, []))

        return False

    def validate(self) -> None:
        """
        Check the structural invariants of the genome.

        Raises:
            ValueError: if a connection references a node that does not exist, if a
                        connection is stored under the wrong innovation number, or if
                        two enabled connections join the same ordered pair of nodes
        """
        enabled_pairs = set()
        for innovation, conn in self.conn_genes.items():
            if conn.innovation != innovation:
                raise ValueError(f"Connection {conn} is stored under innovation number {innovation}")
            if conn.node_in not in self.node_genes:
                raise ValueError(f"Connection {conn} references non-existent source node {conn.node_in}")
            if conn.node_out not in self.node_genes:
                raise ValueError(f"Connection {conn} references non-existent destination node {conn.node_out}")
            if conn.enabled:
                if conn.endpoints in enabled_pairs:
                    raise ValueError(f"More than one enabled connection from {conn.node_in} to {conn.node_out}")
                enabled_pairs.add(conn.endpoints)

    def to_dict(self) -> dict:
        """
        Convert the genome to a dictionary representation.

        This is the inverse operation of from_dict(). The fitness is not part
        of the representation.

        Returns:
            Dictionary with the following structure:
            {
                "nodes": [
                    {"id": 0, "type": "input"},
                    {"id": 1, "type": "bias"},
                    {"id": 2, "type": "output"},
                    {"id": 3, "type": "hidden"}
                ],
                "connections": [
                    {"from": 0, "to": 3, "weight": 0.5, "enabled": false, "innovation": 0},
                    {"from": 3, "to": 2, "weight": 1.5, "enabled": true,  "innovation": 7}
                ]
            }
        """
        nodes = [{"id": node.id, "type": _TYPE_NAMES[node.type]}
                 for node in sorted(self.node_genes.values(), key=lambda n: n.id)]

        connections = []
        for conn in sorted(self.conn_genes.values(), key=lambda c: c.innovation):
            connections.append({
                "from"      : conn.node_in,
                "to"        : conn.node_out,
                "weight"    : conn.weight,
                "enabled"   : conn.enabled,
                "innovation": conn.innovation
            })

        return {"nodes": nodes, "connections": connections}

    @classmethod
    def from_dict(cls, genome_dict: dict, innovations: InnovationRegistry | None = None) -> 'Genome':
        """
        Create a Genome from a dictionary description (see 'to_dict' for the format).

        The node lookup table is rebuilt from the node list, and the structure is
        validated before the genome is returned. When 'innovations' is given, it is
        advanced past every innovation number found in the description, so that new
        connections never reuse them.

        Parameters:
            genome_dict: Dictionary describing the genome structure
            innovations: registry the new genome will use to number new connections

        Returns:
            A new Genome object with the specified structure

        Raises:
            ValueError: If the structure is invalid (unknown node type, duplicate IDs,
                        connection to a non-existent node, etc.)
            KeyError: If required fields are missing from the dictionary
        """
        genome = cls(innovations)

        for node_data in genome_dict["nodes"]:
            node_id   = node_data["id"]
            type_name = node_data["type"]
            if type_name not in _NAME_TYPES:
                raise ValueError(f"Unknown node type '{type_name}' for node {node_id}")
            if node_id in genome.node_genes:
                raise ValueError(f"Duplicate node ID {node_id}")
            genome.node_genes[node_id] = NodeGene(node_id, _NAME_TYPES[type_name])

        for conn_data in genome_dict.get("connections", []):
            innovation = conn_data["innovation"]
            if innovation in genome.conn_genes:
                raise ValueError(f"Duplicate innovation number {innovation}")
            conn = ConnectionGene(conn_data["from"],
                                  conn_data["to"],
                                  float(conn_data["weight"]),
                                  innovation,
                                  enabled=conn_data.get("enabled", True))
            genome.conn_genes[innovation] = conn

        genome.validate()

        if genome.conn_genes:
            genome._innovations.advance_past(max(genome.conn_genes))

        return genome

    def to_json(self, indent: int | None = 2) -> str:
        """
        Serialize the genome to a JSON string (the JSON form of 'to_dict').
        """
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str, innovations: InnovationRegistry | None = None) -> 'Genome':
        """
        Create a Genome from a JSON string produced by 'to_json'.
        """
        return cls.from_dict(json.loads(text), innovations)

    def __str__(self):
        node_genes_str  = ''.join(str(node) for node in self.input_nodes)
        node_genes_str += ''.join(str(node) for node in self.bias_nodes)
        node_genes_str += ''.join(str(node) for node in self.hidden_nodes)
        node_genes_str += ''.join(str(node) for node in self.output_nodes)
        conn_genes_str  = ''.join(str(conn) for conn in self.conn_genes.values())
        return f"Nodes: {node_genes_str}\nConns: {conn_genes_str}"

    def __repr__(self):
        return (f"Genome(nodes={len(self.node_genes)}, connections={len(self.conn_genes)}, "
                f"fitness={self.fitness})")
