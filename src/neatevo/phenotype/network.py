"""
NEAT Network Module

This module implements the phenotype of a NEAT genome: a feedforward neural
network which can be evaluated on a vector of inputs (or a batch of them).

Classes:
    NetworkEvaluator: Feedforward network built from a snapshot of a genome
"""

import numpy as np
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from neatevo.genotype import Genome
from neatevo.genotype.node_gene import NodeType

class NetworkEvaluator:
    """
    Executable feedforward network expressed from a NEAT genome.

    The network is built from a snapshot of the genome taken at construction
    time: mutating the genome afterwards does not affect the network.
    Only enabled connections take part in the computation.

    Node semantics:
     + INPUT  nodes output the corresponding value of the input vector
              (inputs are assigned to input nodes in ascending ID order)
     + BIAS   nodes output the constant 'bias_value'
     + HIDDEN and OUTPUT nodes output tanh(sum of weighted inputs)

    Nodes are computed in topological order, obtained by reversing the
    depth-first post-order of the connection graph. A genome whose enabled
    connections contain a cycle cannot be expressed and is rejected.

    Public Methods:
        evaluate(inputs):       Process a single input vector, return the outputs
        evaluate_batch(inputs): Process a (batch_size, num_inputs) array of inputs
                                Output: (batch_size, num_outputs)

    Public Properties:
        num_inputs:                 Number of input nodes
        num_outputs:                Number of output nodes
        number_nodes:               Total number of nodes in the network
        number_nodes_hidden:        Number of hidden nodes in the network
        number_connections_enabled: Number of enabled connections in the network
        evaluation_order:           Node IDs in the order they are computed
    """

    def __init__(self, genome: 'Genome', bias_value: float = 1.0):
        """
        Build the network from a genome.

        Parameters:
            genome:     the Genome encoding the network
            bias_value: constant output of the bias node(s)

        Raises:
            ValueError: if the enabled connections of the genome contain a cycle
        """
        self._bias_value: float = bias_value

        # Snapshot of the genome (node ID => type, enabled edges)
        self._node_types: dict[int, NodeType] = {node_id: gene.type for node_id, gene in genome.node_genes.items()}
        self._edges: list[tuple[int, int, float]] = [(conn.node_in, conn.node_out, conn.weight)
                                                     for conn in genome.conn_genes.values() if conn.enabled]

        self._input_ids  = sorted(nid for nid, t in self._node_types.items() if t == NodeType.INPUT)
        self._bias_ids   = sorted(nid for nid, t in self._node_types.items() if t == NodeType.BIAS)
        self._output_ids = sorted(nid for nid, t in self._node_types.items() if t == NodeType.OUTPUT)

        # Adjacency lists, in both directions
        self._outgoing: dict[int, list[int]] = {node_id: [] for node_id in self._node_types}
        self._incoming: dict[int, list[tuple[int, float]]] = {node_id: [] for node_id in self._node_types}
        for node_in, node_out, weight in self._edges:
            if node_in not in self._node_types or node_out not in self._node_types:
                raise ValueError(f"Connection {node_in}->{node_out} references a missing node")
            self._outgoing[node_in].append(node_out)
            self._incoming[node_out].append((node_in, weight))

        self._sorted_nodes: list[int] = self._topological_sort()

        # Array index of every node, used by the batch evaluation
        self._node_id_to_idx = {node_id: idx for idx, node_id in enumerate(sorted(self._node_types))}

    def _topological_sort(self) -> list[int]:
        """
        Order the nodes so that every node comes after all of its sources.

        Iterative depth-first search, started from every node in ascending ID
        order. A node is appended to the post-order once all of its successors
        are finished; the reversed post-order is a topological order.

        Raises:
            ValueError: if a back edge (i.e. a cycle) is found
        """
        UNVISITED, IN_PROGRESS, DONE = 0, 1, 2
        state = {node_id: UNVISITED for node_id in self._node_types}
        post_order: list[int] = []

        for root in sorted(self._node_types):
            if state[root] != UNVISITED:
                continue

            state[root] = IN_PROGRESS
            stack = [(root, iter(self._outgoing[root]))]
            while stack:
                node_id, successors = stack[-1]
                for succ in successors:
                    if state[succ] == IN_PROGRESS:
                        raise ValueError(f"Genome contains a cycle through nodes {node_id} and {succ}")
                    if state[succ] == UNVISITED:
                        state[succ] = IN_PROGRESS
                        stack.append((succ, iter(self._outgoing[succ])))
                        break
                else:
                    stack.pop()
                    state[node_id] = DONE
                    post_order.append(node_id)

        post_order.reverse()
        return post_order

    @property
    def num_inputs(self) -> int:
        return len(self._input_ids)

    @property
    def num_outputs(self) -> int:
        return len(self._output_ids)

    @property
    def number_nodes(self) -> int:
        return len(self._node_types)

    @property
    def number_nodes_hidden(self) -> int:
        return sum(1 for t in self._node_types.values() if t == NodeType.HIDDEN)

    @property
    def number_connections_enabled(self) -> int:
        return len(self._edges)

    @property
    def evaluation_order(self) -> list[int]:
        return list(self._sorted_nodes)

    def evaluate(self, inputs: Sequence[float]) -> list[float]:
        """
        Perform a complete forward pass through the network.

        Parameters:
            inputs: the network inputs (as many as input nodes)

        Returns:
            the values of the output nodes, in ascending ID order

        Raises:
            ValueError: if the number of inputs does not match the number of input nodes
        """
        if len(inputs) != len(self._input_ids):
            raise ValueError(f"Expected {len(self._input_ids)} inputs, got {len(inputs)}")

        values: dict[int, float] = {node_id: 0.0 for node_id in self._node_types}
        for node_id, value in zip(self._input_ids, inputs):
            values[node_id] = float(value)
        for node_id in self._bias_ids:
            values[node_id] = self._bias_value

        # Propagate values through the network, in topological order
        for node_id in self._sorted_nodes:
            if self._node_types[node_id].is_source_only:
                continue
            total = 0.0
            for source, weight in self._incoming[node_id]:
                total += weight * values[source]
            values[node_id] = float(np.tanh(total))

        return [values[node_id] for node_id in self._output_ids]

    def evaluate_batch(self, inputs: np.ndarray) -> np.ndarray:
        """
        Perform a forward pass for a whole batch of input vectors.

        Row 'i' of the result holds the same values 'evaluate(inputs[i])' returns.

        Parameters:
            inputs: input values, shape (batch_size, num_inputs) or (num_inputs,)

        Returns:
            output values, shape (batch_size, num_outputs)

        Raises:
            ValueError: if the shape of the inputs does not match the input nodes
        """
        inputs = np.asarray(inputs, dtype=np.float64)
        if inputs.ndim == 1:
            inputs = inputs.reshape(1, -1)
        elif inputs.ndim != 2:
            raise ValueError(f"Input must be 1D or 2D array, got {inputs.ndim}D")

        if inputs.shape[1] != len(self._input_ids):
            raise ValueError(f"Expected {len(self._input_ids)} inputs, got {inputs.shape[1]}")

        idx = self._node_id_to_idx
        node_values = np.zeros((inputs.shape[0], len(self._node_types)), dtype=np.float64)
        for column, node_id in enumerate(self._input_ids):
            node_values[:, idx[node_id]] = inputs[:, column]
        for node_id in self._bias_ids:
            node_values[:, idx[node_id]] = self._bias_value

        for node_id in self._sorted_nodes:
            if self._node_types[node_id].is_source_only:
                continue
            total = np.zeros(inputs.shape[0], dtype=np.float64)
            for source, weight in self._incoming[node_id]:
                total += weight * node_values[:, idx[source]]
            node_values[:, idx[node_id]] = np.tanh(total)

        return node_values[:, [idx[node_id] for node_id in self._output_ids]]

    def __str__(self):
        node_info = [f"  Node {node_id} ({self._node_types[node_id].name})" for node_id in self._sorted_nodes]
        conn_info = [f"  {node_in:02d}=>{node_out:02d}, w={weight:+.2f}" for node_in, node_out, weight in self._edges]
        return "\n".join(node_info) + "\n\n" + "\n".join(conn_info)

    def __repr__(self):
        return (f"NetworkEvaluator(nodes={self.number_nodes}, "
                f"hidden={self.number_nodes_hidden}, "
                f"connections={self.number_connections_enabled})")
