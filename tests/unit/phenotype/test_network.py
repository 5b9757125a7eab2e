"""
Unit tests for NetworkEvaluator class.

Tests cover evaluation order, cycle detection, single and batched forward
passes, and introspection properties.
"""

import math
import numpy as np
import pytest

from neatevo.genotype  import Genome, Mutator
from neatevo.phenotype import NetworkEvaluator


# ============================================================================
# Test Fixtures
# ============================================================================

@pytest.fixture
def simple_genome_dict():
    """Input 0, bias 1, output 2 and a single connection 0->2 with weight 0.5."""
    return {
        'nodes': [
            {'id': 0, 'type': 'input'},
            {'id': 1, 'type': 'bias'},
            {'id': 2, 'type': 'output'},
        ],
        'connections': [
            {'from': 0, 'to': 2, 'weight': 0.5, 'enabled': True, 'innovation': 0},
        ]
    }


@pytest.fixture
def hidden_genome_dict():
    """
    Network with one hidden node (3) between two inputs and one output:
        0 -> 3 (1.0), 1 -> 3 (-1.0), bias 2 -> 3 (0.5), 3 -> 4 (2.0), 0 -> 4 (0.3, disabled)
    """
    return {
        'nodes': [
            {'id': 0, 'type': 'input'},
            {'id': 1, 'type': 'input'},
            {'id': 2, 'type': 'bias'},
            {'id': 3, 'type': 'hidden'},
            {'id': 4, 'type': 'output'},
        ],
        'connections': [
            {'from': 0, 'to': 3, 'weight':  1.0, 'enabled': True,  'innovation': 0},
            {'from': 1, 'to': 3, 'weight': -1.0, 'enabled': True,  'innovation': 1},
            {'from': 2, 'to': 3, 'weight':  0.5, 'enabled': True,  'innovation': 2},
            {'from': 3, 'to': 4, 'weight':  2.0, 'enabled': True,  'innovation': 3},
            {'from': 0, 'to': 4, 'weight':  0.3, 'enabled': False, 'innovation': 4},
        ]
    }


def expected_hidden_output(x0, x1, bias=1.0):
    hidden = math.tanh(1.0 * x0 - 1.0 * x1 + 0.5 * bias)
    return math.tanh(2.0 * hidden)


# ============================================================================
# Test Evaluation
# ============================================================================

class TestEvaluate:
    """Test NetworkEvaluator.evaluate."""

    def test_single_connection(self, simple_genome_dict):
        network = NetworkEvaluator(Genome.from_dict(simple_genome_dict))
        outputs = network.evaluate([2.0])
        assert len(outputs) == 1
        assert outputs[0] == pytest.approx(math.tanh(1.0))
        assert outputs[0] == pytest.approx(0.7616, abs=1e-4)

    def test_hidden_node(self, hidden_genome_dict):
        network = NetworkEvaluator(Genome.from_dict(hidden_genome_dict))
        for x0, x1 in [(0.0, 0.0), (0.0, 1.0), (1.0, 0.0), (1.0, 1.0)]:
            assert network.evaluate([x0, x1])[0] == pytest.approx(expected_hidden_output(x0, x1))

    def test_bias_value(self, hidden_genome_dict):
        network = NetworkEvaluator(Genome.from_dict(hidden_genome_dict), bias_value=-2.0)
        assert network.evaluate([0.5, 0.25])[0] == pytest.approx(expected_hidden_output(0.5, 0.25, -2.0))

    def test_disabled_connections_are_ignored(self, simple_genome_dict):
        simple_genome_dict['connections'][0]['enabled'] = False
        network = NetworkEvaluator(Genome.from_dict(simple_genome_dict))
        assert network.evaluate([2.0]) == [0.0]

    def test_unconnected_output(self):
        network = NetworkEvaluator(Genome.create_minimal(2, 2))
        assert network.evaluate([1.0, 1.0]) == [0.0, 0.0]

    def test_outputs_in_ascending_id_order(self):
        genome = Genome.create_minimal(1, 2)   # input 0, bias 1, outputs 2 and 3
        genome.add_connection(0, 3, 1.0)
        genome.add_connection(0, 2, -1.0)
        outputs = NetworkEvaluator(genome).evaluate([0.5])
        assert outputs == pytest.approx([math.tanh(-0.5), math.tanh(0.5)])

    def test_inputs_in_ascending_id_order(self):
        genome = Genome.create_minimal(2, 1)   # inputs 0 and 1, bias 2, output 3
        genome.add_connection(1, 3, 1.0)
        assert NetworkEvaluator(genome).evaluate([0.0, 0.25])[0] == pytest.approx(math.tanh(0.25))

    def test_deterministic(self, hidden_genome_dict):
        network = NetworkEvaluator(Genome.from_dict(hidden_genome_dict))
        assert network.evaluate([0.3, -0.7]) == network.evaluate([0.3, -0.7])

    @pytest.mark.parametrize("inputs", [[], [1.0], [1.0, 2.0, 3.0]])
    def test_wrong_number_of_inputs(self, hidden_genome_dict, inputs):
        network = NetworkEvaluator(Genome.from_dict(hidden_genome_dict))
        with pytest.raises(ValueError, match="Expected 2 inputs"):
            network.evaluate(inputs)

    def test_snapshot_of_genome(self, simple_genome_dict):
        genome  = Genome.from_dict(simple_genome_dict)
        network = NetworkEvaluator(genome)
        genome.conn_genes[0].weight = 5.0
        Mutator.add_node(genome)
        assert network.evaluate([2.0])[0] == pytest.approx(math.tanh(1.0))
        assert network.number_nodes == 3


# ============================================================================
# Test Batch Evaluation
# ============================================================================

class TestEvaluateBatch:
    """Test NetworkEvaluator.evaluate_batch."""

    def test_matches_single_evaluation(self, hidden_genome_dict):
        network = NetworkEvaluator(Genome.from_dict(hidden_genome_dict))
        inputs  = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0], [0.3, -2.0]])

        outputs = network.evaluate_batch(inputs)

        assert outputs.shape == (5, 1)
        for row, expected in zip(inputs, outputs):
            assert network.evaluate(row.tolist()) == pytest.approx(expected.tolist())

    def test_one_dimensional_input(self, simple_genome_dict):
        network = NetworkEvaluator(Genome.from_dict(simple_genome_dict))
        outputs = network.evaluate_batch([2.0])
        assert outputs.shape == (1, 1)
        assert outputs[0, 0] == pytest.approx(math.tanh(1.0))

    def test_wrong_number_of_inputs(self, hidden_genome_dict):
        network = NetworkEvaluator(Genome.from_dict(hidden_genome_dict))
        with pytest.raises(ValueError, match="Expected 2 inputs"):
            network.evaluate_batch(np.zeros((4, 3)))

    def test_wrong_dimensions(self, hidden_genome_dict):
        network = NetworkEvaluator(Genome.from_dict(hidden_genome_dict))
        with pytest.raises(ValueError, match="1D or 2D"):
            network.evaluate_batch(np.zeros((2, 2, 2)))


# ============================================================================
# Test Evaluation Order and Cycles
# ============================================================================

class TestEvaluationOrder:
    """Test the topological ordering of nodes."""

    def test_sources_come_first(self, hidden_genome_dict):
        genome  = Genome.from_dict(hidden_genome_dict)
        network = NetworkEvaluator(genome)
        order   = network.evaluation_order

        assert sorted(order) == [0, 1, 2, 3, 4]
        position = {node_id: i for i, node_id in enumerate(order)}
        for conn in genome.enabled_connections:
            assert position[conn.node_in] < position[conn.node_out]

    def test_hidden_chain_declared_out_of_order(self):
        genome = Genome.from_dict({
            'nodes': [{'id': 0, 'type': 'input'},
                      {'id': 1, 'type': 'output'},
                      {'id': 7, 'type': 'hidden'},
                      {'id': 5, 'type': 'hidden'}],
            'connections': [{'from': 0, 'to': 7, 'weight': 1.0, 'innovation': 0},
                            {'from': 7, 'to': 5, 'weight': 1.0, 'innovation': 1},
                            {'from': 5, 'to': 1, 'weight': 1.0, 'innovation': 2}]
        })
        network = NetworkEvaluator(genome)
        assert network.evaluation_order == [0, 7, 5, 1]
        assert network.evaluate([0.5])[0] == pytest.approx(math.tanh(math.tanh(math.tanh(0.5))))

    def test_cycle_is_rejected(self):
        genome = Genome.from_dict({
            'nodes': [{'id': 0, 'type': 'input'},
                      {'id': 1, 'type': 'output'},
                      {'id': 2, 'type': 'hidden'},
                      {'id': 3, 'type': 'hidden'}],
            'connections': [{'from': 0, 'to': 2, 'weight': 1.0, 'innovation': 0},
                            {'from': 2, 'to': 3, 'weight': 1.0, 'innovation': 1},
                            {'from': 3, 'to': 2, 'weight': 1.0, 'innovation': 2},
                            {'from': 3, 'to': 1, 'weight': 1.0, 'innovation': 3}]
        })
        with pytest.raises(ValueError, match="cycle"):
            NetworkEvaluator(genome)

    def test_disabled_cycle_is_accepted(self):
        genome = Genome.from_dict({
            'nodes': [{'id': 0, 'type': 'input'},
                      {'id': 1, 'type': 'output'},
                      {'id': 2, 'type': 'hidden'}],
            'connections': [{'from': 0, 'to': 2, 'weight': 1.0, 'innovation': 0},
                            {'from': 2, 'to': 1, 'weight': 1.0, 'innovation': 1},
                            {'from': 1, 'to': 2, 'weight': 1.0, 'enabled': False, 'innovation': 2}]
        })
        NetworkEvaluator(genome)


# ============================================================================
# Test Properties
# ============================================================================

class TestProperties:
    """Test the introspection properties."""

    def test_counts(self, hidden_genome_dict):
        network = NetworkEvaluator(Genome.from_dict(hidden_genome_dict))
        assert network.num_inputs == 2
        assert network.num_outputs == 1
        assert network.number_nodes == 5
        assert network.number_nodes_hidden == 1
        assert network.number_connections_enabled == 4

    def test_repr(self, hidden_genome_dict):
        network = NetworkEvaluator(Genome.from_dict(hidden_genome_dict))
        assert repr(network) == "NetworkEvaluator(nodes=5, hidden=1, connections=4)"
