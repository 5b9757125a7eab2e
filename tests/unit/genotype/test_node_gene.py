"""
Unit tests for NodeGene class and NodeType enumeration.
"""

import pytest

from neatevo.genotype.node_gene import NodeGene, NodeType


# ============================================================================
# Test NodeType
# ============================================================================

class TestNodeType:
    """Test the NodeType enumeration."""

    def test_values(self):
        assert NodeType.INPUT.value  == "I"
        assert NodeType.HIDDEN.value == "H"
        assert NodeType.OUTPUT.value == "O"
        assert NodeType.BIAS.value   == "B"

    @pytest.mark.parametrize("node_type, expected", [
        (NodeType.INPUT,  True),
        (NodeType.BIAS,   True),
        (NodeType.HIDDEN, False),
        (NodeType.OUTPUT, False),
    ])
    def test_is_source_only(self, node_type, expected):
        assert node_type.is_source_only is expected


# ============================================================================
# Test NodeGene
# ============================================================================

class TestNodeGene:
    """Test NodeGene initialization, copying and representations."""

    def test_init(self):
        node = NodeGene(3, NodeType.HIDDEN)
        assert node.id == 3
        assert node.type == NodeType.HIDDEN

    def test_clone_is_equal_but_distinct(self):
        node  = NodeGene(5, NodeType.OUTPUT)
        clone = node.clone()
        assert clone == node
        assert clone is not node

    def test_equality_depends_on_id_and_type(self):
        assert NodeGene(1, NodeType.INPUT) == NodeGene(1, NodeType.INPUT)
        assert NodeGene(1, NodeType.INPUT) != NodeGene(2, NodeType.INPUT)
        assert NodeGene(1, NodeType.INPUT) != NodeGene(1, NodeType.BIAS)

    def test_equality_with_other_types(self):
        assert NodeGene(1, NodeType.INPUT) != 1

    def test_hashable(self):
        nodes = {NodeGene(1, NodeType.INPUT), NodeGene(1, NodeType.INPUT), NodeGene(2, NodeType.OUTPUT)}
        assert len(nodes) == 2

    def test_str(self):
        assert str(NodeGene(0, NodeType.INPUT)) == "[I0]"
        assert str(NodeGene(4, NodeType.HIDDEN)) == "[H4]"

    def test_repr(self):
        assert repr(NodeGene(7, NodeType.BIAS)) == "NodeGene(node_id=007, node_type=NodeType.BIAS)"
