"""Pytest configuration and shared fixtures."""

import pytest
import random
import sys
from pathlib import Path

# Add the source directory to the Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))


@pytest.fixture
def rng():
    """A seeded random number generator, for reproducible tests."""
    return random.Random(42)


@pytest.fixture
def registry():
    """A fresh innovation registry."""
    from neatevo.genotype import InnovationRegistry
    return InnovationRegistry()


@pytest.fixture
def minimal_genome(registry):
    """2 inputs, 1 bias and 1 output node; no connections."""
    from neatevo.genotype import Genome
    return Genome.create_minimal(2, 1, registry)
