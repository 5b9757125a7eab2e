"""
Shared fixtures for integration tests.
"""

import pytest
import numpy as np

from neatevo.run.config import Config


XOR_INPUTS  = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
XOR_OUTPUTS = np.array([[0.0], [1.0], [1.0], [0.0]])


@pytest.fixture
def xor_inputs():
    """XOR inputs in batch (numpy array) format."""
    return XOR_INPUTS


@pytest.fixture
def xor_outputs():
    """XOR expected outputs in batch (numpy array) format."""
    return XOR_OUTPUTS


@pytest.fixture
def xor_config():
    """A seeded configuration for a short XOR run."""
    config = Config()
    config.population_size        = 60
    config.num_inputs             = 2
    config.num_outputs            = 1
    config.seed                   = 42
    config.max_number_generations = 15
    return config
