"""
Pytest configuration and fixtures for reproducible testing.

This file provides centralized test configuration including:
- Random seed management for reproducibility
- A non-interactive matplotlib backend
- Shared synthetic DrawSet fixtures
"""
import matplotlib
matplotlib.use('Agg')

import pytest
import numpy as np

from bda_demos.draws import DrawSet


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: runs the PyMC sampler")


@pytest.fixture(scope="session", autouse=True)
def set_random_seeds():
    """Set the global NumPy seed once per session for reproducibility."""
    np.random.seed(42)
    yield


@pytest.fixture
def rng():
    """Fresh, seeded generator for each test."""
    return np.random.default_rng(42)


@pytest.fixture
def theta_draws():
    """2 chains x 4 draws of theta, identical chains."""
    return DrawSet({'theta': np.array([[0.1, 0.2, 0.3, 0.4],
                                       [0.1, 0.2, 0.3, 0.4]])})


@pytest.fixture
def mixed_draws(rng):
    """4 well-mixed chains x 1000 draws: scalar mu and 3-vector beta."""
    return DrawSet({
        'mu': rng.normal(0.0, 1.0, size=(4, 1000)),
        'beta': rng.normal(2.0, 0.5, size=(4, 1000, 3)),
    })
