"""Configuration for tests.

This module provides shared fixtures for the rsasim test suite. Fixtures
that build datasets return fresh objects because clustering modifies
samples in place.
"""

import numpy as np
import pytest

from rsasim.dataset import generate_base_dataset


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


@pytest.fixture
def base_dataset():
    """Eight categories, ten runs, 50 features, no injected structure."""
    return generate_base_dataset(8, n_subjects=1, n_runs=10, n_reps=1, sigma=0.6, seed=0, n_features=50)


@pytest.fixture
def large_dataset():
    """Eight categories with enough features for stable correlation RDMs."""
    return generate_base_dataset(8, n_runs=10, sigma=0.6, seed=1, n_features=200)


@pytest.fixture
def rng():
    """Seeded RandomState for reproducible injections."""
    return np.random.RandomState(42)
