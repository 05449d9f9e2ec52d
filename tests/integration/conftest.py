"""Fixtures for integration tests.

Full ROI analyses are run once per session and shared, since every test
only reads the results. Feature counts are large enough that correlation
RDMs reflect the injected clusters rather than sampling noise.
"""

import pytest

from rsasim.config import SimulationConfig
from rsasim.pipeline import run_roi_analysis

# Cache for analyses keyed by ROI
_analysis_cache = {}


@pytest.fixture(scope="session")
def integration_config():
    """Configuration shared by all integration analyses."""
    return SimulationConfig(seed=7, n_features=1000)


def _cached_analysis(config, roi):
    if roi not in _analysis_cache:
        _analysis_cache[roi] = run_roi_analysis(config.replace(roi=roi))
    return _analysis_cache[roi]


@pytest.fixture(scope="session")
def it_analysis(integration_config):
    """Full analysis of the IT scheme."""
    return _cached_analysis(integration_config, "IT")


@pytest.fixture(scope="session")
def v1_analysis(integration_config):
    """Full analysis of the V1 scheme."""
    return _cached_analysis(integration_config, "V1")
