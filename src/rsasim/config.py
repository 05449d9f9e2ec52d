"""
Simulation and analysis configuration.
"""

from dataclasses import dataclass, replace as dc_replace
from typing import Optional

from .dataset.base import SIZE_TO_N_FEATURES
from .dataset.schemes import ROI_SCHEMES
from .decoding import CLASSIFIERS, PARTITIONERS
from .rsa.core import VALID_METRICS
from .rsa.regression import REGRESSION_METHODS


@dataclass(frozen=True)
class SimulationConfig:
    """Parameters of one simulated ROI analysis.

    Defaults reproduce the tutorial setup: one subject, ten runs, eight
    categories and the IT clustering scheme.

    Parameters
    ----------
    n_categories : int, default 8
        Number of target categories
    n_subjects : int, default 1
        Number of simulated subjects
    n_runs : int, default 10
        Number of runs (chunks)
    n_reps : int, default 1
        Repetitions of each condition per run
    sigma : float, default 0.6
        Noise standard deviation of the base dataset
    seed : int, default 42
        Seed of the single random generator used by the simulation
    roi : str, default 'IT'
        Registered ROI whose clustering scheme is injected
    size : str, default 'normal'
        Feature count preset, see SIZE_TO_N_FEATURES
    n_features : int, optional
        Explicit number of features, overrides size
    metric : str, default 'correlation'
        Distance metric of the observed RDM
    center_data : bool, default True
        Center condition means before computing the observed RDM
    regression : str, default 'ols'
        RSA regression method ('ols', 'rank', 'nnls')
    classifier : str, default 'lda'
        Decoding classifier name
    partitioner : str, default 'nfold'
        Cross-validation scheme

    Examples
    --------
    >>> cfg = SimulationConfig()
    >>> cfg.replace(roi="V1").roi
    'V1'
    """

    n_categories: int = 8
    n_subjects: int = 1
    n_runs: int = 10
    n_reps: int = 1
    sigma: float = 0.6
    seed: int = 42
    roi: str = "IT"
    size: str = "normal"
    n_features: Optional[int] = None

    metric: str = "correlation"
    center_data: bool = True
    regression: str = "ols"

    classifier: str = "lda"
    partitioner: str = "nfold"

    def __post_init__(self):
        for name in ("n_categories", "n_subjects", "n_runs", "n_reps"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.sigma < 0:
            raise ValueError(f"sigma must be non-negative, got {self.sigma}")
        if self.n_features is not None and self.n_features < 1:
            raise ValueError(f"n_features must be positive, got {self.n_features}")

        choices = (
            ("roi", ROI_SCHEMES),
            ("size", SIZE_TO_N_FEATURES),
            ("metric", VALID_METRICS),
            ("regression", REGRESSION_METHODS),
            ("classifier", CLASSIFIERS),
            ("partitioner", PARTITIONERS),
        )
        for name, valid in choices:
            if getattr(self, name) not in valid:
                raise ValueError(
                    f"Unknown {name} '{getattr(self, name)}'. Must be one of {list(valid)}"
                )

    def replace(self, **changes):
        """Return a copy with the given fields changed (validated again)."""
        return dc_replace(self, **changes)
