"""
rsasim - simulated datasets for Representational Similarity Analysis

Generate multivariate response datasets with known, deliberately injected
similarity structure and check how well model RDMs recover it.
"""

__version__ = "0.1.0"

# Core modules
from . import errors
from . import utils
from . import rsa
from . import dataset
from . import decoding
from . import config
from . import pipeline

# Key classes
from .dataset import Dataset, ClusterSpec, ClusteringScheme
from .rsa import ModelRDM, RegressionResult
from .config import SimulationConfig
from .pipeline import RSAAnalysisResult

from .errors import (
    RSASimError,
    InvalidClusterSpec,
    UnknownTargetId,
    EmptyCategory,
    DimensionMismatch,
)

# Dataset generation
from .dataset import (
    generate_base_dataset,
    cluster_similar_classes,
    apply_clustering,
    assign_labels,
    generate_clustered_dataset,
)

# RSA
from .rsa import (
    compute_rdm,
    compute_observed_rdm,
    compare_rdms,
    generate_model_rdms,
    fit_regression,
    rsa_regression,
)

# Decoding and pipeline
from .decoding import classify_and_cross_validate
from .pipeline import run_roi_analysis, run_all_rois

__all__ = [
    # Version
    "__version__",
    # Modules
    "errors",
    "utils",
    "rsa",
    "dataset",
    "decoding",
    "config",
    "pipeline",
    # Core classes
    "Dataset",
    "ClusterSpec",
    "ClusteringScheme",
    "ModelRDM",
    "RegressionResult",
    "SimulationConfig",
    "RSAAnalysisResult",
    # Errors
    "RSASimError",
    "InvalidClusterSpec",
    "UnknownTargetId",
    "EmptyCategory",
    "DimensionMismatch",
    # Dataset generation
    "generate_base_dataset",
    "cluster_similar_classes",
    "apply_clustering",
    "assign_labels",
    "generate_clustered_dataset",
    # RSA
    "compute_rdm",
    "compute_observed_rdm",
    "compare_rdms",
    "generate_model_rdms",
    "fit_regression",
    "rsa_regression",
    # Decoding and pipeline
    "classify_and_cross_validate",
    "run_roi_analysis",
    "run_all_rois",
]
