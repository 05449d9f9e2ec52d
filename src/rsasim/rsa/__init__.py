"""
Representational Similarity Analysis (RSA) for rsasim.

This module provides tools for computing observed and model
representational dissimilarity matrices (RDMs) and for regressing
observed RDMs onto model RDMs.
"""

from .core import (
    compute_rdm,
    compute_observed_rdm,
    compare_rdms,
    rdm_to_vector,
)

from .models import (
    ModelRDM,
    generate_model_rdms,
    model_rdm_from_scheme,
)

from .regression import (
    RegressionResult,
    fit_regression,
    rsa_regression,
)

__all__ = [
    # Core functions
    "compute_rdm",
    "compute_observed_rdm",
    "compare_rdms",
    "rdm_to_vector",
    # Model RDMs
    "ModelRDM",
    "generate_model_rdms",
    "model_rdm_from_scheme",
    # Regression
    "RegressionResult",
    "fit_regression",
    "rsa_regression",
]
