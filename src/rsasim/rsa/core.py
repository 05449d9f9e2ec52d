"""
Core RSA functions for computing and comparing RDMs.
"""
from __future__ import annotations

import logging
import warnings
from typing import Optional, Tuple, TYPE_CHECKING

import numpy as np
from scipy import stats
from scipy.spatial.distance import pdist, squareform

from ..errors import DimensionMismatch
from ..utils.jit import is_jit_enabled
from .core_jit import fast_euclidean_distance, fast_manhattan_distance

if TYPE_CHECKING:
    from ..dataset import Dataset

VALID_METRICS = ["correlation", "euclidean", "cosine", "manhattan"]


def compute_rdm(
    patterns: np.ndarray,
    metric: str = "correlation",
    logger: Optional[logging.Logger] = None,
) -> np.ndarray:
    """
    Compute representational dissimilarity matrix from patterns.

    Parameters
    ----------
    patterns : np.ndarray
        Pattern matrix of shape (n_items, n_features).
        Each row is a pattern/item, each column is a feature
    metric : str, default 'correlation'
        Distance metric: 'correlation' (1 - Pearson r), 'euclidean',
        'cosine', 'manhattan'
    logger : logging.Logger, optional
        Logger instance for debugging

    Returns
    -------
    rdm : np.ndarray
        Representational dissimilarity matrix (n_items, n_items)

    Raises
    ------
    ValueError
        If metric is not one of the supported options.
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if metric not in VALID_METRICS:
        raise ValueError(f"Invalid metric '{metric}'. Must be one of {VALID_METRICS}")

    patterns = np.asarray(patterns, dtype=float)
    if patterns.ndim != 2:
        raise ValueError(
            f"patterns must be a 2D array (n_items, n_features), got shape {patterns.shape}"
        )

    if is_jit_enabled() and metric in ["euclidean", "manhattan"]:
        # Use JIT only for euclidean and manhattan where it's simpler
        if metric == "euclidean":
            rdm = fast_euclidean_distance(patterns)
        else:
            rdm = fast_manhattan_distance(patterns)
    else:
        scipy_metric = "cityblock" if metric == "manhattan" else metric
        rdm = squareform(pdist(patterns, metric=scipy_metric))

    # Ensure diagonal is zero
    np.fill_diagonal(rdm, 0)

    # Ensure no negative values due to numerical errors
    rdm = np.maximum(rdm, 0)

    if np.any(np.isnan(rdm)) or np.any(np.isinf(rdm)):
        warnings.warn(
            "RDM contains NaN or infinite values. This may indicate "
            "constant patterns or numerical instability.",
            RuntimeWarning,
        )

    logger.debug(f"Computed {rdm.shape[0]}x{rdm.shape[0]} RDM with metric '{metric}'")
    return rdm


def rdm_to_vector(rdm: np.ndarray) -> np.ndarray:
    """Flatten the upper triangle of a square RDM, excluding the diagonal.

    The ordering matches scipy.spatial.distance.squareform.
    """
    rdm = np.asarray(rdm)
    if rdm.ndim != 2 or rdm.shape[0] != rdm.shape[1]:
        raise DimensionMismatch(f"RDM must be a square matrix, got shape {rdm.shape}")
    return rdm[np.triu_indices(rdm.shape[0], k=1)]


def compute_observed_rdm(
    dataset: "Dataset",
    metric: str = "correlation",
    center_data: bool = True,
    n_categories: Optional[int] = None,
    logger: Optional[logging.Logger] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute the empirical RDM between condition-averaged patterns.

    Samples are averaged over all observations of each target id (usually
    repetitions across runs); the resulting patterns are optionally centered
    and compared pairwise.

    Parameters
    ----------
    dataset : Dataset
        Dataset with one or more samples per target id
    metric : str, default 'correlation'
        Distance metric, see compute_rdm
    center_data : bool, default True
        Subtract the mean across conditions from every feature before
        computing distances
    n_categories : int, optional
        Number of categories C. Defaults to the largest target id.
    logger : logging.Logger, optional
        Logger for debugging messages

    Returns
    -------
    rdm : np.ndarray
        Symmetric (C, C) dissimilarity matrix with zero diagonal
    labels : np.ndarray
        Condition labels in RDM row order: label strings when the dataset is
        labeled, target ids otherwise

    Raises
    ------
    EmptyCategory
        If a target id in 1..C has no observations.
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    mean_ds = dataset.mean_by_target(n_categories=n_categories)
    patterns = mean_ds.samples
    if center_data:
        patterns = patterns - patterns.mean(axis=0, keepdims=True)

    rdm = compute_rdm(patterns, metric=metric, logger=logger)

    if mean_ds.labels is not None:
        labels = mean_ds.labels
    else:
        labels = mean_ds.targets

    return rdm, labels


def compare_rdms(rdm1: np.ndarray, rdm2: np.ndarray, method: str = "spearman") -> float:
    """
    Compare two representational dissimilarity matrices.

    Only the upper triangular portion (excluding diagonal) is compared since
    RDMs are symmetric.

    Parameters
    ----------
    rdm1 : np.ndarray
        First RDM, square symmetric matrix of shape (n_items, n_items).
    rdm2 : np.ndarray
        Second RDM, must have the same shape as rdm1.
    method : str, default 'spearman'
        Comparison method:
        - 'spearman': Spearman rank correlation
        - 'pearson': Pearson correlation
        - 'kendall': Kendall's tau
        - 'cosine': Cosine similarity

    Returns
    -------
    float
        Similarity score between RDMs. NaN if it cannot be computed
        (e.g. constant RDMs).

    Raises
    ------
    DimensionMismatch
        If RDMs have different shapes.
    ValueError
        If method is not one of the supported options.

    Examples
    --------
    >>> rdm1 = np.array([[0, 0.5, 0.8], [0.5, 0, 0.3], [0.8, 0.3, 0]])
    >>> rdm2 = np.array([[0, 0.6, 0.7], [0.6, 0, 0.4], [0.7, 0.4, 0]])
    >>> print(f"{compare_rdms(rdm1, rdm2, method='spearman'):.3f}")
    1.000
    """
    rdm1 = np.asarray(rdm1, dtype=float)
    rdm2 = np.asarray(rdm2, dtype=float)
    if rdm1.shape != rdm2.shape:
        raise DimensionMismatch(
            f"RDMs must have the same shape. Got {rdm1.shape} and {rdm2.shape}"
        )

    rdm1_vec = rdm_to_vector(rdm1)
    rdm2_vec = rdm_to_vector(rdm2)

    if np.any(np.isnan(rdm1_vec)) or np.any(np.isnan(rdm2_vec)):
        warnings.warn("RDMs contain NaN values. Correlation may return NaN.", RuntimeWarning)

    if method == "spearman":
        similarity, _ = stats.spearmanr(rdm1_vec, rdm2_vec)
    elif method == "pearson":
        similarity, _ = stats.pearsonr(rdm1_vec, rdm2_vec)
    elif method == "kendall":
        similarity, _ = stats.kendalltau(rdm1_vec, rdm2_vec)
    elif method == "cosine":
        norm1 = np.linalg.norm(rdm1_vec)
        norm2 = np.linalg.norm(rdm2_vec)
        if norm1 == 0 or norm2 == 0:
            warnings.warn(
                "One or both RDMs have zero norm. "
                "Cosine similarity is undefined, returning NaN.",
                RuntimeWarning,
            )
            similarity = np.nan
        else:
            similarity = np.dot(rdm1_vec, rdm2_vec) / (norm1 * norm2)
    else:
        raise ValueError(f"Unknown comparison method: {method}")

    return float(similarity)
