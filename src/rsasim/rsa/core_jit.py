"""JIT-compiled core functions for RSA.

These functions provide optimized implementations of the per-condition
averaging and distance loops used when building RDMs.
"""

import numpy as np
from ..utils.jit import conditional_njit


@conditional_njit
def fast_average_patterns(samples, targets, unique_targets):
    """
    Fast averaging of samples within conditions.

    Parameters
    ----------
    samples : np.ndarray
        Sample matrix of shape (n_samples, n_features)
    targets : np.ndarray
        Target id for each sample
    unique_targets : np.ndarray
        Target ids to average over, in output order

    Returns
    -------
    patterns : np.ndarray
        Averaged patterns (n_conditions, n_features). Rows of conditions
        without samples are left at zero.
    counts : np.ndarray
        Number of samples averaged into each row
    """
    n_samples, n_features = samples.shape
    n_conditions = len(unique_targets)
    patterns = np.zeros((n_conditions, n_features))
    counts = np.zeros(n_conditions, dtype=np.int64)

    for c in range(n_conditions):
        target = unique_targets[c]
        for t in range(n_samples):
            if targets[t] == target:
                for k in range(n_features):
                    patterns[c, k] += samples[t, k]
                counts[c] += 1
        if counts[c] > 0:
            for k in range(n_features):
                patterns[c, k] /= counts[c]

    return patterns, counts


@conditional_njit
def fast_euclidean_distance(patterns):
    """
    Fast computation of Euclidean distance matrix.

    Parameters
    ----------
    patterns : np.ndarray
        Pattern matrix of shape (n_items, n_features)

    Returns
    -------
    rdm : np.ndarray
        Euclidean distance matrix (n_items, n_items)
    """
    n_items, n_features = patterns.shape
    rdm = np.zeros((n_items, n_items))

    for i in range(n_items):
        for j in range(i + 1, n_items):
            dist = 0.0
            for k in range(n_features):
                diff = patterns[i, k] - patterns[j, k]
                dist += diff * diff
            dist = np.sqrt(dist)
            rdm[i, j] = dist
            rdm[j, i] = dist

    return rdm


@conditional_njit
def fast_manhattan_distance(patterns):
    """
    Fast computation of Manhattan distance matrix using explicit loops.

    Parameters
    ----------
    patterns : np.ndarray
        Pattern matrix of shape (n_items, n_features)

    Returns
    -------
    rdm : np.ndarray
        Manhattan distance matrix (n_items, n_items)
    """
    n_items, n_features = patterns.shape
    rdm = np.zeros((n_items, n_items))

    for i in range(n_items):
        for j in range(i + 1, n_items):
            dist = 0.0
            for k in range(n_features):
                dist += abs(patterns[i, k] - patterns[j, k])
            rdm[i, j] = dist
            rdm[j, i] = dist

    return rdm
