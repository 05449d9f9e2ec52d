"""
Dataset container and base synthetic dataset generation.
"""

import logging

import numpy as np
from sklearn.utils import check_random_state

from ..errors import EmptyCategory
from ..rsa.core_jit import fast_average_patterns
from ..utils.jit import is_jit_enabled

logger = logging.getLogger(__name__)

# Number of features for each dataset size preset
SIZE_TO_N_FEATURES = {
    "tiny": 2,
    "small": 6,
    "normal": 30,
    "big": 300,
    "huge": 3000,
}


class Dataset(object):
    """
    Samples of a simulated multivariate response with sample attributes.

    Each row of ``samples`` is one observation (e.g. a beta pattern of one
    condition in one run), each column a feature (e.g. a voxel).

    Parameters
    ----------
    samples : array-like
        Sample matrix with shape (n_samples, n_features)
    targets : array-like
        Integer condition id for each sample, dense in 1..C
    chunks : array-like, optional
        Run id for each sample. Defaults to all ones.
    subjects : array-like, optional
        Subject id for each sample. Defaults to all ones.
    labels : array-like of str, optional
        Human-readable condition label for each sample

    Attributes
    ----------
    samples : np.ndarray
        Float sample matrix (n_samples, n_features)
    targets, chunks, subjects : np.ndarray
        Integer sample attributes of length n_samples
    labels : np.ndarray or None
        Object array of label strings, None until labels are assigned
    """

    def __init__(self, samples, targets, chunks=None, subjects=None, labels=None):
        samples = np.asarray(samples, dtype=float)
        if samples.ndim != 2:
            raise ValueError(
                f"samples must be a 2D array (n_samples, n_features), got shape {samples.shape}"
            )
        n_samples = samples.shape[0]

        targets = np.asarray(targets, dtype=int)
        chunks = np.ones(n_samples, dtype=int) if chunks is None else np.asarray(chunks, dtype=int)
        subjects = np.ones(n_samples, dtype=int) if subjects is None else np.asarray(subjects, dtype=int)

        for name, attr in (("targets", targets), ("chunks", chunks), ("subjects", subjects)):
            if attr.shape != (n_samples,):
                raise ValueError(
                    f"{name} must have one entry per sample ({n_samples}), got shape {attr.shape}"
                )

        self.samples = samples
        self.targets = targets
        self.chunks = chunks
        self.subjects = subjects
        self.labels = None
        if labels is not None:
            self.set_labels(labels)

    def __repr__(self):
        return (
            f"Dataset(n_samples={self.n_samples}, n_features={self.n_features}, "
            f"n_targets={self.n_targets}, labeled={self.labels is not None})"
        )

    @property
    def n_samples(self):
        return self.samples.shape[0]

    @property
    def n_features(self):
        return self.samples.shape[1]

    @property
    def n_targets(self):
        """Number of categories C, taken as the largest target id."""
        if self.n_samples == 0:
            return 0
        return int(self.targets.max())

    @property
    def unique_targets(self):
        return np.unique(self.targets)

    def set_labels(self, labels):
        labels = np.asarray(labels, dtype=object)
        if labels.shape != (self.n_samples,):
            raise ValueError(
                f"labels must have one entry per sample ({self.n_samples}), got shape {labels.shape}"
            )
        self.labels = labels

    def copy(self):
        """Return a deep copy of the dataset."""
        return Dataset(
            self.samples.copy(),
            self.targets.copy(),
            chunks=self.chunks.copy(),
            subjects=self.subjects.copy(),
            labels=None if self.labels is None else self.labels.copy(),
        )

    def select(self, mask):
        """Return a new dataset containing only the samples where mask is True."""
        mask = np.asarray(mask)
        return Dataset(
            self.samples[mask],
            self.targets[mask],
            chunks=self.chunks[mask],
            subjects=self.subjects[mask],
            labels=None if self.labels is None else self.labels[mask],
        )

    def label_for_target(self, target_id):
        """Return the label of the first sample with the given target id."""
        if self.labels is None:
            return target_id
        idx = np.flatnonzero(self.targets == target_id)
        if len(idx) == 0:
            raise EmptyCategory(target_id, operation="label_for_target")
        return self.labels[idx[0]]

    def mean_by_target(self, n_categories=None):
        """
        Average samples over all observations sharing a target id.

        Parameters
        ----------
        n_categories : int, optional
            Number of categories C. Defaults to the largest target id.

        Returns
        -------
        Dataset
            One sample per target id 1..C, in ascending order, with labels
            carried over when present.

        Raises
        ------
        EmptyCategory
            If any target id in 1..C has no observations.
        """
        if n_categories is None:
            n_categories = self.n_targets
        target_ids = np.arange(1, n_categories + 1)

        if is_jit_enabled():
            patterns, counts = fast_average_patterns(
                self.samples, self.targets, target_ids
            )
        else:
            patterns = np.zeros((n_categories, self.n_features))
            counts = np.zeros(n_categories, dtype=int)
            for i, target in enumerate(target_ids):
                mask = self.targets == target
                counts[i] = np.sum(mask)
                if counts[i] > 0:
                    patterns[i] = np.mean(self.samples[mask], axis=0)

        empty = np.flatnonzero(counts == 0)
        if len(empty) > 0:
            raise EmptyCategory(int(target_ids[empty[0]]))

        labels = None
        if self.labels is not None:
            labels = [self.label_for_target(t) for t in target_ids]

        return Dataset(patterns, target_ids, labels=labels)


def generate_base_dataset(
    n_categories,
    n_subjects=1,
    n_runs=10,
    n_reps=1,
    sigma=0.6,
    seed=None,
    size="normal",
    n_features=None,
):
    """
    Generate a synthetic dataset with independent condition patterns.

    Every condition gets its own random mean pattern (standard normal per
    feature, drawn once per subject); each observation is that pattern plus
    independent Gaussian noise. Categories therefore carry no shared
    structure until clusters are injected.

    Parameters
    ----------
    n_categories : int
        Number of target categories C. Targets are numbered 1..C.
    n_subjects : int, default 1
        Number of simulated subjects
    n_runs : int, default 10
        Number of runs (chunks) per subject
    n_reps : int, default 1
        Repetitions of every condition within each run
    sigma : float, default 0.6
        Standard deviation of the observation noise
    seed : int, RandomState or None
        Random seed for reproducibility
    size : str, default 'normal'
        Feature count preset: 'tiny', 'small', 'normal', 'big' or 'huge'.
        Ignored when n_features is given.
    n_features : int, optional
        Explicit number of features

    Returns
    -------
    Dataset
        Observations ordered by subject, run, repetition, then target.

    Examples
    --------
    >>> ds = generate_base_dataset(8, n_runs=10, seed=42)
    >>> ds.samples.shape
    (80, 30)
    """
    if n_categories < 1:
        raise ValueError(f"n_categories must be positive, got {n_categories}")
    for name, value in (("n_subjects", n_subjects), ("n_runs", n_runs), ("n_reps", n_reps)):
        if value < 1:
            raise ValueError(f"{name} must be positive, got {value}")
    if sigma < 0:
        raise ValueError(f"sigma must be non-negative, got {sigma}")

    if n_features is None:
        if size not in SIZE_TO_N_FEATURES:
            raise ValueError(
                f"Unknown size '{size}'. Must be one of {list(SIZE_TO_N_FEATURES)}"
            )
        n_features = SIZE_TO_N_FEATURES[size]
    elif n_features < 1:
        raise ValueError(f"n_features must be positive, got {n_features}")

    rng = check_random_state(seed)

    block_targets = np.arange(1, n_categories + 1)
    samples, targets, chunks, subjects = [], [], [], []
    for subj in range(1, n_subjects + 1):
        class_patterns = rng.standard_normal((n_categories, n_features))
        for run in range(1, n_runs + 1):
            for _ in range(n_reps):
                noise = sigma * rng.standard_normal((n_categories, n_features))
                samples.append(class_patterns + noise)
                targets.append(block_targets)
                chunks.append(np.full(n_categories, run))
                subjects.append(np.full(n_categories, subj))

    ds = Dataset(
        np.vstack(samples),
        np.concatenate(targets),
        chunks=np.concatenate(chunks),
        subjects=np.concatenate(subjects),
    )
    logger.debug(
        f"Generated base dataset: {ds.n_samples} samples x {ds.n_features} features, "
        f"{n_categories} targets, {n_runs} runs, {n_subjects} subjects"
    )
    return ds
