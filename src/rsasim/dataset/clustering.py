"""
Injection of representational clusters into synthetic datasets.
"""

import logging
from typing import Iterable, List, Mapping, Optional, Tuple, Union

import numpy as np
from sklearn.utils import check_random_state

from ..errors import InvalidClusterSpec, UnknownTargetId
from .base import Dataset, generate_base_dataset
from .schemes import ClusterSpec, ClusteringScheme, TARGET_TO_LABEL, get_roi_scheme

logger = logging.getLogger(__name__)


def cluster_similar_classes(
    dataset: Dataset,
    target_labels: Iterable[int],
    sigma_level: float,
    random_state=None,
) -> Dataset:
    """
    Make a group of classes more similar by blending them with a common pattern.

    A random subset of round(sigma_level * n_features) features is chosen and a
    shared pattern is drawn on those features, scaled to the global standard
    deviation of the current samples. Every observation whose target is in
    ``target_labels`` is replaced by
    ``(1 - sigma_level) * sample + sigma_level * pattern``.

    Parameters
    ----------
    dataset : Dataset
        Dataset to modify. Samples are changed in place.
    target_labels : iterable of int
        Target ids of the classes to cluster, subset of 1..C
    sigma_level : float
        Similarity strength in [0, 1]. 0 leaves the dataset untouched, 1
        replaces the selected features by the pattern and zeroes the rest.
    random_state : int, RandomState or None
        Source of randomness. Pass the same RandomState across calls to keep
        a sequence of injections reproducible.

    Returns
    -------
    Dataset
        The same dataset object, with affected samples updated.

    Raises
    ------
    InvalidClusterSpec
        If the target set is empty, holds non-integral ids or ids outside
        1..C, if sigma_level is outside [0, 1], or if no observation matches
        the target set.
    """
    target_labels = np.atleast_1d(np.asarray(list(target_labels), dtype=float))
    if not np.all(target_labels == np.round(target_labels)):
        raise InvalidClusterSpec(
            f"cluster_similar_classes: target ids must be integers, got {target_labels.tolist()}"
        )
    target_labels = target_labels.astype(int)
    if target_labels.size == 0:
        raise InvalidClusterSpec("cluster_similar_classes: empty target set")

    n_categories = dataset.n_targets
    out_of_range = target_labels[(target_labels < 1) | (target_labels > n_categories)]
    if out_of_range.size > 0:
        raise InvalidClusterSpec(
            f"cluster_similar_classes: target ids {out_of_range.tolist()} "
            f"outside 1..{n_categories}"
        )
    if not 0.0 <= sigma_level <= 1.0:
        raise InvalidClusterSpec(
            f"cluster_similar_classes: sigma_level must be in [0, 1], got {sigma_level}"
        )

    target_idx = np.isin(dataset.targets, target_labels)
    if not np.any(target_idx):
        raise InvalidClusterSpec(
            f"cluster_similar_classes: no observations found for target ids "
            f"{target_labels.tolist()}"
        )

    if sigma_level == 0:
        return dataset

    rng = check_random_state(random_state)
    n_features = dataset.n_features
    n_modify = int(round(sigma_level * n_features))

    cols_to_modify = rng.permutation(n_features)[:n_modify]

    # Scale the pattern to the spread of the data it is mixed into. A single
    # value has no spread, so the pattern is then zero.
    if dataset.samples.size > 1:
        pattern_magnitude = np.std(dataset.samples, ddof=1)
    else:
        pattern_magnitude = 0.0
    pattern = rng.standard_normal(n_features) * pattern_magnitude

    mask = np.zeros(n_features, dtype=bool)
    mask[cols_to_modify] = True
    pattern[~mask] = 0.0

    dataset.samples[target_idx] = (
        (1 - sigma_level) * dataset.samples[target_idx] + sigma_level * pattern
    )
    logger.debug(
        f"Blended {np.sum(target_idx)} samples of targets {target_labels.tolist()} "
        f"with a shared pattern on {n_modify}/{n_features} features"
    )

    return dataset


def apply_clustering(
    dataset: Dataset,
    clusters: Union[ClusteringScheme, Iterable[ClusterSpec]],
    random_state=None,
) -> Dataset:
    """
    Apply a sequence of cluster injections to a dataset.

    Clusters are applied strictly in the given order; later clusters act on
    the values left by earlier ones, so a narrow cluster following a broad
    one produces nested similarity.

    Parameters
    ----------
    dataset : Dataset
        Dataset to modify in place
    clusters : ClusteringScheme or iterable of ClusterSpec
        Clusters to apply, in order
    random_state : int, RandomState or None
        Shared by all injections

    Returns
    -------
    Dataset
        The modified dataset
    """
    rng = check_random_state(random_state)
    for cluster in clusters:
        dataset = cluster_similar_classes(
            dataset, cluster.targets, cluster.sigma_level, random_state=rng
        )
    return dataset


def assign_labels(
    dataset: Dataset, target_to_label: Mapping[int, str] = TARGET_TO_LABEL
) -> Dataset:
    """Attach a label to every sample by mapping its target id.

    Raises
    ------
    UnknownTargetId
        If a target id present in the dataset has no mapping entry.
    """
    for target in dataset.unique_targets:
        if int(target) not in target_to_label:
            raise UnknownTargetId(int(target))
    dataset.set_labels([target_to_label[int(t)] for t in dataset.targets])
    return dataset


def _independent_streams(seed):
    """Generators for the base dataset and for the cluster injections.

    An integer seed (or None) seeds each stream separately, so the injected
    features and patterns do not depend on how many numbers the base dataset
    drew. A RandomState instance is shared by both steps.
    """
    if isinstance(seed, np.random.RandomState):
        return seed, seed
    return np.random.RandomState(seed), np.random.RandomState(seed)


def generate_clustered_dataset(
    n_categories: int,
    n_subjects: int,
    n_runs: int,
    n_reps: int,
    sigma: float,
    seed,
    roi: Union[str, ClusteringScheme],
    size: str = "normal",
    n_features: Optional[int] = None,
    target_to_label: Mapping[int, str] = TARGET_TO_LABEL,
    logger: Optional[logging.Logger] = None,
) -> Tuple[Dataset, List[ClusterSpec]]:
    """
    Generate a synthetic dataset with the clustering scheme of a region of interest.

    Parameters
    ----------
    n_categories : int
        Number of target categories
    n_subjects : int
        Number of subjects
    n_runs : int
        Number of simulated runs (chunks)
    n_reps : int
        Number of repetitions per condition and run
    sigma : float
        Noise standard deviation of the base dataset
    seed : int, RandomState or None
        An integer seeds two separate generators, one for the base dataset
        and one shared by all cluster injections in scheme order. A
        RandomState is used for both steps in turn.
    roi : str or ClusteringScheme
        Registered ROI name ('IT', 'V1') or an explicit scheme
    size : str, default 'normal'
        Feature count preset of the base dataset
    n_features : int, optional
        Explicit number of features, overrides ``size``
    target_to_label : mapping, default TARGET_TO_LABEL
        Target id to label string
    logger : logging.Logger, optional
        Logger for the applied cluster summary

    Returns
    -------
    dataset : Dataset
        Clustered, labeled dataset
    clusters : list of ClusterSpec
        Clusters applied, in application order

    Examples
    --------
    >>> ds, clusters = generate_clustered_dataset(8, 1, 10, 1, 0.6, 42, "IT")
    >>> [c.description for c in clusters]
    ['Animate', 'Humans', 'Animals', 'Natural', 'Artificial']
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    scheme = get_roi_scheme(roi)
    for cluster in scheme:
        cluster.check_range(n_categories, operation="generate_clustered_dataset")

    base_rng, cluster_rng = _independent_streams(seed)
    dataset = generate_base_dataset(
        n_categories,
        n_subjects=n_subjects,
        n_runs=n_runs,
        n_reps=n_reps,
        sigma=sigma,
        seed=base_rng,
        size=size,
        n_features=n_features,
    )
    dataset = apply_clustering(dataset, scheme, random_state=cluster_rng)

    logger.info(f"Generated dataset for '{scheme.description}' with the following clusters:")
    for i, cluster in enumerate(scheme.clusters, start=1):
        logger.info(
            f"Cluster {i}: {cluster.description} | targets {list(cluster.targets)} "
            f"| sigma level {cluster.sigma_level:.2f}"
        )

    dataset = assign_labels(dataset, target_to_label)
    return dataset, list(scheme.clusters)
