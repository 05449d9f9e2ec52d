"""
Categorical model RDMs built from clustering schemes.
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

import numpy as np

from ..dataset.schemes import ClusterSpec, ClusteringScheme, MODEL_SCHEMES

# Dissimilarity assigned to pairs in different clusters
BETWEEN_CLUSTER_DISSIMILARITY = 2.0


@dataclass(frozen=True, eq=False)
class ModelRDM:
    """Idealized RDM of one clustering scheme.

    Attributes
    ----------
    description : str
        Name of the scheme
    rdm : np.ndarray
        (C, C) matrix, 0 within clusters and on the diagonal, 2 elsewhere
    clusters : tuple of ClusterSpec
        Clusters the matrix was built from
    """

    description: str
    rdm: np.ndarray
    clusters: Tuple[ClusterSpec, ...]

    @property
    def n_categories(self):
        return self.rdm.shape[0]


def model_rdm_from_scheme(n_categories: int, scheme: ClusteringScheme) -> ModelRDM:
    """
    Build the model RDM of a single scheme.

    Every cell starts at 2 and is set to 0 for each pair of targets sharing
    at least one cluster. Pairs never grouped stay at 2. Cluster strengths
    are ignored.

    Raises
    ------
    InvalidClusterSpec
        If a cluster has target ids outside 1..n_categories.
    """
    dsm = np.full((n_categories, n_categories), BETWEEN_CLUSTER_DISSIMILARITY)
    for cluster in scheme:
        cluster.check_range(n_categories, operation="generate_model_rdms")
        idx = np.asarray(cluster.targets) - 1
        dsm[np.ix_(idx, idx)] = 0.0

    # Targets outside every cluster would otherwise keep 2 on the diagonal
    np.fill_diagonal(dsm, 0.0)
    dsm.setflags(write=False)

    return ModelRDM(scheme.description, dsm, tuple(scheme.clusters))


def generate_model_rdms(
    n_categories: int, schemes: Iterable[ClusteringScheme] = MODEL_SCHEMES
) -> List[ModelRDM]:
    """
    Generate one model RDM per clustering scheme.

    Parameters
    ----------
    n_categories : int
        Number of target categories C
    schemes : iterable of ClusteringScheme, default MODEL_SCHEMES
        Hypotheses to turn into model RDMs, in output order

    Returns
    -------
    list of ModelRDM

    Examples
    --------
    >>> rdms = generate_model_rdms(8)
    >>> [m.description for m in rdms]
    ['Animate vs. Inanimate', 'Grouped Pairs', 'Round vs. Spiky']
    >>> float(rdms[0].rdm[0, 3]), float(rdms[0].rdm[0, 4])
    (0.0, 2.0)
    """
    if n_categories < 1:
        raise ValueError(f"n_categories must be positive, got {n_categories}")
    return [model_rdm_from_scheme(n_categories, scheme) for scheme in schemes]
