"""
Synthetic dataset generation with controllable representational clusters.

The base generator produces independent condition patterns with noise;
clustering then blends chosen conditions toward shared patterns so that the
ground-truth similarity structure is known.
"""

from .base import (
    Dataset,
    SIZE_TO_N_FEATURES,
    generate_base_dataset,
)

from .schemes import (
    ClusterSpec,
    ClusteringScheme,
    TARGET_TO_LABEL,
    IT_SCHEME,
    V1_SCHEME,
    ROI_SCHEMES,
    MODEL_SCHEMES,
    get_roi_scheme,
)

from .clustering import (
    cluster_similar_classes,
    apply_clustering,
    assign_labels,
    generate_clustered_dataset,
)

__all__ = [
    # Data container
    "Dataset",
    "SIZE_TO_N_FEATURES",
    "generate_base_dataset",
    # Schemes
    "ClusterSpec",
    "ClusteringScheme",
    "TARGET_TO_LABEL",
    "IT_SCHEME",
    "V1_SCHEME",
    "ROI_SCHEMES",
    "MODEL_SCHEMES",
    "get_roi_scheme",
    # Clustering
    "cluster_similar_classes",
    "apply_clustering",
    "assign_labels",
    "generate_clustered_dataset",
]
