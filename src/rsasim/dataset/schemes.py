"""
Cluster and clustering scheme definitions.

A ClusterSpec names a group of target ids that should look alike; a
ClusteringScheme is an ordered list of ClusterSpecs forming one hypothesis
about representational organization. The same types describe both the
structure injected into simulated data (ROI schemes, where sigma_level
matters) and the hypotheses turned into model RDMs (where it is ignored).
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Tuple

from ..errors import InvalidClusterSpec


@dataclass(frozen=True)
class ClusterSpec:
    """Group of target ids blended toward a shared pattern.

    Parameters
    ----------
    targets : tuple of int
        Target ids in the cluster, non-empty.
    sigma_level : float, default 0.0
        Similarity strength in [0, 1]. Ignored when building model RDMs.
    description : str
        Human-readable cluster name.
    """

    targets: Tuple[int, ...]
    sigma_level: float = 0.0
    description: str = ""

    def __post_init__(self):
        # Normalize lists/arrays to a hashable tuple of ints
        if any(t != int(t) for t in self.targets):
            raise InvalidClusterSpec(
                f"Cluster '{self.description}': target ids must be integers, "
                f"got {list(self.targets)}"
            )
        object.__setattr__(self, "targets", tuple(int(t) for t in self.targets))
        if len(self.targets) == 0:
            raise InvalidClusterSpec(
                f"Cluster '{self.description}' has an empty target set"
            )
        if not 0.0 <= self.sigma_level <= 1.0:
            raise InvalidClusterSpec(
                f"Cluster '{self.description}': sigma_level must be in [0, 1], "
                f"got {self.sigma_level}"
            )

    def check_range(self, n_categories, operation="cluster"):
        """Raise InvalidClusterSpec if any target id is outside 1..n_categories."""
        bad = [t for t in self.targets if t < 1 or t > n_categories]
        if bad:
            raise InvalidClusterSpec(
                f"{operation}: cluster '{self.description}' has target ids {bad} "
                f"outside 1..{n_categories}"
            )


@dataclass(frozen=True)
class ClusteringScheme:
    """Ordered sequence of ClusterSpecs applied or modeled together."""

    description: str
    clusters: Tuple[ClusterSpec, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "clusters", tuple(self.clusters))

    def __iter__(self):
        return iter(self.clusters)

    def __len__(self):
        return len(self.clusters)


TARGET_TO_LABEL = MappingProxyType(
    {
        1: "human face",
        2: "human body",
        3: "animal face",
        4: "animal body",
        5: "natural round",
        6: "natural spiky",
        7: "artificial round",
        8: "artificial spiky",
    }
)

# Inferotemporal cortex: categorical similarity. Humans and Animals are
# applied after Animate so they refine it into a hierarchy.
IT_SCHEME = ClusteringScheme(
    "IT",
    (
        ClusterSpec((1, 2, 3, 4), 0.7, "Animate"),
        ClusterSpec((1, 2), 0.2, "Humans"),
        ClusterSpec((3, 4), 0.2, "Animals"),
        ClusterSpec((5, 6), 0.7, "Natural"),
        ClusterSpec((7, 8), 0.6, "Artificial"),
    ),
)

# Primary visual cortex: perceptual (shape) similarity
V1_SCHEME = ClusteringScheme(
    "V1",
    (
        ClusterSpec((1, 3, 5, 7), 0.4, "Round"),
        ClusterSpec((2, 4, 6, 8), 0.4, "Spiky"),
    ),
)

ROI_SCHEMES = MappingProxyType({"IT": IT_SCHEME, "V1": V1_SCHEME})

MODEL_SCHEMES = (
    ClusteringScheme(
        "Animate vs. Inanimate",
        (
            ClusterSpec((1, 2, 3, 4), description="Animate"),
            ClusterSpec((5, 6, 7, 8), description="Inanimate"),
        ),
    ),
    ClusteringScheme(
        "Grouped Pairs",
        (
            ClusterSpec((1, 2), description="Humans"),
            ClusterSpec((3, 4), description="Animals"),
            ClusterSpec((5, 6), description="Natural Objects"),
            ClusterSpec((7, 8), description="Artificial Objects"),
        ),
    ),
    ClusteringScheme(
        "Round vs. Spiky",
        (
            ClusterSpec((2, 4, 6, 8), description="Even Categories"),
            ClusterSpec((1, 3, 5, 7), description="Odd Categories"),
        ),
    ),
)


def get_roi_scheme(roi):
    """Return the clustering scheme registered for a region of interest."""
    if isinstance(roi, ClusteringScheme):
        return roi
    if roi not in ROI_SCHEMES:
        raise ValueError(f"Unknown ROI '{roi}'. Must be one of {list(ROI_SCHEMES)}")
    return ROI_SCHEMES[roi]
