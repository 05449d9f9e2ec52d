"""
Exceptions raised by rsasim.

All of them are precondition violations detected at the start of the
offending operation. They subclass ValueError so callers that already
guard against bad inputs keep working.
"""


class RSASimError(ValueError):
    """Base class for rsasim errors."""


class InvalidClusterSpec(RSASimError):
    """Cluster target set is empty, out of range or matches no observation."""


class UnknownTargetId(RSASimError):
    """A target id has no entry in the target-to-label mapping."""

    def __init__(self, target_id, operation="assign_labels"):
        self.target_id = target_id
        self.operation = operation
        super().__init__(
            f"{operation}: target id {target_id} has no label in the mapping"
        )


class EmptyCategory(RSASimError):
    """A category has no observations when computing condition means."""

    def __init__(self, target_id, operation="mean_by_target"):
        self.target_id = target_id
        self.operation = operation
        super().__init__(f"{operation}: target id {target_id} has no observations")


class DimensionMismatch(RSASimError):
    """RDMs that must be compared or regressed have different shapes."""
