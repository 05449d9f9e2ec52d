"""
Utility functions for rsasim.
"""

from .jit import (
    conditional_njit,
    is_jit_enabled,
    jit_info,
)

__all__ = [
    "conditional_njit",
    "is_jit_enabled",
    "jit_info",
]
