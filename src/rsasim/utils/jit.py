"""JIT compilation utilities for rsasim.

Provides conditional JIT compilation based on environment settings.
"""

import os

import numba
from numba import njit

# Check if Numba should be disabled
RSASIM_DISABLE_NUMBA = os.getenv("RSASIM_DISABLE_NUMBA", "False").lower() in (
    "true",
    "1",
    "yes",
)


def conditional_njit(*args, **kwargs):
    """Conditionally apply numba JIT compilation based on environment settings.

    If the RSASIM_DISABLE_NUMBA environment variable is set to 'true', '1'
    or 'yes', the original function is returned without JIT compilation.
    Otherwise numba.njit is applied with the given parameters.

    Parameters
    ----------
    *args
        Positional arguments passed to numba.njit. If a single function is
        passed, it will be decorated directly.
    **kwargs
        Keyword arguments passed to numba.njit (e.g., cache=True).

    Returns
    -------
    decorator or function
        If called with arguments: returns a decorator function.
        If called on a function directly: returns the (possibly JIT-compiled) function.

    Examples
    --------
    >>> @conditional_njit
    ... def fast_computation(x):
    ...     return x ** 2

    With numba parameters::

        @conditional_njit(cache=True)
        def cached_computation(x):
            return x ** 2
    """
    if RSASIM_DISABLE_NUMBA:

        def decorator(func):
            return func

        return decorator if not args else args[0]

    return njit(*args, **kwargs)


def is_jit_enabled():
    """Check if JIT compilation is enabled.

    Returns
    -------
    bool
        False when the RSASIM_DISABLE_NUMBA environment variable is set to
        'true', '1' or 'yes' (case insensitive), True otherwise.

    Notes
    -----
    JIT compilation speeds up the per-condition averaging and distance
    kernels but can get in the way when debugging. Set RSASIM_DISABLE_NUMBA
    before importing rsasim to run the pure Python versions.
    """
    return not RSASIM_DISABLE_NUMBA


def jit_info():
    """Return a short dict describing the JIT configuration."""
    return {
        "numba_version": numba.__version__,
        "disabled_by_environment": RSASIM_DISABLE_NUMBA,
        "jit_enabled": is_jit_enabled(),
    }
