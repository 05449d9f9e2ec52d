"""
Regression of an observed RDM onto a set of model RDMs.
"""

import logging
import warnings
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple, Union

import numpy as np
from scipy import stats
from scipy.optimize import nnls

from ..errors import DimensionMismatch
from .core import rdm_to_vector
from .models import ModelRDM

REGRESSION_METHODS = ["ols", "rank", "nnls"]


@dataclass(frozen=True, eq=False)
class RegressionResult:
    """Per-model coefficients of an RSA regression, in input model order."""

    coefficients: np.ndarray
    descriptions: Tuple[str, ...]
    method: str

    def as_dict(self) -> Dict[str, float]:
        return {d: float(c) for d, c in zip(self.descriptions, self.coefficients)}

    def best_model(self) -> str:
        """Description of the model with the largest coefficient."""
        return self.descriptions[int(np.argmax(self.coefficients))]


def _standardize(x: np.ndarray, name: str) -> np.ndarray:
    std = np.std(x)
    if std == 0:
        warnings.warn(
            f"{name} is constant and cannot be standardized; its coefficient is set to 0",
            RuntimeWarning,
        )
        return np.zeros_like(x, dtype=float)
    return stats.zscore(x)


def fit_regression(
    response: np.ndarray,
    regressors: np.ndarray,
    method: str = "ols",
    regressor_names: Optional[Sequence[str]] = None,
) -> np.ndarray:
    """
    Fit a response vector as a linear combination of regressors.

    Response and regressors are z-scored before fitting, so coefficients are
    standardized betas and no intercept is needed.

    Parameters
    ----------
    response : np.ndarray
        Response vector of shape (n_observations,)
    regressors : np.ndarray
        Design matrix of shape (n_observations, n_regressors)
    method : str, default 'ols'
        - 'ols': ordinary least squares
        - 'rank': rank-transform all vectors, then least squares
        - 'nnls': non-negative least squares
    regressor_names : sequence of str, optional
        Names used in warnings about constant regressors

    Returns
    -------
    np.ndarray
        One coefficient per regressor. Constant regressors get 0.

    Raises
    ------
    DimensionMismatch
        If the number of rows of regressors differs from the response length.
    ValueError
        If method is not one of the supported options.
    """
    if method not in REGRESSION_METHODS:
        raise ValueError(
            f"Unknown regression method '{method}'. Must be one of {REGRESSION_METHODS}"
        )

    response = np.asarray(response, dtype=float)
    regressors = np.asarray(regressors, dtype=float)
    if regressors.ndim == 1:
        regressors = regressors[:, None]
    if regressors.shape[0] != response.shape[0]:
        raise DimensionMismatch(
            f"fit_regression: regressors have {regressors.shape[0]} rows, "
            f"response has {response.shape[0]} entries"
        )

    n_regressors = regressors.shape[1]
    if regressor_names is None:
        regressor_names = [f"regressor {i + 1}" for i in range(n_regressors)]

    if method == "rank":
        response = stats.rankdata(response)
        regressors = np.column_stack(
            [stats.rankdata(regressors[:, i]) for i in range(n_regressors)]
        )

    y = _standardize(response, "response")
    X = np.column_stack(
        [_standardize(regressors[:, i], regressor_names[i]) for i in range(n_regressors)]
    )

    if method == "nnls":
        coefficients, _ = nnls(X, y)
    else:
        coefficients, _, _, _ = np.linalg.lstsq(X, y, rcond=None)

    return coefficients


def rsa_regression(
    observed_rdm: np.ndarray,
    model_rdms: Sequence[Union[ModelRDM, np.ndarray]],
    method: str = "ols",
    logger: Optional[logging.Logger] = None,
) -> RegressionResult:
    """
    Regress an observed RDM onto model RDMs.

    The upper triangles (diagonal excluded) of all matrices are flattened;
    model vectors are stacked as regressors and the observed vector is the
    response. Coefficients are a linear decomposition of the observed
    structure on the supplied hypotheses, not evidence of causation.

    Parameters
    ----------
    observed_rdm : np.ndarray
        Square (C, C) observed RDM
    model_rdms : sequence of ModelRDM or np.ndarray
        Model RDMs of the same size
    method : str, default 'ols'
        Fit method, see fit_regression
    logger : logging.Logger, optional
        Logger for debugging messages

    Returns
    -------
    RegressionResult
        One coefficient per model, in the order given

    Raises
    ------
    DimensionMismatch
        If the observed RDM is not square or a model RDM has a different shape.

    Examples
    --------
    >>> from rsasim.rsa.models import generate_model_rdms
    >>> models = generate_model_rdms(8)
    >>> result = rsa_regression(models[0].rdm, models)
    >>> result.best_model()
    'Animate vs. Inanimate'
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    observed_rdm = np.asarray(observed_rdm, dtype=float)
    if observed_rdm.ndim != 2 or observed_rdm.shape[0] != observed_rdm.shape[1]:
        raise DimensionMismatch(
            f"rsa_regression: observed RDM must be square, got shape {observed_rdm.shape}"
        )
    if len(model_rdms) == 0:
        raise ValueError("rsa_regression: at least one model RDM is required")

    descriptions = []
    model_vectors = []
    for i, model in enumerate(model_rdms):
        if isinstance(model, ModelRDM):
            name, rdm = model.description, model.rdm
        else:
            name, rdm = f"model {i + 1}", np.asarray(model, dtype=float)
        if rdm.shape != observed_rdm.shape:
            raise DimensionMismatch(
                f"rsa_regression: model '{name}' has shape {rdm.shape}, "
                f"observed RDM has shape {observed_rdm.shape}"
            )
        descriptions.append(name)
        model_vectors.append(rdm_to_vector(rdm))

    response = rdm_to_vector(observed_rdm)
    regressors = np.column_stack(model_vectors)
    coefficients = fit_regression(
        response, regressors, method=method, regressor_names=descriptions
    )

    result = RegressionResult(np.asarray(coefficients), tuple(descriptions), method)
    logger.debug(f"RSA regression ({method}): {result.as_dict()}")
    return result
