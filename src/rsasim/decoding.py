"""
Cross-validated decoding of target categories from simulated datasets.
"""

import logging
from typing import Optional, Tuple, Union

import numpy as np
from sklearn.base import BaseEstimator, clone
from sklearn.discriminant_analysis import LinearDiscriminantAnalysis
from sklearn.metrics import confusion_matrix as sk_confusion_matrix
from sklearn.model_selection import LeaveOneGroupOut, PredefinedSplit, cross_val_predict
from sklearn.naive_bayes import GaussianNB
from sklearn.neighbors import KNeighborsClassifier
from sklearn.svm import SVC

from .dataset import Dataset

logger = logging.getLogger(__name__)

CLASSIFIERS = {
    "lda": lambda: LinearDiscriminantAnalysis(),
    "svm": lambda: SVC(kernel="linear"),
    "nn": lambda: KNeighborsClassifier(n_neighbors=1),
    "naive_bayes": lambda: GaussianNB(),
}

PARTITIONERS = ["nfold", "odd_even"]


def get_classifier(classifier: Union[str, BaseEstimator, None] = "lda") -> BaseEstimator:
    """Return a fresh scikit-learn classifier from a name or an estimator."""
    if classifier is None:
        classifier = "lda"
    if isinstance(classifier, str):
        if classifier not in CLASSIFIERS:
            raise ValueError(
                f"Unknown classifier '{classifier}'. Must be one of {list(CLASSIFIERS)}"
            )
        return CLASSIFIERS[classifier]()
    return clone(classifier)


def _make_partitions(chunks: np.ndarray, partitioner: str):
    n_chunks = len(np.unique(chunks))
    if n_chunks < 2:
        raise ValueError(
            f"Cross-validation needs at least 2 runs (chunks), got {n_chunks}"
        )
    if partitioner == "nfold":
        return LeaveOneGroupOut(), chunks
    if partitioner == "odd_even":
        return PredefinedSplit(chunks % 2), None
    raise ValueError(f"Unknown partitioner '{partitioner}'. Must be one of {PARTITIONERS}")


def classify_and_cross_validate(
    dataset: Dataset,
    classifier: Union[str, BaseEstimator, None] = "lda",
    partitioner: str = "nfold",
) -> Tuple[np.ndarray, float]:
    """
    Decode target categories with run-wise cross-validation.

    Parameters
    ----------
    dataset : Dataset
        Dataset with at least two distinct chunks
    classifier : str or sklearn estimator, default 'lda'
        'lda', 'svm', 'nn', 'naive_bayes' or any scikit-learn classifier
        (cloned before use)
    partitioner : str, default 'nfold'
        - 'nfold': leave one run out
        - 'odd_even': train on even runs, test on odd runs and vice versa

    Returns
    -------
    predicted : np.ndarray
        Predicted target for every sample, in dataset order
    accuracy : float
        Fraction of correctly predicted samples
    """
    estimator = get_classifier(classifier)
    cv, groups = _make_partitions(dataset.chunks, partitioner)

    predicted = cross_val_predict(
        estimator, dataset.samples, dataset.targets, groups=groups, cv=cv
    )
    accuracy = float(np.mean(predicted == dataset.targets))
    logger.debug(
        f"{type(estimator).__name__} with '{partitioner}' partitions: accuracy {accuracy:.3f}"
    )
    return predicted, accuracy


def confusion_matrix(
    targets: np.ndarray,
    predicted: np.ndarray,
    n_categories: Optional[int] = None,
    normalize: bool = False,
) -> np.ndarray:
    """
    Confusion matrix with rows as true and columns as predicted targets 1..C.

    With ``normalize=True`` each row is divided by its count, giving the
    proportion of predictions per true category.
    """
    targets = np.asarray(targets)
    if n_categories is None:
        n_categories = int(max(np.max(targets), np.max(predicted)))
    labels = np.arange(1, n_categories + 1)
    cm = sk_confusion_matrix(targets, predicted, labels=labels)
    if normalize:
        row_sums = cm.sum(axis=1, keepdims=True)
        cm = np.divide(cm, row_sums, out=np.zeros(cm.shape), where=row_sums > 0)
    return cm


def chance_level(n_categories: int) -> float:
    """Accuracy expected from guessing among n_categories balanced classes."""
    return 1.0 / n_categories
