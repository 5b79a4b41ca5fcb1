"""
This Module holds dataclass structures for datasets, evaluation results and passing Configurations
"""
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional, Sequence

import numpy as np


@dataclass(frozen=True, eq=False)
class Dataset:
    """
    An immutable collection of records stored column-wise.

    Row ``i`` of ``features`` together with row ``i`` of ``labels`` forms one record.
    The arrays are copied and made read-only on construction, so a Dataset can be used
    as a cache key by identity.

    Attributes:
        features (np.ndarray): Float matrix of shape (num_records, num_features).
        labels (np.ndarray): One-hot float matrix of shape (num_records, num_classes).
    """

    features: np.ndarray
    labels: np.ndarray

    def __post_init__(self):
        features = np.array(self.features, dtype=float)
        labels = np.array(self.labels, dtype=float)

        if features.ndim != 2 or labels.ndim != 2:
            raise ValueError("features and labels must both be two dimensional")
        if features.shape[0] != labels.shape[0]:
            raise ValueError(
                f"Number of feature rows ({features.shape[0]}) does not match number of labels ({labels.shape[0]}).")
        if len(labels) and not (np.isin(labels, (0.0, 1.0)).all() and (labels.sum(axis=1) == 1).all()):
            raise ValueError("Every label must be a one-hot vector")

        features.setflags(write=False)
        labels.setflags(write=False)
        object.__setattr__(self, "features", features)
        object.__setattr__(self, "labels", labels)

    def __len__(self):
        return self.features.shape[0]

    @property
    def num_features(self):
        return self.features.shape[1]

    @property
    def num_classes(self):
        return self.labels.shape[1]

    @property
    def class_indices(self):
        """Index of the hot entry of every label, as an int array."""
        return self.labels.argmax(axis=1)

    def take(self, indices):
        """Returns a new Dataset holding the records at ``indices`` in the given order."""
        indices = np.asarray(indices, dtype=int)
        return Dataset(self.features[indices], self.labels[indices])

    @classmethod
    def concatenate(cls, datasets: Sequence["Dataset"]):
        """Stacks the records of several datasets with identical feature and class dimensions."""
        return cls(np.vstack([dataset.features for dataset in datasets]),
                   np.vstack([dataset.labels for dataset in datasets]))

    @classmethod
    def from_class_indices(cls, features, class_indices, num_classes=2):
        """Builds a Dataset from a feature matrix and integer class labels."""
        one_hot = np.eye(num_classes)[np.asarray(class_indices, dtype=int)]
        return cls(np.asarray(features, dtype=float).reshape(len(one_hot), -1), one_hot)


class ClassThreshold(NamedTuple):
    """Minimum probability ``threshold`` the arg-max class ``class_name`` needs to be predicted."""

    class_name: Any
    threshold: float


@dataclass(frozen=True)
class EvaluationRound:
    """
    Scores of the model after one training epoch.

    Attributes:
        epoch (int): Epoch number, starting at 1.
        precision (float): Precision on the positive class.
        recall (float): Recall on the positive class.
        f_beta (float): F-beta score combining precision and recall.
        is_best (bool): Whether this round improved the best score so far.
    """

    epoch: int
    precision: float
    recall: float
    f_beta: float
    is_best: bool


@dataclass
class TrainingConfiguration:
    """
    Stores configuration parameters for the training and evaluation loop.

    Attributes:
        batch_size (int): Number of samples per batch for training and prediction.
        epochs (int): Number of training epochs.
        epoch_size (int): Number of augmented training records drawn for each epoch.
        class_names (list): Class name for every position of a label vector.
        positive_class (any): Class name the precision and recall are computed for.
        beta (float): Weight of recall in the F-beta score.
        decision_threshold (Optional[ClassThreshold]): Confidence a class needs before it is predicted.
        model_file (str): Path the best model is saved to.
        balanced (bool): Draw every epoch with an equal number of records per class.
    """

    batch_size: int
    epochs: int
    epoch_size: int
    class_names: list
    positive_class: Any
    beta: float = 1.0
    decision_threshold: Optional[ClassThreshold] = None
    model_file: str = "trained-network.keras"
    balanced: bool = False
