import random

import numpy as np
import pytest

from fraud_detection.shared import DatasetLoader
from fraud_detection.shared.Scorer import best_score_state
from fraud_detection.shared.structs import Dataset


@pytest.fixture(autouse=True)
def _isolated_state():
    random.seed(0)
    np.random.seed(0)
    DatasetLoader.clear_cache()
    best_score_state.reset()
    yield
    DatasetLoader.clear_cache()
    best_score_state.reset()


def make_dataset(num_minority, num_majority, num_features=3, minority_label=1):
    """Dataset whose first feature is a unique record id, so records can be told apart."""
    num_records = num_minority + num_majority
    features = np.column_stack([np.arange(num_records, dtype=float),
                                np.random.normal(size=(num_records, num_features - 1))])
    class_indices = np.full(num_records, 1 - minority_label)
    class_indices[:num_minority] = minority_label
    return Dataset.from_class_indices(features, class_indices)


def write_csv(path, rows, header="Time,V1,V2,Amount,Class"):
    path.write_text("\n".join([header, *rows]) + "\n", encoding="utf-8")
    return path
