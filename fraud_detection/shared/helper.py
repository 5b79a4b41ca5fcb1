# SPDX-FileCopyrightText: 2025 Jonathan Feilmeier
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
This module contains helper functions for loading data and checking class imbalance in datasets.
"""
import numpy as np
from sklearn.metrics import pairwise_distances_argmin_min

from .DatasetLoader import DatasetLoader


def load_data_from_file(filepath, delimiter=","):
    """
    Loads the transaction dataset from the specified file.

    Args:
        filepath (str): Path of the delimited file.
        delimiter (str): Column separator of the file.

    Returns:
        Dataset: The cached dataset of the file.
    """
    data_loader = DatasetLoader(filepath, delimiter=delimiter)
    return data_loader.load_data()


def check_class_imbalance(labels):
    """
    Checks if the dataset is imbalanced and returns the imbalance details.

    Args:
        labels (np.ndarray): Integer class labels of the dataset (0 or 1).

    Returns:
        tuple:
            - minority_label (int): The label of the minority class.
            - imbalance_threshold (float): The imbalance ratio of the minority class to the majority class.
            - minority_class_size (int): The number of samples in the minority class.
            - majority_class_size (int): The number of samples in the majority class.

    Raises:
        ValueError: If the dataset is empty.
        AssertionError: If the majority class size is zero.
    """
    if len(labels) == 0:
        raise ValueError("The dataset should not be empty for balance check")

    # Count the number of occurrences of each label
    label_counts = np.bincount(np.asarray(labels, dtype=int), minlength=2)
    num_minority_class = label_counts.min()
    num_majority_class = label_counts.max()

    # On a tie the lower label counts as minority
    minority_label = int(label_counts.argmin())

    assert num_majority_class != 0, "majority class should not be Zero"

    imbalance_threshold = num_minority_class / num_majority_class

    return minority_label, imbalance_threshold, int(num_minority_class), int(num_majority_class)


def split_data_by_class(dataset, class_label):
    """
    Splits the record indices of a dataset into the other classes and the given class.

    Args:
        dataset (Dataset): The dataset to partition.
        class_label (int): Index of the class to separate.

    Returns:
        tuple: Two int arrays - indices of the other records and indices of the ``class_label`` records.
    """
    in_class = dataset.class_indices == class_label
    return np.flatnonzero(~in_class), np.flatnonzero(in_class)


def min_class_distance(dataset):
    """
    Calculates the smallest Euclidean distance between a minority and a majority feature vector.

    Gives an impression of how separable the classes are before any training.

    Args:
        dataset (Dataset): The dataset to inspect.

    Returns:
        float: The minimal distance between the two classes.

    Raises:
        ValueError: If one of the classes has no records.
    """
    minority_label, _, num_minority, _ = check_class_imbalance(dataset.class_indices)
    if num_minority == 0:
        raise ValueError("Both classes need at least one record to compute a distance")

    majority_idx, minority_idx = split_data_by_class(dataset, minority_label)
    _, distances = pairwise_distances_argmin_min(dataset.features[minority_idx], dataset.features[majority_idx])
    return float(distances.min())
