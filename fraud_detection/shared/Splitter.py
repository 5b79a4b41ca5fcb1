# SPDX-FileCopyrightText: 2025 Jonathan Feilmeier
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
This module splits a dataset into train and test sets with an equal proportion of minority
records in each, as a way of reducing test variation on a highly imbalanced dataset.
"""
import functools
import logging

import numpy as np

from .errors import InvalidConfiguration
from .helper import check_class_imbalance, split_data_by_class
from .structs import Dataset

logger = logging.getLogger()


def stratified_split(dataset, test_size):
    """
    Splits the dataset into train and test set, sampling each class proportionally.

    The dataset is shuffled first, so every call explores a different split while the
    test size and the class ratio stay fixed.

    Args:
        dataset (Dataset): The records to split.
        test_size (int): Exact number of records of the test set.

    Returns:
        tuple: (train_set, test_set) as two disjoint Datasets covering all records.

    Raises:
        InvalidConfiguration: If ``test_size`` is negative or larger than the dataset.
    """
    if test_size < 0 or test_size > len(dataset):
        raise InvalidConfiguration(
            f"Test set size ({test_size}) must be between 0 and the dataset size ({len(dataset)}).")

    shuffled = dataset.take(np.random.permutation(len(dataset)))
    minority_label, _, num_minority, _ = check_class_imbalance(shuffled.class_indices)
    majority_idx, minority_idx = split_data_by_class(shuffled, minority_label)

    # Minority share is rounded down, the majority takes the remainder
    test_minority_amount = int(test_size * num_minority / len(dataset))
    test_majority_amount = test_size - test_minority_amount

    test_idx = np.concatenate([minority_idx[:test_minority_amount], majority_idx[:test_majority_amount]])
    train_idx = np.concatenate([minority_idx[test_minority_amount:], majority_idx[test_majority_amount:]])

    logger.info(f"Split {len(dataset)} records into {len(train_idx)} train and {len(test_idx)} test records "
                f"({test_minority_amount} minority records in test)")

    return shuffled.take(train_idx), shuffled.take(test_idx)


@functools.lru_cache(maxsize=None)
def get_train_test_dataset(dataset: Dataset, test_size):
    """
    Cached variant of :func:`stratified_split`.

    Returns the same split for the same dataset and test size for the lifetime of the process,
    so augmentation and evaluation always operate on a stable test set.
    """
    return stratified_split(dataset, test_size)
