# SPDX-FileCopyrightText: 2025 Jonathan Feilmeier
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
This module implements variance-based oversampling of the minority class.

Synthetic minority samples are created by jittering existing minority samples with uniform noise.
The noise range of every feature follows the variance of that feature among the minority samples,
scaled so that the whole variance vector has a fixed Euclidean length.
"""
import functools
import logging

import numpy as np

from .errors import InvalidConfiguration
from .helper import check_class_imbalance, split_data_by_class
from .structs import Dataset

logger = logging.getLogger()

DEFAULT_VARIANCE_MAGNITUDE = 10000


def calculate_variance_profile(minority_features, target_magnitude=DEFAULT_VARIANCE_MAGNITUDE):
    """
    Calculates the sample variance of every feature and scales the result to the target magnitude.

    Args:
        minority_features (np.ndarray): Feature matrix of the minority samples, shape (n, num_features).
        target_magnitude (float): Euclidean norm of the returned profile.

    Returns:
        np.ndarray: One non-negative noise range per feature.

    Raises:
        InvalidConfiguration: If there are fewer than two samples or the target magnitude is negative.
    """
    minority_features = np.asarray(minority_features, dtype=float)
    if target_magnitude < 0:
        raise InvalidConfiguration(f"Variance magnitude must not be negative, got {target_magnitude}")
    if len(minority_features) < 2:
        raise InvalidConfiguration(
            f"At least two minority samples are needed to estimate variances, got {len(minority_features)}")

    variances = np.var(minority_features, axis=0, ddof=1)
    norm = np.linalg.norm(variances)
    if norm == 0:
        # Constant features: nothing to jitter
        return np.zeros_like(variances)

    return variances * (target_magnitude / norm)


@functools.lru_cache(maxsize=None)
def get_scaled_variances(dataset: Dataset, minority_label, target_magnitude=DEFAULT_VARIANCE_MAGNITUDE):
    """
    Cached variance profile of the ``minority_label`` records of a dataset.

    Computed once per dataset, magnitude and label for the lifetime of the process.
    """
    _, minority_idx = split_data_by_class(dataset, minority_label)
    profile = calculate_variance_profile(dataset.features[minority_idx], target_magnitude)
    profile.setflags(write=False)
    logger.debug(f"Variance profile for label {minority_label}: {profile}")
    return profile


def add_random_variance(features, scaled_variances):
    """
    Adds uniform noise in [-variance, variance] to every feature.

    Args:
        features (np.ndarray): A single feature vector or a matrix of feature vectors.
        scaled_variances (np.ndarray): Noise range per feature.

    Returns:
        np.ndarray: The noisy copy of ``features``.
    """
    features = np.asarray(features, dtype=float)
    noise = np.random.uniform(-scaled_variances, scaled_variances, size=features.shape)
    return features + noise


def augment_train_dataset(train_set, target_magnitude=DEFAULT_VARIANCE_MAGNITUDE):
    """
    Augments the minority samples of the train set towards a 50/50 class balance.

    Every minority sample receives ``floor((M - m) / m)`` noisy copies, where ``m`` and ``M`` are the
    minority and majority counts. Because of the floor division the remainder ``(M - m) mod m`` stays
    unbalanced.

    Args:
        train_set (Dataset): The original train set.
        target_magnitude (float): Euclidean norm of the variance profile used for the noise.

    Returns:
        Dataset: The original records plus the synthetic minority records, shuffled.

    Raises:
        InvalidConfiguration: If the train set has fewer than two minority samples.
    """
    minority_label, _, num_minority, num_majority = check_class_imbalance(train_set.class_indices)
    if num_minority == 0:
        raise InvalidConfiguration("The train set contains no minority samples to augment")

    augments_per_sample = (num_majority - num_minority) // num_minority
    scaled_variances = get_scaled_variances(train_set, minority_label, target_magnitude)

    _, minority_idx = split_data_by_class(train_set, minority_label)
    minority_features = train_set.features[minority_idx]

    # Fresh noise for every copy of every sample
    synthetic_features = [add_random_variance(minority_features, scaled_variances)
                          for _ in range(augments_per_sample)]

    augmented = train_set
    if synthetic_features:
        synthetic_labels = np.full(len(minority_features) * augments_per_sample, minority_label)
        synthetic_set = Dataset.from_class_indices(np.vstack(synthetic_features), synthetic_labels,
                                                   num_classes=train_set.num_classes)
        augmented = Dataset.concatenate([train_set, synthetic_set])

    logger.info(f"Augmented {num_minority} minority samples with {augments_per_sample} copies each "
                f"({len(train_set)} -> {len(augmented)} samples)")

    return augmented.take(np.random.permutation(len(augmented)))
