# SPDX-FileCopyrightText: 2025 Jonathan Feilmeier
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
This module maps class probability vectors to class names.

Besides plain arg-max, a class can be required to reach a minimum probability before it is
predicted. Requiring high confidence for "legitimate" biases the decision towards catching fraud.
"""
import numpy as np

from .structs import ClassThreshold


def vector_to_label(class_names, probabilities, class_threshold=None):
    """
    Maps a vector of probabilities to its class name.

    ``vector_to_label(["a", "b", "c"], [0.1, 0.6, 0.3]) == "b"``

    If ``class_threshold`` (class_name, threshold) is given and the arg-max class is ``class_name``,
    its probability has to reach the threshold. Otherwise the class with the second highest
    probability is returned. Ties resolve to the lowest index.

    Args:
        class_names (Sequence): Class name for every position of the vector.
        probabilities (Sequence[float]): Probability per class.
        class_threshold (Optional[ClassThreshold | tuple]): Minimum probability for one class.

    Returns:
        The predicted class name.
    """
    probabilities = np.asarray(probabilities, dtype=float)
    if len(probabilities) != len(class_names):
        raise ValueError(
            f"Got {len(probabilities)} probabilities for {len(class_names)} class names")

    max_idx = int(np.argmax(probabilities))
    max_class = class_names[max_idx]

    if class_threshold is None:
        return max_class

    class_name, threshold = class_threshold
    if max_class == class_name and probabilities[max_idx] < threshold and len(probabilities) > 1:
        remaining = probabilities.copy()
        remaining[max_idx] = -np.inf
        return class_names[int(np.argmax(remaining))]

    return max_class


def vectors_to_labels(class_names, probability_matrix, class_threshold=None):
    """Applies :func:`vector_to_label` to every row of ``probability_matrix``."""
    if class_threshold is not None:
        class_threshold = ClassThreshold(*class_threshold)
    return [vector_to_label(class_names, row, class_threshold) for row in np.asarray(probability_matrix)]
