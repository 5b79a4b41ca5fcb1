# SPDX-FileCopyrightText: 2025 Jonathan Feilmeier
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
This module scores predicted labels against actual labels and keeps track of the best score.

False positives are acceptable while false negatives mean a fraud goes through, so the F-beta
score can be weighted towards recall with ``beta > 1``.
"""
import logging
import threading

from sklearn.metrics import confusion_matrix

from .errors import InvalidConfiguration
from .structs import EvaluationRound

logger = logging.getLogger()


def f_beta(precision, recall, beta=1.0):
    """
    F-beta score, default uses F1.

    Args:
        precision (float): Precision of the positive class.
        recall (float): Recall of the positive class.
        beta (float): Weight of recall relative to precision.

    Returns:
        float: The F-beta score, 0 if precision and recall are both 0.

    Raises:
        InvalidConfiguration: If beta is not positive.
    """
    if beta <= 0:
        raise InvalidConfiguration(f"beta must be positive, got {beta}")

    beta_squared = beta * beta
    denominator = beta_squared * precision + recall
    if denominator == 0:
        logger.debug("F-beta denominator is zero, using a score of 0")
        return 0.0

    return (1 + beta_squared) * (precision * recall) / denominator


def precision_recall(actual, predicted, positive_class, class_names=None):
    """
    Calculates precision and recall of the positive class.

    Args:
        actual (Sequence): Actual class names.
        predicted (Sequence): Predicted class names, parallel to ``actual``.
        positive_class: The class name precision and recall refer to (the fraud class).
        class_names (Optional[Sequence]): All class names, used to order the confusion matrix.

    Returns:
        tuple: (precision, recall), each 0 when its denominator is 0.

    Raises:
        InvalidConfiguration: If the sequences are empty or differ in length.
    """
    actual = list(actual)
    predicted = list(predicted)
    if len(actual) != len(predicted):
        raise InvalidConfiguration(
            f"Got {len(predicted)} predictions for {len(actual)} actual labels")
    if not actual:
        raise InvalidConfiguration("Cannot score an empty set of predictions")

    labels = list(dict.fromkeys([*(class_names or []), *actual, *predicted, positive_class]))
    conf_matrix = confusion_matrix(actual, predicted, labels=labels)

    positive_idx = labels.index(positive_class)
    tp = conf_matrix[positive_idx, positive_idx]
    fp = conf_matrix[:, positive_idx].sum() - tp
    fn = conf_matrix[positive_idx, :].sum() - tp

    precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
    recall = tp / (tp + fn) if (tp + fn) > 0 else 0.0

    return float(precision), float(recall)


class BestScoreTracker:
    """
    Running maximum of the scores seen so far.

    The first score is always the best, afterwards only strict improvements count.
    Updates are serialized, so the maximum never decreases.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._best_score = None

    @property
    def best_score(self):
        """The best score so far, 0 before the first update."""
        return 0.0 if self._best_score is None else self._best_score

    def update(self, score):
        """Records ``score`` and returns whether it is the new best score."""
        with self._lock:
            is_best = self._best_score is None or score > self._best_score
            if is_best:
                self._best_score = score
            return is_best

    def reset(self):
        with self._lock:
            self._best_score = None


# Shared by every Scorer that is not given its own tracker
best_score_state = BestScoreTracker()


class Scorer:
    """
    Scores evaluation rounds and flags the best one.

    Attributes:
        positive_class: Class name precision and recall are computed for.
        beta (float): Weight of recall in the F-beta score.
        class_names (Optional[list]): All class names.
        tracker (BestScoreTracker): Holds the best F-beta score so far.
    """

    def __init__(self, positive_class, beta=1.0, class_names=None, tracker=None):
        if beta <= 0:
            raise InvalidConfiguration(f"beta must be positive, got {beta}")

        self.positive_class = positive_class
        self.beta = beta
        self.class_names = class_names
        self.tracker = tracker if tracker is not None else best_score_state

    def score(self, actual, predicted):
        """Returns (precision, recall, f_beta) of the predictions."""
        precision, recall = precision_recall(actual, predicted, self.positive_class, self.class_names)
        return precision, recall, f_beta(precision, recall, self.beta)

    def evaluate_round(self, epoch, actual, predicted, on_best=None):
        """
        Scores the predictions of one epoch and updates the best score.

        Args:
            epoch (int): The epoch the predictions belong to.
            actual (Sequence): Actual class names.
            predicted (Sequence): Predicted class names.
            on_best (Optional[callable]): Called without arguments if the round is the new best,
                typically to save the current model.

        Returns:
            EvaluationRound: The scores of the round.
        """
        precision, recall, score = self.score(actual, predicted)
        is_best = self.tracker.update(score)

        if is_best and on_best is not None:
            on_best()

        return EvaluationRound(epoch=epoch, precision=precision, recall=recall, f_beta=score, is_best=is_best)
