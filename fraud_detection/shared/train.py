# SPDX-FileCopyrightText: 2025 Jonathan Feilmeier
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
This Module contains the epoch loop that trains the classifier, scores it on the test set and
keeps the best scoring model on disk.

Per epoch: RUN_EPOCH -> SCORE -> UPDATE_BEST or SKIP. The loop ends after the configured number
of epochs. A failing evaluation aborts the run, since best-model selection depends on every score.
"""
import logging

import numpy as np
from tqdm import tqdm

from .LabelDecision import vectors_to_labels
from .structs import TrainingConfiguration

logger = logging.getLogger()
keras_verbose = 0 if logger.level >= logging.INFO else 1


def draw_epoch_dataset(train_set, epoch_size):
    """
    Draws ``epoch_size`` shuffled records from the train set (all records if it is smaller).

    Args:
        train_set (Dataset): The augmented train set.
        epoch_size (int): Number of records per epoch.

    Returns:
        Dataset: The records to train on for one epoch.
    """
    return train_set.take(np.random.permutation(len(train_set))[:epoch_size])


def draw_class_balanced_dataset(train_set, epoch_size):
    """
    Draws ``epoch_size`` shuffled records with the same number of records for every class present.

    Every class contributes ``epoch_size // num_classes`` records, the remainder goes to the first
    classes. A class with fewer records than its share is cycled through in fresh shuffled passes,
    so its records repeat as evenly as possible.

    Args:
        train_set (Dataset): The augmented train set.
        epoch_size (int): Number of records per epoch.

    Returns:
        Dataset: The records to train on for one epoch.
    """
    class_indices = train_set.class_indices
    present_classes = np.unique(class_indices)
    share, remainder = divmod(epoch_size, len(present_classes))

    drawn = []
    for position, class_label in enumerate(present_classes):
        members = np.flatnonzero(class_indices == class_label)
        count = share + (1 if position < remainder else 0)
        passes = -(-count // len(members))
        drawn.append(np.concatenate([np.random.permutation(members) for _ in range(passes)])[:count])

    return train_set.take(np.random.permutation(np.concatenate(drawn)))


def predict_labels(model, dataset, config: TrainingConfiguration, class_threshold=None):
    """
    Runs the model on the dataset and maps its probability vectors to class names.

    Returns:
        tuple: (actual class names, predicted class names)
    """
    probabilities = model.predict(dataset.features, batch_size=config.batch_size, verbose=keras_verbose)
    actual = vectors_to_labels(config.class_names, dataset.labels)
    predicted = vectors_to_labels(config.class_names, probabilities, class_threshold)
    return actual, predicted


def evaluate_model(model, test_set, config: TrainingConfiguration, scorer, epoch, on_best=None):
    """
    Scores the model on the test set, applying the configured decision threshold.

    Args:
        model: Model exposing ``predict``.
        test_set (Dataset): The untouched test set.
        config (TrainingConfiguration): Class names, threshold and batch size.
        scorer (Scorer): Scorer holding the best score so far.
        epoch (int): Current epoch.
        on_best (Optional[callable]): Called if this epoch sets a new best score.

    Returns:
        EvaluationRound: The scores of the epoch.
    """
    actual, predicted = predict_labels(model, test_set, config, config.decision_threshold)
    return scorer.evaluate_round(epoch, actual, predicted, on_best=on_best)


def format_epoch_summary(test_round, train_scores):
    """Formats test and train scores of an epoch for the training log."""
    train_precision, train_recall, train_f_beta = train_scores
    return (f"Epoch: {test_round.epoch}\n"
            f"Test precision: {test_round.precision}      | Train precision: {train_precision}\n"
            f"Test recall: {test_round.recall}             | Train recall: {train_recall}\n"
            f"Test F-beta: {test_round.f_beta}                 | Train F-beta: {train_f_beta}\n"
            f"Best: {test_round.is_best}\n")


def train_model(model, train_set, test_set, config: TrainingConfiguration, scorer, training_log, save_fn,
                round_callback=None, tqdm_file=None):
    """
    Trains the model for ``config.epochs`` epochs and saves it whenever its test score improves.

    Every epoch trains on a fresh draw of ``config.epoch_size`` records, class-balanced if
    ``config.balanced`` is set.

    Train scores are computed on the first ``len(test_set)`` records of the epoch sample with plain
    arg-max, so over-fitting shows next to the test scores.

    Args:
        model: Compiled model exposing ``fit`` and ``predict``.
        train_set (Dataset): The augmented train set.
        test_set (Dataset): The untouched test set.
        config (TrainingConfiguration): Loop configuration.
        scorer (Scorer): Scorer holding the best score so far.
        training_log: Sink exposing ``append(text)``.
        save_fn (callable): ``save_fn(model, path)``, called for every new best model.
        round_callback (Optional[callable]): Called with every EvaluationRound (e.g. W&B logging).
        tqdm_file: File-like object the progress bar writes to.

    Returns:
        list: The EvaluationRound of every epoch.
    """
    rounds = []
    draw_fn = draw_class_balanced_dataset if config.balanced else draw_epoch_dataset

    for epoch in tqdm(range(1, config.epochs + 1), desc="Epochs", file=tqdm_file):
        epoch_set = draw_fn(train_set, config.epoch_size)
        model.fit(epoch_set.features, epoch_set.labels, batch_size=config.batch_size, epochs=1,
                  verbose=keras_verbose)

        test_round = evaluate_model(model, test_set, config, scorer, epoch,
                                    on_best=lambda: save_fn(model, config.model_file))

        train_sample = epoch_set.take(np.arange(min(len(test_set), len(epoch_set))))
        train_scores = scorer.score(*predict_labels(model, train_sample, config))

        training_log.append(format_epoch_summary(test_round, train_scores))
        if round_callback is not None:
            round_callback(test_round)

        rounds.append(test_round)

    logger.info("Done.")
    training_log.append(f"Best score: {scorer.tracker.best_score}")

    return rounds
