# SPDX-FileCopyrightText: 2025 Jonathan Feilmeier
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
This module provides configuration settings for preparing the dataset and training the classifier.

It includes the following functionalities:
1. Config class for managing the configuration parameters.
2. Functions for argument parsing and seed setup.
"""
import argparse
import logging
import random

import numpy as np
import tensorflow as tf

from fraud_detection.shared.VarianceAugmenter import DEFAULT_VARIANCE_MAGNITUDE
from fraud_detection.shared.errors import InvalidConfiguration
from fraud_detection.shared.structs import ClassThreshold, TrainingConfiguration

logger = logging.getLogger()

# Position i of a label vector belongs to CLASS_NAMES[i]
CLASS_NAMES = ["legitimate", "fraud"]
POSITIVE_CLASS = "fraud"


class Config:
    """
    A class to hold the configuration parameters for the pipeline.

    Attributes:
        filepath (str): Path to the transaction file.
        delimiter (str): Column separator of the transaction file.
        test_set_size (int): Number of records in the test set.
        variance_magnitude (float): Euclidean norm of the variance profile for augmentation.
        batch_size (int): Batch size for training and prediction.
        epochs (int): Number of training epochs.
        epoch_size (int): Number of augmented records drawn per epoch.
        balanced (bool): Flag to draw every epoch with an equal number of records per class.
        optimizer (str): Name of the optimizer.
        learning_rate (float): Learning rate of the optimizer.
        beta (float): Weight of recall in the F-beta score.
        threshold_class (str): Class that needs to reach ``threshold`` to be predicted.
        threshold (float): Decision threshold, None for plain arg-max.
        log_file (str): File the epoch summaries are appended to.
        model_file (str): File the best model is saved to.
        min_distance (bool): Flag to report the minimal distance between the classes.
        wandb_logging (bool): Flag to enable W&B logging.
        wandb_project (str): Project name for W&B logging.
        wandb_name (str): Name for the W&B log.
        wandb_mode (str): Mode of W&B logging (e.g., "offline").
        seed (int): Random seed for reproducibility.
        verbose (bool): Flag to enable verbose output during training.
    """

    def __init__(self, args):
        """
        Initializes the Config object with values parsed from command-line arguments.

        Args:
            args (argparse.Namespace): Parsed command-line arguments containing configuration values.

        Raises:
            InvalidConfiguration: If a value is out of its valid range.
        """
        # --- Dataset Configuration ---
        self.filepath = args.filepath
        self.delimiter = args.delimiter
        self.test_set_size = args.test_set_size
        self.variance_magnitude = args.variance_magnitude

        # --- Training Settings ---
        self.batch_size = args.batch_size
        self.epochs = args.epochs
        self.epoch_size = args.epoch_size
        self.balanced = args.balanced
        self.optimizer = args.optimizer
        self.learning_rate = args.learning_rate

        # --- Scoring ---
        self.beta = args.beta
        self.threshold_class = args.threshold_class
        self.threshold = args.threshold

        # --- Output ---
        self.log_file = args.log_file
        self.model_file = args.model_file
        self.min_distance = args.min_distance

        # --- WandB Integration (Logging) ---
        self.wandb_logging = args.wandb_logging
        self.wandb_project = args.wandb_project
        self.wandb_name = args.wandb_name
        self.wandb_mode = args.wandb_mode

        # --- Other General Configurations ---
        self.seed = args.seed
        self.verbose = args.verbose

        self._validate()

    def _validate(self):
        for name in ("test_set_size", "batch_size", "epochs", "epoch_size"):
            if getattr(self, name) <= 0:
                raise InvalidConfiguration(f"{name} must be positive, got {getattr(self, name)}")
        if self.beta <= 0:
            raise InvalidConfiguration(f"beta must be positive, got {self.beta}")
        if self.variance_magnitude < 0:
            raise InvalidConfiguration(f"variance_magnitude must not be negative, got {self.variance_magnitude}")
        if self.threshold_class not in CLASS_NAMES:
            raise InvalidConfiguration(
                f"Unknown threshold class: {self.threshold_class}. Please choose from {', '.join(CLASS_NAMES)}.")
        if self.threshold is not None and not 0 <= self.threshold <= 1:
            raise InvalidConfiguration(f"threshold must be between 0 and 1, got {self.threshold}")

    @property
    def decision_threshold(self):
        """The decision threshold as ClassThreshold, None if plain arg-max is used."""
        if self.threshold is None:
            return None
        return ClassThreshold(self.threshold_class, self.threshold)

    def get_dataset_config(self):
        """
        Retrieves the dataset-related configuration values.

        Returns:
            dict: A dictionary containing the dataset configuration values.
        """
        return {
            "filepath": self.filepath,
            "delimiter": self.delimiter,
            "test_set_size": self.test_set_size,
            "variance_magnitude": self.variance_magnitude
        }

    def get_training_config(self):
        """
        Retrieves the configuration of the training loop.

        Returns:
            TrainingConfiguration: The values the training loop needs.
        """
        return TrainingConfiguration(
            batch_size=self.batch_size,
            epochs=self.epochs,
            epoch_size=self.epoch_size,
            class_names=list(CLASS_NAMES),
            positive_class=POSITIVE_CLASS,
            beta=self.beta,
            decision_threshold=self.decision_threshold,
            model_file=self.model_file,
            balanced=self.balanced
        )

    def get_wandb_config(self):
        """
        Retrieves the W&B logging configuration values.

        Returns:
            dict: A dictionary containing the W&B logging configuration values.
        """
        return {
            "wandb_logging": self.wandb_logging,
            "wandb_project": self.wandb_project,
            "wandb_name": self.wandb_name,
            "wandb_mode": self.wandb_mode
        }

    def get_params(self):
        """
        Retrieves the parameters written to the head of the training log.

        Returns:
            dict: Dataset, training and scoring parameters.
        """
        return {
            **self.get_dataset_config(),
            "optimizer": self.optimizer,
            "learning_rate": self.learning_rate,
            "batch_size": self.batch_size,
            "epochs": self.epochs,
            "epoch_size": self.epoch_size,
            "balanced": self.balanced,
            "beta": self.beta,
            "decision_threshold": self.decision_threshold,
            "seed": self.seed
        }


def parse_arguments(argv=None):
    """
    Parses the command-line arguments and returns the corresponding configuration object.

    Args:
        argv (Optional[list]): Arguments to parse, defaults to ``sys.argv[1:]``.

    Returns:
        Config: The Config object containing the parsed configuration values.
    """
    parser = argparse.ArgumentParser(description="Train and evaluate a fraud classifier on imbalanced data.")
    parser.add_argument("-f", "--filepath", type=str, default="resources/creditcard.csv",
                        help="Path of the transaction file.")
    parser.add_argument("--delimiter", type=str, default=",", help="Column separator of the transaction file.")
    parser.add_argument("-t", "--test_set_size", type=int, default=50000, help="Number of records in the test set.")
    parser.add_argument("-vm", "--variance_magnitude", type=float, default=DEFAULT_VARIANCE_MAGNITUDE,
                        help="Length of the variance vector used to jitter synthetic fraud samples.")
    parser.add_argument("-b", "--batch_size", type=int, default=100, help="Batch size for training.")
    parser.add_argument("-e", "--epochs", type=int, default=30, help="Number of training epochs.")
    parser.add_argument("-es", "--epoch_size", type=int, default=200000,
                        help="Number of augmented records to train on per epoch.")
    parser.add_argument("--balanced", action="store_true", default=False,
                        help="Draw every epoch with the same number of legitimate and fraud records.")
    parser.add_argument("-o", "--optimizer", type=str, default="adam", choices=["adam", "adadelta"],
                        help="Optimizer to train with.")
    parser.add_argument("-lr", "--learning_rate", type=float, default=0.001, help="Initial learning rate.")
    parser.add_argument("--beta", type=float, default=1.0, help="Weight of recall in the F-beta score.")
    parser.add_argument("-tc", "--threshold_class", type=str, default="legitimate",
                        help="Class that has to reach the decision threshold to be predicted.")
    parser.add_argument("-th", "--threshold", type=float, default=None,
                        help="Decision threshold for the threshold class, e.g. 0.95. Plain arg-max if omitted.")
    parser.add_argument("--log_file", type=str, default="training.log", help="File to append epoch summaries to.")
    parser.add_argument("--model_file", type=str, default="trained-network.keras",
                        help="File to save the best model to.")
    parser.add_argument("--min_distance", action='store_true', default=False,
                        help="Report the minimal distance between fraud and legitimate samples.")
    parser.add_argument("--wandb_logging", action='store_true', default=False, help="Enable W&B logging.")
    parser.add_argument("-wp", "--wandb_project", type=str, default="fraud-detection", help="W&B project name.")
    parser.add_argument("-wn", "--wandb_name", type=str, default=None, help="Name of W&B logging.")
    parser.add_argument("-wm", "--wandb_mode", type=str, default="offline", help="Mode of W&B logging.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility.")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Enable verbose output")

    args = parser.parse_args(argv)
    return Config(args)


def setup_seed(seed):
    """
    Sets the random seed for reproducibility across various libraries.

    Args:
        seed (int): The seed value for random number generation.
    """
    if seed is not None:
        random.seed(seed)
        np.random.seed(seed)
        tf.random.set_seed(seed)
        logger.info(f"Random seed set to: {seed}")
