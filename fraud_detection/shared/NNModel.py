# -*- coding: utf-8 -*-
"""
Description:
This module defines the Multi-Layer Perceptron (MLP) used to classify transactions, together
with helpers to compile, describe and persist it.
"""
import io
import logging

from keras.layers import Dense, Dropout, Input
from keras.models import Sequential
from keras.optimizers import Adadelta, Adam

from .errors import InvalidConfiguration

logger = logging.getLogger()

OPTIMIZERS = {
    "adam": Adam,
    "adadelta": Adadelta,
}


class SimpleMLP:
    @staticmethod
    def build(input_dim, num_classes=2):
        """
        Builds and returns a Keras Sequential MLP model with one softmax output per class.

        Args:
            input_dim (int): Number of features of a record.
            num_classes (int): Number of classes, i.e. length of the label vectors.

        Returns:
            keras.Model: An uncompiled MLP model.

        Model Architecture:
        - Input layer matching the number of features.
        - Hidden Layer 1: Dense (20) with ReLU activation and dropout (15%).
        - Hidden Layer 2: Dense (10) with ReLU activation.
        - Output Layer: Dense with softmax activation over the classes.
        """
        model = Sequential()
        model.add(Input(shape=(input_dim,)))

        model.add(Dense(20, activation='relu'))
        model.add(Dropout(0.15))

        model.add(Dense(10, activation='relu'))

        model.add(Dense(num_classes, activation='softmax'))

        return model


def compile_model(model, optimizer="adam", learning_rate=0.001):
    """
    Compiles the model with categorical cross-entropy.

    Args:
        model (keras.Model): The model to compile.
        optimizer (str): Name of the optimizer ('adam' or 'adadelta').
        learning_rate (float): Initial learning rate of the optimizer.

    Returns:
        keras.Model: The compiled model.

    Raises:
        InvalidConfiguration: If the optimizer is unknown.
    """
    optimizer_class = OPTIMIZERS.get(optimizer)
    if optimizer_class is None:
        raise InvalidConfiguration(
            f"Unsupported optimizer: {optimizer}. Please choose from {', '.join(OPTIMIZERS)}.")

    model.compile(loss="categorical_crossentropy", optimizer=optimizer_class(learning_rate=learning_rate),
                  metrics=["accuracy"])
    return model


def describe_model(model):
    """Returns the Keras summary of the model as a string."""
    buffer = io.StringIO()
    model.summary(print_fn=lambda line, **kwargs: buffer.write(f"{line}\n"))
    return buffer.getvalue()


def save_model(model, path):
    """Persists the model, overwriting an earlier checkpoint at ``path``."""
    model.save(path)
    logger.debug(f"Saved model to {path}")
