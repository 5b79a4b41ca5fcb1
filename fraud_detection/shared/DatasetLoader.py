# SPDX-FileCopyrightText: 2025 Jonathan Feilmeier
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
This module handles loading of the transaction dataset.

The expected file is delimited text with a header row. The first column holds an identifier or
timestamp and is dropped, the last column holds the integer class label (0 = legitimate, 1 = fraud)
and every column in between is a numeric feature.

Loading the file is expensive, so datasets are cached per process and only re-read when the file
on disk changes.
"""
import logging
import os
import threading

import numpy as np
import pandas as pd

from .errors import ParseError
from .structs import Dataset

logger = logging.getLogger()

# (absolute path, delimiter, num_classes) -> ((mtime_ns, size), Dataset)
_dataset_cache = {}
_cache_lock = threading.Lock()


def clear_cache():
    """Drops every cached dataset."""
    with _cache_lock:
        _dataset_cache.clear()


class DatasetLoader:
    """
    A class to handle loading of delimited transaction files.

    Attributes:
        filepath (str): Path of the file to load.
        delimiter (str): Column separator.
        num_classes (int): Length of the one-hot label vectors.
    """

    def __init__(self, filepath, delimiter=",", num_classes=2):
        """
        Initializes the DatasetLoader class with the file to read.

        Args:
            filepath (str): Path of the file to load (e.g. 'resources/creditcard.csv').
            delimiter (str): Column separator.
            num_classes (int): Number of classes the labels are encoded with.
        """
        self.filepath = filepath
        self.delimiter = delimiter
        self.num_classes = num_classes

    def load_data(self):
        """
        Loads the dataset, reading the file only if it is not cached yet or has changed.

        Returns:
            Dataset: The loaded records. Repeated calls return the same instance.

        Raises:
            ParseError: If a row or cell of the file cannot be parsed.
            FileNotFoundError: If the file does not exist.
        """
        cache_key = (os.path.abspath(self.filepath), self.delimiter, self.num_classes)
        file_stat = os.stat(self.filepath)
        signature = (file_stat.st_mtime_ns, file_stat.st_size)

        with _cache_lock:
            cached = _dataset_cache.get(cache_key)
            if cached is not None and cached[0] == signature:
                logger.debug(f"Using cached dataset for {self.filepath}")
                return cached[1]

            dataset = self._read_dataset()
            _dataset_cache[cache_key] = (signature, dataset)

        return dataset

    def _read_dataset(self):
        with open(self.filepath, newline="") as infile:
            try:
                df = pd.read_csv(infile, sep=self.delimiter, dtype=str, keep_default_na=False,
                                 skipinitialspace=True)
            except pd.errors.EmptyDataError as e:
                raise ParseError(f"{self.filepath} is empty") from e
            except pd.errors.ParserError as e:
                raise ParseError(f"Malformed row in {self.filepath}: {e}") from e

        if df.shape[1] < 3:
            raise ParseError(
                f"{self.filepath} needs an identifier column, at least one feature column and a label column, "
                f"found {df.shape[1]} columns")
        if df.empty:
            raise ParseError(f"{self.filepath} contains no records")

        # The identifier column is dropped unparsed, it may hold ids or timestamps
        numeric = df.iloc[:, 1:].apply(pd.to_numeric, errors="coerce")
        self._raise_on_invalid_cells(df, np.column_stack(
            [np.zeros((len(df), 1), dtype=bool), numeric.isna().to_numpy()]))

        features = numeric.iloc[:, :-1].to_numpy(dtype=float)
        raw_labels = numeric.iloc[:, -1].to_numpy(dtype=float)

        invalid_labels = (raw_labels != np.round(raw_labels)) | (raw_labels < 0) | (raw_labels >= self.num_classes)
        self._raise_on_invalid_cells(df, np.column_stack(
            [np.zeros((len(df), df.shape[1] - 1), dtype=bool), invalid_labels]))

        dataset = Dataset.from_class_indices(features, raw_labels.astype(int), num_classes=self.num_classes)
        logger.info(f"Loaded {len(dataset)} records with {dataset.num_features} features from {self.filepath}")
        return dataset

    @staticmethod
    def _raise_on_invalid_cells(df, invalid_mask):
        """Raises a ParseError for the first cell flagged in ``invalid_mask``."""
        if not invalid_mask.any():
            return

        row, column = np.argwhere(invalid_mask)[0]
        # +2: one for the header row, one for 1-based line numbers
        raise ParseError(
            f"Cannot parse value {df.iat[row, column]!r} in line {row + 2}, column '{df.columns[column]}'")
