# SPDX-FileCopyrightText: 2025 Jonathan Feilmeier
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Exceptions raised by the data pipeline.

Both are fatal: they abort the pipeline before any training starts.
"""


class ParseError(ValueError):
    """Raised when a row or cell of the input file cannot be parsed."""


class InvalidConfiguration(ValueError):
    """Raised when a configuration value cannot be applied to the data (e.g. test size larger than the dataset)."""
