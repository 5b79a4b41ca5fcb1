# SPDX-FileCopyrightText: 2025 Jonathan Feilmeier
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Entry point of the fraud detection pipeline.

Loads the transaction dataset, splits and augments it, trains the classifier and
keeps the best scoring network on disk.
"""
