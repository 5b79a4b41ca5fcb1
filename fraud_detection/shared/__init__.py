"""
This module contains shared functionalities used across the pipeline. It includes
dataset loading, splitting and augmentation, the label decision rule, scoring,
model definitions and logging helpers.
"""
