"""
Package for executing scripts related to the fraud detection pipeline.

Modules include:
- Batch runs over parameter combinations (decision thresholds, beta, variance magnitude)
- Download of the datasets listed in the dataset configuration
"""
