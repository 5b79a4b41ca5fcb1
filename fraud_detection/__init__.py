"""
Package implementing a fraud detection data pipeline for highly imbalanced tabular data.

This package prepares credit card transaction records for supervised classification,
rebalances the training data and evaluates a classifier with a threshold-aware scoring rule.

Sub-Packages:
- `fraud_detection.shared`: Loading, stratified splitting, variance-based oversampling,
  decision rule, scoring and the Keras model collaborators.
- `fraud_detection.pipeline`: Command line entry point and configuration handling.
- `fraud_detection.scripts`: Utility scripts for parameter sweeps and dataset downloads.

Key Features:
- Stratified train/test splitting that preserves the fraud ratio under extreme skew.
- Synthetic minority samples generated from per-feature variance estimates.
- Class probability to label conversion with a configurable confidence threshold.
- Precision, recall and F-beta scoring with best-model tracking across epochs.
"""
