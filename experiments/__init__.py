"""Experiment drivers: scenario definitions and the reporting harness."""
