"""Discrete-time simulation of a network of loading ramps, workers and storehouses."""

__version__ = "0.1.0"

__all__ = ["factory", "helpers", "nodes", "package", "reports", "storage_types"]