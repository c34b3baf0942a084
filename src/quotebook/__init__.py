"""Quotebook: personal quote collections with a weighted daily quote."""

__version__ = "0.1.0"
