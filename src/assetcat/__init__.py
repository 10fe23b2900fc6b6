"""Hierarchical asset and folder catalog over pluggable storage volumes."""

__version__ = "0.1.0"
