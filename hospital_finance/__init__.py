"""Synthetic hospital financial dataset engine."""

__version__ = "1.0.0"
