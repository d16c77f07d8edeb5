"""Deterministic wealth projection and protection gap engine."""

__version__ = "0.1.0"
