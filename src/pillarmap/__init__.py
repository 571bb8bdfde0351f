"""Roadmap normalization and dual-view projection."""

__version__ = "0.1.0"
