"""Deterministic overland journey simulation kernel."""

__version__ = "0.1.0"
