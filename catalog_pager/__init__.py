"""Keyset pagination engine for a filtered item catalog."""

__version__ = "0.1.0"
