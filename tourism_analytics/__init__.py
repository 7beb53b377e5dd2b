"""Kathmandu Valley tourism analytics."""

__version__ = "1.0.0"
