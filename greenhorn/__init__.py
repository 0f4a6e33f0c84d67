"""Greenhorn: a small markdown page server."""

__version__ = "0.1.0"
