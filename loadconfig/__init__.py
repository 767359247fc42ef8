"""Recursive configuration loader for variable stores."""

__version__ = "0.1.0"
