"""Coordination building blocks for cooperating local agents."""

__version__ = "0.1.0"