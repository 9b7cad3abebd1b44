"""Train Traffic voice skill engine."""

__version__ = "0.1.0"
