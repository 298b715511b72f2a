"""Florify — multi-vendor flower marketplace core."""

__version__ = "0.1.0"
