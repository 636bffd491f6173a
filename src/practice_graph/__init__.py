"""Dependency graph engine for the Continuous Delivery practice catalog."""

__version__ = "0.1.0"
