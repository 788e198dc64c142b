"""Normalization of security and infrastructure logs into canonical events."""

__version__ = "0.1.0"
