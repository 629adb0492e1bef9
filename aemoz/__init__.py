"""AEMOZ participant registration and group draw service."""

__version__ = "1.0.0"
