"""Markdown note tree service."""

__version__ = "0.1.0"
