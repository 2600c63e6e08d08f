"""Async client for browsing, searching and favoriting a recipe collection."""

__version__ = "0.1.0"
