"""Hubox - a curated local inbox for GitHub notifications."""

__version__ = "0.1.0"
