"""Fuzzy matching, scoring, latin normalization, ANSI color extraction, item storage, result merging and query history."""

__version__ = "0.43.0"