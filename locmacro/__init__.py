"""Expand custom localization macros before running genstrings."""

__version__ = "0.1.0"
