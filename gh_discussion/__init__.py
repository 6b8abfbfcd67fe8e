"""GitHub CLI extension for listing, viewing and searching discussions."""

__version__ = "0.1.0"
