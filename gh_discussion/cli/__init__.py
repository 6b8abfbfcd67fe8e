"""Command line interface for gh-discussion."""
