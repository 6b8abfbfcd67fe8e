"""Utility helpers for the discussion CLI."""
