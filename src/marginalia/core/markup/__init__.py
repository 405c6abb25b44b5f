"""Highlight markup scanning."""
