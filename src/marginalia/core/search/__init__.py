"""Query parsing and evaluation."""
