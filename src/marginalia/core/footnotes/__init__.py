"""Footnote marker location and insertion."""
