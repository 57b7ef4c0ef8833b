"""Batch PNG/JPG converter with optional multiple-of-four padding."""

__version__ = "1.0.0"
