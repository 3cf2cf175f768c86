"""Bulk catalog import and warehouse stock distribution."""

__version__ = "0.1.0"
