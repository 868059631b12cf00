"""Hometown Hero Banner Program API."""

__version__ = "0.1.0"
