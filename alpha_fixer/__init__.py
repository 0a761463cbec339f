"""Rewrite the colour of fully transparent PNG pixels from their neighbours."""

__version__ = "1.0.0"
