"""Pixel-art sprite animation editor core."""

__version__ = "1.0.0"
