"""Viewport converter implementations."""
from .scaled_converter import ScaledViewportConverter

__all__ = ["ScaledViewportConverter"]
