"""Command-line interface for the UTF-8 engine.

This module exposes decode, encode, validate and benchmark commands over the
codec and text layers.
"""

from .main import main

__all__ = ["main"]
