"""Command line interface for tplview."""

from .main import tplview

__all__ = ["tplview"]
