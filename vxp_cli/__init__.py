"""Command line surface for vxp."""

from .main import main

__all__ = ["main"]
