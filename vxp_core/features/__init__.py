"""Command registry used by the CLI dispatcher."""

from .entry import FeatureEntry
from .registry import FeatureRegistry

__all__ = [
    "FeatureEntry",
    "FeatureRegistry",
]
