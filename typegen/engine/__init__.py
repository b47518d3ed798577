"""Conversion engines that produce origin-marked TypeScript from Go packages."""

from .base import ConversionEngine, EngineFactory
from .tree_sitter import STANDARD_MAPPINGS, TreeSitterGoEngine

__all__ = [
    "ConversionEngine",
    "EngineFactory",
    "STANDARD_MAPPINGS",
    "TreeSitterGoEngine",
]
