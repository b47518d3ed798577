"""Error taxonomy shared by typegen stages."""

from __future__ import annotations


class TypegenError(RuntimeError):
    """Base class for failures surfaced to typegen callers."""


class ConfigurationError(TypegenError):
    """Raised when options or config files are missing or invalid."""


class DiscoveryError(TypegenError):
    """Raised when the source tree cannot be walked or a file cannot be read."""


class ParseError(TypegenError):
    """Raised when a Go source file cannot be parsed during classification."""


class ConversionError(TypegenError):
    """Raised by a conversion engine when a single package cannot be converted."""


class OutputError(TypegenError):
    """Raised when generated content cannot be written to its destination."""


__all__ = [
    "ConfigurationError",
    "ConversionError",
    "DiscoveryError",
    "OutputError",
    "ParseError",
    "TypegenError",
]
