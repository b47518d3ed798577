"""Generate TypeScript declarations from Go packages and narrow them by filters."""

from .errors import (
    ConfigurationError,
    ConversionError,
    DiscoveryError,
    OutputError,
    ParseError,
    TypegenError,
)
from .generator import (
    default_output_path,
    generate_types,
    generate_types_to_output,
    write_output,
)
from .models import Options, OutputOptions, Preset, TypeNameMapper

__all__ = [
    "ConfigurationError",
    "ConversionError",
    "DiscoveryError",
    "Options",
    "OutputError",
    "OutputOptions",
    "ParseError",
    "Preset",
    "TypeNameMapper",
    "TypegenError",
    "default_output_path",
    "generate_types",
    "generate_types_to_output",
    "write_output",
]
