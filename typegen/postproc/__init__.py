"""Selection and shaping stages applied to generated TypeScript."""

from .blocks import ORIGIN_MARKER, extract_export_name, index_blocks, parse_blocks
from .dedupe import deduplicate_declarations
from .graph import build_reference_graph
from .interfaces import filter_interface_types
from .whitelist import expand_closure, filter_by_whitelist, select_blocks

__all__ = [
    "ORIGIN_MARKER",
    "build_reference_graph",
    "deduplicate_declarations",
    "expand_closure",
    "extract_export_name",
    "filter_by_whitelist",
    "filter_interface_types",
    "index_blocks",
    "parse_blocks",
    "select_blocks",
]
