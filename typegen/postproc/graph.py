"""Token-level reference graph between declaration blocks."""

from __future__ import annotations

import re
from typing import Dict, Iterable, Mapping

from ..models import DeclarationBlock
from .blocks import index_blocks

ReferenceGraph = Mapping[str, frozenset[str]]

_TOKEN_PATTERN = re.compile(r"\b[A-Za-z_][A-Za-z0-9_]*\b")
_COMMENT_PREFIXES = ("//", "/*", "*")


def is_comment_line(line: str) -> bool:
    return line.strip().startswith(_COMMENT_PREFIXES)


def build_reference_graph(blocks: Iterable[DeclarationBlock]) -> ReferenceGraph:
    """Return, per named block, the other known names its code lines mention.

    Matching is purely lexical: any identifier token equal to a declared name
    counts, even when it is an unrelated field name that happens to collide.
    """
    named = [block for block in blocks if block.name]
    known = index_blocks(named)

    graph: Dict[str, frozenset[str]] = {}
    for block in named:
        refs = set()
        for line in block.lines:
            if is_comment_line(line):
                continue
            for token in _TOKEN_PATTERN.findall(line):
                if token != block.name and token in known:
                    refs.add(token)
        # Repeated names are all emitted once selected, so their references merge.
        graph[block.name] = graph.get(block.name, frozenset()) | refs
    return graph


__all__ = ["ReferenceGraph", "build_reference_graph", "is_comment_line"]
