"""Whitelist selection with breadth-first dependency closure."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Optional, Pattern, Set

from ..logging import get_logger
from ..models import DeclarationBlock
from .blocks import parse_blocks
from .graph import ReferenceGraph, build_reference_graph

logger = get_logger("postproc.whitelist")


def matches_whitelist(
    source: str,
    name: str,
    path_pattern: Optional[Pattern[str]],
    name_pattern: Optional[Pattern[str]],
) -> bool:
    """Return True when a block passes every supplied pattern."""
    if path_pattern is not None and not path_pattern.search(source):
        return False
    if name_pattern is None:
        return True
    if not name:
        return False
    return name_pattern.search(name) is not None


def expand_closure(seeds: Iterable[str], graph: ReferenceGraph) -> Set[str]:
    """Return ``seeds`` plus every name reachable through ``graph``."""
    selected: Set[str] = set()
    queue: deque[str] = deque()
    for name in seeds:
        if name not in selected:
            selected.add(name)
            queue.append(name)

    while queue:
        name = queue.popleft()
        # Names without an owning block have no entry and end the chain.
        for ref in sorted(graph.get(name, ())):
            if ref not in selected:
                selected.add(ref)
                queue.append(ref)
    return selected


def select_blocks(
    blocks: Iterable[DeclarationBlock],
    path_pattern: Optional[Pattern[str]],
    name_pattern: Optional[Pattern[str]],
) -> list[DeclarationBlock]:
    """Return named blocks matching the patterns or required by a match."""
    named = [block for block in blocks if block.name]
    seeds = [
        block.name
        for block in named
        if matches_whitelist(block.source, block.name, path_pattern, name_pattern)
    ]
    selected = expand_closure(seeds, build_reference_graph(named))
    logger.debug(
        "Whitelist matched %d blocks, closure selected %d names", len(seeds), len(selected)
    )
    return [block for block in named if block.name in selected]


def filter_by_whitelist(
    content: str,
    path_pattern: Optional[Pattern[str]] = None,
    name_pattern: Optional[Pattern[str]] = None,
) -> str:
    """Keep header text plus the dependency-closed set of whitelisted blocks."""
    if path_pattern is None and name_pattern is None:
        return content

    document = parse_blocks(content)
    return document.render(select_blocks(document.blocks, path_pattern, name_pattern))


__all__ = ["expand_closure", "filter_by_whitelist", "matches_whitelist", "select_blocks"]
