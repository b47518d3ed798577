"""Collapse repeated declarations to their first occurrence."""

from __future__ import annotations

from typing import List, Set

from ..logging import get_logger
from .blocks import ORIGIN_MARKER, extract_export_name
from .graph import is_comment_line

logger = get_logger("postproc.dedupe")


def deduplicate_declarations(content: str) -> str:
    """Remove declarations whose name was already emitted, keeping the first.

    Comment lines (origin markers and docs) are held back until the next
    declaration decides their fate: they are emitted with a first-seen
    declaration and discarded with a repeated one. The blank line that ends a
    discarded declaration is absorbed with it.
    """
    result: List[str] = []
    pending: List[str] = []
    seen: Set[str] = set()
    skipping = False
    removed = 0

    for line in content.split("\n"):
        name = extract_export_name(line)
        if name:
            if name in seen:
                skipping = True
                pending = []
                removed += 1
                continue
            seen.add(name)
            skipping = False
            result.extend(pending)
            pending = []
            result.append(line)
            continue

        if line == "":
            if skipping:
                skipping = False
                continue
            if pending:
                pending.append(line)
            else:
                result.append(line)
            continue

        if skipping and line.startswith(ORIGIN_MARKER):
            skipping = False
        if skipping:
            continue

        if is_comment_line(line):
            pending.append(line)
            continue

        result.extend(pending)
        pending = []
        result.append(line)

    result.extend(pending)
    if removed:
        logger.debug("Dropped %d duplicate declarations", removed)
    return "\n".join(result)


__all__ = ["deduplicate_declarations"]
