"""Drop interface-only declarations from generated output."""

from __future__ import annotations

from typing import AbstractSet

from ..logging import get_logger
from .blocks import parse_blocks

logger = get_logger("postproc.interfaces")


def filter_interface_types(content: str, excluded: AbstractSet[str]) -> str:
    """Remove every block whose declared name is in ``excluded``.

    Runs after closure, so an interface pulled in only as a field type is
    still removed and the reference to it is left dangling.
    """
    if not excluded:
        return content

    document = parse_blocks(content)
    kept = [block for block in document.blocks if not (block.name and block.name in excluded)]
    dropped = len(document.blocks) - len(kept)
    if dropped:
        logger.debug("Removed %d interface declarations", dropped)
    return document.render(kept)


__all__ = ["filter_interface_types"]
