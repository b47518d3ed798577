"""Split generated TypeScript into origin-anchored declaration blocks."""

from __future__ import annotations

import re
from typing import Dict, List

from ..models import BlockDocument, DeclarationBlock

ORIGIN_MARKER = "// From "

DECLARATION_INTRODUCERS = (
    "export interface ",
    "export type ",
    "export const ",
    "export enum ",
    "export class ",
)

_NAME_TERMINATOR = re.compile(r"[\s{=<(]")


def parse_blocks(content: str) -> BlockDocument:
    """Partition ``content`` into header lines and declaration blocks."""
    document = BlockDocument()
    current: DeclarationBlock | None = None

    for line in content.split("\n"):
        if line.startswith(ORIGIN_MARKER):
            current = DeclarationBlock(source=line[len(ORIGIN_MARKER):], lines=[line])
            document.blocks.append(current)
            continue
        if current is None:
            document.header.append(line)
            continue
        current.lines.append(line)

    for block in document.blocks:
        for line in block.lines:
            name = extract_export_name(line)
            if name:
                block.name = name
                break

    return document


def extract_export_name(line: str) -> str:
    """Return the declared name when ``line`` opens a top-level declaration."""
    for introducer in DECLARATION_INTRODUCERS:
        if line.startswith(introducer):
            rest = line[len(introducer):]
            match = _NAME_TERMINATOR.search(rest)
            return rest[: match.start()] if match else rest
    return ""


def index_blocks(blocks: List[DeclarationBlock]) -> Dict[str, DeclarationBlock]:
    """Map each declared name to the first block that owns it."""
    index: Dict[str, DeclarationBlock] = {}
    for block in blocks:
        if block.name and block.name not in index:
            index[block.name] = block
    return index


__all__ = [
    "DECLARATION_INTRODUCERS",
    "ORIGIN_MARKER",
    "extract_export_name",
    "index_blocks",
    "parse_blocks",
]
