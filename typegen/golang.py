"""Tree-sitter helpers for reading Go source files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional

import tree_sitter_go
from tree_sitter import Language, Node, Parser, Tree

from .errors import DiscoveryError

GO_LANGUAGE = Language(tree_sitter_go.language())


class GoSourceParser:
    """Parses Go files into tree-sitter syntax trees."""

    def __init__(self) -> None:
        self._parser: Optional[Parser] = None

    def parse_bytes(self, source: bytes) -> Tree:
        if self._parser is None:
            self._parser = Parser(GO_LANGUAGE)
        return self._parser.parse(source)

    def parse_file(self, path: Path) -> tuple[Tree, bytes]:
        """Return the syntax tree and raw bytes of ``path``."""
        try:
            source = path.read_bytes()
        except OSError as exc:
            raise DiscoveryError(f"read file {path}: {exc}") from exc
        return self.parse_bytes(source), source


def node_text(node: Optional[Node], source: bytes) -> str:
    if node is None:
        return ""
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def first_error(node: Node) -> Optional[Node]:
    """Return the first ERROR or MISSING node below ``node``, if any."""
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = first_error(child)
        if found is not None:
            return found
    return node


def is_exported(name: str) -> bool:
    return bool(name) and name[0].isupper()


def iter_type_specs(root: Node) -> Iterator[tuple[Node, List[Node]]]:
    """Yield top-level ``type_spec``/``type_alias`` nodes with their doc comments."""
    for declaration, comments in with_leading_comments(root.children):
        if declaration.type != "type_declaration":
            continue
        specs = [child for child in declaration.children if child.type in {"type_spec", "type_alias", "comment"}]
        grouped = any(child.type == "(" for child in declaration.children)
        for spec, inner_comments in with_leading_comments(specs):
            if spec.type == "comment":
                continue
            # A lone `type X ...` takes the comment above the keyword.
            yield spec, inner_comments if grouped else comments


def with_leading_comments(nodes: List[Node]) -> Iterator[tuple[Node, List[Node]]]:
    pending: List[Node] = []
    previous_row = -1
    for node in nodes:
        if node.type == "comment":
            if node.start_point[0] == previous_row:
                continue
            if pending and pending[-1].end_point[0] + 1 < node.start_point[0]:
                pending = []
            pending.append(node)
            continue
        attached = pending if pending and pending[-1].end_point[0] + 1 == node.start_point[0] else []
        yield node, attached
        pending = []
        previous_row = node.end_point[0]


def comment_lines(comments: List[Node], source: bytes) -> List[str]:
    """Return the text of Go comments with their ``//`` or ``/* */`` markers removed."""
    lines: List[str] = []
    for comment in comments:
        text = node_text(comment, source)
        if text.startswith("//"):
            lines.append(_strip_one_space(text[2:]))
            continue
        body = text[2:-2] if text.startswith("/*") else text
        for raw in body.splitlines():
            stripped = raw.strip()
            if stripped.startswith("*"):
                stripped = _strip_one_space(stripped[1:])
            lines.append(stripped)
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def _strip_one_space(text: str) -> str:
    return text[1:].rstrip() if text.startswith(" ") else text.rstrip()


__all__ = [
    "GO_LANGUAGE",
    "GoSourceParser",
    "comment_lines",
    "first_error",
    "is_exported",
    "iter_type_specs",
    "node_text",
    "with_leading_comments",
]
