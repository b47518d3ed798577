"""Core data models shared across typegen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

TypeNameMapper = Callable[[str, str], str]
"""Rename hook: ``(declared_name, origin_import_path) -> emitted_name``."""


@dataclass(frozen=True, order=True)
class PackageInfo:
    """A discovered Go package, ordered by import path."""

    import_path: str
    directory: Path = field(compare=False)


@dataclass
class DeclarationBlock:
    """One generated declaration anchored by a ``// From`` origin marker."""

    source: str
    lines: List[str] = field(default_factory=list)
    name: str = ""


@dataclass
class BlockDocument:
    """Engine output split into retained header text and declaration blocks."""

    header: List[str] = field(default_factory=list)
    blocks: List[DeclarationBlock] = field(default_factory=list)

    def render(self, blocks: Optional[List[DeclarationBlock]] = None) -> str:
        """Join header and blocks (defaults to all blocks) back into text."""
        lines = list(self.header)
        for block in self.blocks if blocks is None else blocks:
            lines.extend(block.lines)
        return "\n".join(lines)


@dataclass
class Options:
    """Inputs for a single generation run."""

    pkg_dir: str = ""
    pkg_path: str = ""
    include_pattern: str = ""
    include_type: str = ""
    strip_prefix: bool = False
    disable_rename: bool = False
    type_name_mapper: Optional[TypeNameMapper] = None
    exclude_dirs: List[str] = field(default_factory=list)


@dataclass
class OutputOptions:
    """Destination for generated declarations."""

    output_path: str = ""
    stdout: bool = False


@dataclass
class Preset:
    """Reusable bundle of filter and naming defaults."""

    include_pattern: str = ""
    include_type: str = ""
    strip_prefix: bool = False
    disable_rename: bool = False

    def options(self, pkg_dir: str, pkg_path: str = "") -> Options:
        """Build run options by applying this preset to a pkg dir and import path."""
        return Options(
            pkg_dir=pkg_dir,
            pkg_path=pkg_path,
            include_pattern=self.include_pattern,
            include_type=self.include_type,
            strip_prefix=self.strip_prefix,
            disable_rename=self.disable_rename,
        )
