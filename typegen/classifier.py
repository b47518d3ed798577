"""Classify interface-only Go types so they never reach generated output."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Set

from .discovery import iter_package_dirs
from .errors import ParseError
from .golang import GoSourceParser, first_error, is_exported, iter_type_specs, node_text
from .logging import get_logger
from .naming import Namer, prefix_for_import_path

logger = get_logger("classifier")


class InterfaceClassifier:
    """Collects the emitted names of exported Go interface types.

    The scan parses sources directly instead of asking the conversion engine,
    and walks the tree on its own. Any unparsable file aborts the run: an
    incomplete exclusion set would let interfaces leak into the output.
    """

    def __init__(self, parser: Optional[GoSourceParser] = None) -> None:
        self._parser = parser or GoSourceParser()

    def collect(
        self,
        pkg_dir: Path,
        pkg_import_path: str,
        *,
        namer: Optional[Namer] = None,
        exclude_dirs: Iterable[str] = (),
    ) -> frozenset[str]:
        names: Set[str] = set()
        for package in iter_package_dirs(pkg_dir, pkg_import_path, exclude_dirs):
            for path in package.go_files:
                for type_name in self.interface_names(path):
                    if namer is not None:
                        names.add(namer(package.import_path, type_name))
                    else:
                        names.add(prefix_for_import_path(pkg_import_path, package.import_path) + type_name)
        logger.debug("Classified %d interface types", len(names))
        return frozenset(names)

    def interface_names(self, path: Path) -> Iterable[str]:
        """Yield exported interface type names declared at the top level of ``path``."""
        tree, source = self._parser.parse_file(path)
        error = first_error(tree.root_node)
        if error is not None:
            line, column = error.start_point
            raise ParseError(f"parse file {path}: syntax error at {line + 1}:{column + 1}")

        for spec, _ in iter_type_specs(tree.root_node):
            # Aliases count only when the right-hand side is an interface literal.
            type_node = spec.child_by_field_name("type")
            if type_node is None or type_node.type != "interface_type":
                continue
            name = node_text(spec.child_by_field_name("name"), source)
            if is_exported(name):
                yield name


def collect_interface_type_names(
    pkg_dir: Path,
    pkg_import_path: str,
    *,
    namer: Optional[Namer] = None,
    exclude_dirs: Iterable[str] = (),
) -> frozenset[str]:
    """Return the exclusion set of interface-only declaration names."""
    return InterfaceClassifier().collect(
        pkg_dir, pkg_import_path, namer=namer, exclude_dirs=exclude_dirs
    )


__all__ = ["InterfaceClassifier", "collect_interface_type_names"]
