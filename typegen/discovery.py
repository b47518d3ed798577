"""Go package discovery and module path resolution."""

from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List

from .errors import ConfigurationError, DiscoveryError
from .logging import get_logger
from .models import PackageInfo

_EXCLUDED_DIRS = {"typegen"}
_GO_MOD = "go.mod"

logger = get_logger("discovery")


@dataclass
class PackageDir:
    """A directory holding compilable Go files, as seen by one tree walk."""

    directory: Path
    import_path: str
    go_files: List[Path]


def is_go_source(filename: str) -> bool:
    """Return True for compilable, non-test Go files."""
    return filename.endswith(".go") and not filename.endswith("_test.go")


def iter_package_dirs(
    pkg_dir: Path, pkg_import_path: str, exclude_dirs: Iterable[str] = ()
) -> Iterator[PackageDir]:
    """Walk ``pkg_dir`` and yield every directory that holds Go sources."""
    excluded = _EXCLUDED_DIRS | set(exclude_dirs)

    def _on_error(exc: OSError) -> None:
        raise DiscoveryError(f"walk pkg dir: {exc}") from exc

    for dirpath, dirnames, filenames in os.walk(pkg_dir, onerror=_on_error):
        # Below the root, skip tooling and hidden directories.
        dirnames[:] = sorted(
            name for name in dirnames if name not in excluded and not name.startswith(".")
        )

        current = Path(dirpath)
        go_files = sorted(current / name for name in filenames if is_go_source(name))
        if not go_files:
            continue

        rel = current.relative_to(pkg_dir).as_posix()
        import_path = pkg_import_path if rel == "." else posixpath.join(pkg_import_path, rel)
        yield PackageDir(directory=current, import_path=import_path, go_files=go_files)


def find_packages(
    pkg_dir: Path, pkg_import_path: str, exclude_dirs: Iterable[str] = ()
) -> List[PackageInfo]:
    """Return every package below ``pkg_dir`` sorted by import path."""
    seen: dict[str, PackageInfo] = {}
    for entry in iter_package_dirs(pkg_dir, pkg_import_path, exclude_dirs):
        if entry.import_path not in seen:
            seen[entry.import_path] = PackageInfo(
                import_path=entry.import_path, directory=entry.directory
            )
    packages = sorted(seen.values())
    logger.debug("Discovered %d packages under %s", len(packages), pkg_dir)
    return packages


def resolve_pkg_dir(explicit: str | os.PathLike[str]) -> Path:
    """Return the absolute pkg directory or raise ConfigurationError."""
    if not str(explicit):
        raise ConfigurationError("pkg-dir is required")
    path = Path(explicit).expanduser().resolve()
    if not path.exists():
        raise ConfigurationError(f"pkg directory not found: {path}")
    if not path.is_dir():
        raise ConfigurationError(f"pkg path {path} is not a directory")
    return path


def resolve_pkg_path(pkg_dir: Path, pkg_path: str = "") -> str:
    """Return the Go import path of ``pkg_dir``.

    An explicit ``pkg_path`` wins; otherwise the nearest ``go.mod`` above
    ``pkg_dir`` supplies the module path and ``/pkg`` is appended.
    """
    if pkg_path:
        return pkg_path.rstrip("/")
    return posixpath.join(find_module_path(pkg_dir), "pkg")


def find_module_path(start_dir: Path) -> str:
    """Walk upward from ``start_dir`` and return the first go.mod module path."""
    for directory in (start_dir, *start_dir.parents):
        mod_file = directory / _GO_MOD
        if not mod_file.is_file():
            continue
        try:
            text = mod_file.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"read go.mod: {exc}") from exc
        module_path = parse_module_path(text)
        if not module_path:
            raise ConfigurationError(f"module directive not found in {mod_file}")
        logger.debug("Resolved module %s from %s", module_path, mod_file)
        return module_path
    raise ConfigurationError(f"go.mod not found from {start_dir}")


def parse_module_path(text: str) -> str:
    """Return the module path declared in go.mod text, or an empty string."""
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if line.startswith("module "):
            fields = line.split()
            if len(fields) >= 2:
                return fields[1].strip('"')
    return ""


__all__ = [
    "PackageDir",
    "find_module_path",
    "find_packages",
    "is_go_source",
    "iter_package_dirs",
    "parse_module_path",
    "resolve_pkg_dir",
    "resolve_pkg_path",
]
