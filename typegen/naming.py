"""Collision-safe identifier prefixes for generated declarations."""

from __future__ import annotations

from typing import Callable, Optional

from .models import TypeNameMapper

Namer = Callable[[str, str], str]
"""``(import_path, type_name) -> emitted declaration name``."""

_GUARD_TOKEN = "pkg_"
_REPLACEMENTS = (("/", "__"), ("-", "_"), (".", "_"), ("@", "_"))


def prefix_for_import_path(pkg_import_path: str, import_path: str) -> str:
    """Return the namespace prefix for ``import_path`` below ``pkg_import_path``.

    The root package gets an empty prefix. Nested packages map ``a/b-c`` to
    ``a__b_c_``; a leading character that cannot start an identifier gets the
    ``pkg_`` guard.
    """
    rel = import_path
    if rel.startswith(pkg_import_path):
        rel = rel[len(pkg_import_path):]
    if rel.startswith("/"):
        rel = rel[1:]
    if not rel:
        return ""

    prefix = rel
    for old, new in _REPLACEMENTS:
        prefix = prefix.replace(old, new)
    if not prefix:
        return ""

    first = prefix[0]
    if not (first == "_" or ("A" <= first <= "Z") or ("a" <= first <= "z")):
        prefix = _GUARD_TOKEN + prefix

    return prefix + "_"


def build_namer(
    pkg_import_path: str,
    *,
    strip_prefix: bool = False,
    disable_rename: bool = False,
    mapper: Optional[TypeNameMapper] = None,
) -> Namer:
    """Return the naming function shared by the engine and the classifier."""

    def namer(import_path: str, type_name: str) -> str:
        if mapper is not None and not disable_rename:
            return mapper(type_name, import_path)
        if strip_prefix:
            return type_name
        return prefix_for_import_path(pkg_import_path, import_path) + type_name

    return namer


__all__ = ["Namer", "build_namer", "prefix_for_import_path"]
