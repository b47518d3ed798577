"""Resolve rename mappers from dotted paths or installed entry points."""

from __future__ import annotations

from importlib import import_module, metadata
from typing import Iterable

from .errors import ConfigurationError
from .models import TypeNameMapper

_ENTRY_POINT_GROUP = "typegen.mappers"


def load_type_name_mapper(spec: str) -> TypeNameMapper:
    """Return the mapper named by ``module:attr`` or a ``typegen.mappers`` entry point."""
    spec = spec.strip()
    if not spec:
        raise ConfigurationError("mapper reference is empty")

    if ":" in spec:
        module_name, _, attr = spec.partition(":")
        try:
            module = import_module(module_name)
        except ImportError as exc:
            raise ConfigurationError(f"import mapper module {module_name!r}: {exc}") from exc
        target = module
        for part in attr.split("."):
            try:
                target = getattr(target, part)
            except AttributeError as exc:
                raise ConfigurationError(f"mapper {spec!r} not found: {exc}") from exc
        return _coerce_mapper(target, spec)

    for entry in _iter_entry_points():
        if entry.name != spec:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - plugin import failures vary
            raise ConfigurationError(f"Failed to load mapper entry point '{spec}': {exc}") from exc
        return _coerce_mapper(loaded, spec)

    raise ConfigurationError(f"Unknown mapper {spec!r}; use module:attr or a '{_ENTRY_POINT_GROUP}' entry point")


def _coerce_mapper(obj: object, spec: str) -> TypeNameMapper:
    if not callable(obj):
        raise ConfigurationError(f"mapper {spec!r} is not callable")
    return obj  # type: ignore[return-value]


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = ["load_type_name_mapper"]
