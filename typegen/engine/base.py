"""Contract for engines that turn Go packages into TypeScript text."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable

from ..models import PackageInfo
from ..naming import Namer


class ConversionEngine(ABC):
    """Translates Go type declarations into origin-marked TypeScript blocks.

    Output must follow the block convention: an optional header, then per
    declaration a ``// From <origin>`` line, optional comment lines, and one
    ``export interface`` or ``export type`` declaration.
    """

    @abstractmethod
    def include_package(self, package: PackageInfo) -> None:
        """Queue ``package`` for conversion; raise ConversionError when it cannot be read."""

    @abstractmethod
    def serialize(self) -> str:
        """Return the TypeScript text for every included package."""


EngineFactory = Callable[[Namer, Path], ConversionEngine]
"""Builds an engine from the shared namer and the pkg root directory."""


__all__ = ["ConversionEngine", "EngineFactory"]
