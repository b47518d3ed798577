"""Pipeline orchestration: discover, classify, convert, select and write."""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Optional, Pattern, TextIO, Tuple

from .classifier import InterfaceClassifier
from .discovery import find_packages, resolve_pkg_dir, resolve_pkg_path
from .engine import EngineFactory, TreeSitterGoEngine
from .errors import ConfigurationError, ConversionError, OutputError
from .logging import get_logger
from .models import Options, OutputOptions
from .naming import build_namer
from .postproc import deduplicate_declarations, filter_by_whitelist, filter_interface_types

DEFAULT_OUTPUT_FILE = "index.d.ts"
STDOUT_SENTINEL = "-"


def default_output_path() -> Path:
    """Return ``index.d.ts`` in the current working directory."""
    return Path.cwd() / DEFAULT_OUTPUT_FILE


def compile_filters(
    include_pattern: str, include_type: str
) -> Tuple[Optional[Pattern[str]], Optional[Pattern[str]]]:
    """Compile the origin-path and name patterns; empty strings disable them."""
    path_pattern = _compile(include_pattern, "include pattern")
    name_pattern = _compile(include_type, "include type pattern")
    return path_pattern, name_pattern


def _compile(pattern: str, label: str) -> Optional[Pattern[str]]:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigurationError(f"compile {label} {pattern!r}: {exc}") from exc


class TypeGenerator:
    """Coordinates a single generation run from Go sources to filtered TypeScript."""

    def __init__(
        self,
        engine_factory: EngineFactory | None = None,
        classifier: InterfaceClassifier | None = None,
    ) -> None:
        self.engine_factory: EngineFactory = engine_factory or TreeSitterGoEngine
        self.classifier = classifier or InterfaceClassifier()
        self.logger = get_logger("generator")

    def generate(self, options: Options) -> str:
        """Return the filtered, deduplicated TypeScript for ``options``."""
        if not options.pkg_dir:
            raise ConfigurationError("pkg-dir is required")
        path_pattern, name_pattern = compile_filters(options.include_pattern, options.include_type)

        pkg_dir = resolve_pkg_dir(options.pkg_dir)
        pkg_import_path = resolve_pkg_path(pkg_dir, options.pkg_path)
        self.logger.info("Generating types for %s (%s)", pkg_import_path, pkg_dir)

        packages = find_packages(pkg_dir, pkg_import_path, options.exclude_dirs)
        namer = build_namer(
            pkg_import_path,
            strip_prefix=options.strip_prefix,
            disable_rename=options.disable_rename,
            mapper=options.type_name_mapper,
        )
        excluded = self.classifier.collect(
            pkg_dir, pkg_import_path, namer=namer, exclude_dirs=options.exclude_dirs
        )

        engine = self.engine_factory(namer, pkg_dir)
        included = 0
        for package in packages:
            try:
                engine.include_package(package)
            except ConversionError as exc:
                self.logger.warning("Skipping package %s: %s", package.import_path, exc)
                continue
            included += 1
        self.logger.debug("Converted %d of %d packages", included, len(packages))

        output = engine.serialize()
        if path_pattern is not None or name_pattern is not None:
            output = filter_by_whitelist(output, path_pattern, name_pattern)
        output = filter_interface_types(output, excluded)
        return deduplicate_declarations(output)


def generate_types(options: Options, *, engine_factory: EngineFactory | None = None) -> str:
    """Run the full pipeline and return the generated declarations."""
    return TypeGenerator(engine_factory=engine_factory).generate(options)


def write_output(
    content: str, output: OutputOptions, *, stream: TextIO | None = None
) -> Optional[Path]:
    """Write ``content`` to stdout or a file; return the file path when one was written."""
    if output.stdout or output.output_path == STDOUT_SENTINEL:
        target = stream if stream is not None else sys.stdout
        try:
            target.write(content)
        except OSError as exc:
            raise OutputError(f"write stdout: {exc}") from exc
        return None

    path = Path(output.output_path).expanduser() if output.output_path else default_output_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputError(f"ensure output directory {path.parent}: {exc}") from exc
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise OutputError(f"write file {path}: {exc}") from exc
    return path


def generate_types_to_output(
    options: Options,
    output: OutputOptions,
    *,
    engine_factory: EngineFactory | None = None,
    stream: TextIO | None = None,
) -> Optional[Path]:
    """Generate declarations, then write them; generation finishes before any write."""
    content = generate_types(options, engine_factory=engine_factory)
    return write_output(content, output, stream=stream)


__all__ = [
    "DEFAULT_OUTPUT_FILE",
    "TypeGenerator",
    "compile_filters",
    "default_output_path",
    "generate_types",
    "generate_types_to_output",
    "write_output",
]
