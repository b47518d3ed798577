"""CLI entrypoints for typegen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Tuple

from .config import load_config
from .errors import TypegenError
from .generator import generate_types_to_output
from .logging import configure_logging
from .mappers import load_type_name_mapper
from .models import Options, OutputOptions


def _add_verbosity_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    default: object = argparse.SUPPRESS if suppress_default else False
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only log warnings and errors.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typegen",
        description="Generate TypeScript declarations from Go type definitions.",
    )
    _add_verbosity_options(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Convert Go packages and write the filtered declarations.",
    )
    _add_verbosity_options(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "--pkg-dir",
        default=None,
        help="Directory containing the Go packages to convert.",
    )
    generate_parser.add_argument(
        "--pkg-path",
        default=None,
        help="Import path of --pkg-dir (defaults to <go.mod module>/pkg).",
    )
    generate_parser.add_argument(
        "--include",
        "--include-file",
        dest="include",
        default=None,
        help="Regex matched against each declaration's origin file path.",
    )
    generate_parser.add_argument(
        "--include-type",
        default=None,
        help="Regex matched against each emitted declaration name.",
    )
    generate_parser.add_argument(
        "--strip-prefix",
        action="store_true",
        help="Emit bare Go type names without the package prefix.",
    )
    generate_parser.add_argument(
        "--disable-rename",
        action="store_true",
        help="Ignore the configured rename mapper.",
    )
    generate_parser.add_argument(
        "--mapper",
        default=None,
        help="Rename mapper as module:attr or a registered typegen.mappers name.",
    )
    generate_parser.add_argument(
        "--preset",
        default=None,
        help="Apply a preset defined in the config file.",
    )
    generate_parser.add_argument(
        "--config",
        default=None,
        help="Path to a .typegen.yml file (defaults to the current directory).",
    )
    generate_parser.add_argument(
        "--out",
        "--out-file",
        dest="out",
        default=None,
        help="Output file (defaults to index.d.ts; '-' writes to stdout).",
    )
    generate_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Write the declarations to stdout instead of a file.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing generation.",
    )
    _add_verbosity_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    return parser


def _resolve_options(args: argparse.Namespace) -> Tuple[Options, OutputOptions]:
    """Merge CLI flags over the selected preset and config file values."""
    if args.config:
        config = load_config(Path(args.config), required=True)
    else:
        config = load_config(Path.cwd())

    options = config.options(args.preset)
    if args.pkg_dir is not None:
        options.pkg_dir = args.pkg_dir
    if args.pkg_path is not None:
        options.pkg_path = args.pkg_path
    if args.include is not None:
        options.include_pattern = args.include
    if args.include_type is not None:
        options.include_type = args.include_type
    if args.strip_prefix:
        options.strip_prefix = True
    if args.disable_rename:
        options.disable_rename = True

    mapper = args.mapper or config.mapper
    if mapper and not options.disable_rename:
        options.type_name_mapper = load_type_name_mapper(mapper)

    if args.out is not None:
        output_path = args.out
    elif config.out is not None:
        output_path = str(config.out)
    else:
        output_path = ""
    return options, OutputOptions(output_path=output_path, stdout=bool(args.stdout))


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for typegen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(
        verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=log_file
    )

    if args.command == "generate":
        try:
            options, output = _resolve_options(args)
            written = generate_types_to_output(options, output)
        except TypegenError as exc:
            parser.exit(1, f"typegen generate failed: {exc}\nRun with --verbose for more details.\n")
        if written is not None:
            print(f"Types written to {_relativize(written)}")
    elif args.command == "serve":
        from .service import run_service

        try:
            run_service(host=args.host, port=args.port)
        except RuntimeError as exc:
            parser.exit(1, f"{exc}\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
