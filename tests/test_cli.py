"""CLI parser and command behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from typegen.cli import _build_parser, _resolve_options, main

from tests._fixtures.module_builder import GoModuleBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "generate"])
    assert args.verbose is True
    assert args.command == "generate"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "-v"])
    assert args.verbose is True


def test_cli_accepts_quiet_on_either_side_of_command() -> None:
    parser = _build_parser()
    assert parser.parse_args(["-q", "generate"]).quiet is True
    assert parser.parse_args(["serve", "--quiet"]).quiet is True
    assert parser.parse_args(["generate"]).quiet is False


def test_cli_flag_aliases() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["generate", "--include-file", "^foo/", "--out-file", "types.d.ts", "--strip-prefix"]
    )
    assert args.include == "^foo/"
    assert args.out == "types.d.ts"
    assert args.strip_prefix is True
    assert args.disable_rename is False


def test_cli_serve_defaults() -> None:
    args = _build_parser().parse_args(["serve", "--port", "9000"])
    assert args.command == "serve"
    assert args.host == "0.0.0.0"
    assert args.port == 9000


def test_resolve_options_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".typegen.yml").write_text(
        "pkg_dir: pkg\n"
        "include: '^config/'\n"
        "include_type: Config$\n"
        "out: gen/types.d.ts\n"
        "presets:\n"
        "  req:\n"
        "    include_type: Req$\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    parser = _build_parser()

    options, output = _resolve_options(parser.parse_args(["generate", "--preset", "req"]))
    assert options.pkg_dir == str(tmp_path.resolve() / "pkg")
    assert options.include_pattern == "^config/"
    assert options.include_type == "Req$"
    assert output.output_path == str(tmp_path.resolve() / "gen/types.d.ts")

    options, output = _resolve_options(
        parser.parse_args(
            ["generate", "--preset", "req", "--include-type", "Res$", "--out", "-", "--pkg-dir", "other"]
        )
    )
    assert options.include_type == "Res$"
    assert options.pkg_dir == "other"
    assert output.output_path == "-"


def test_generate_writes_file(
    sample_module: GoModuleBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    target = tmp_path / "out" / "index.d.ts"

    main(
        [
            "generate",
            "--pkg-dir",
            str(sample_module.pkg_dir),
            "--include",
            "^foo/",
            "--include-type",
            "Req$",
            "--out",
            str(target),
        ]
    )

    text = target.read_text(encoding="utf-8")
    assert "export interface foo_FooReq" in text
    assert "export interface foo_Bar" in text
    assert "FooRes" not in text
    assert "Types written to" in capsys.readouterr().out


def test_generate_to_stdout(sample_module: GoModuleBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    main(["generate", "--pkg-dir", str(sample_module.pkg_dir), "--strip-prefix", "--stdout"])

    out = capsys.readouterr().out
    assert "export interface FooReq {" in out
    assert "Types written to" not in out


def test_generate_reports_errors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "--pkg-dir", str(tmp_path / "missing"), "--config", str(tmp_path)])

    assert excinfo.value.code == 1
    assert "typegen generate failed" in capsys.readouterr().err


def test_generate_requires_pkg_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        main(["generate"])

    assert excinfo.value.code == 1
