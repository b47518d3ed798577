"""Tests for rename mapper loading."""

from __future__ import annotations

from pathlib import Path
from importlib import metadata
from typing import Any, Callable

import pytest

from typegen import mappers
from typegen.errors import ConfigurationError
from typegen.mappers import load_type_name_mapper


class _EntryPoint:
    def __init__(self, name: str, target: Callable[[], Any]) -> None:
        self.name = name
        self._target = target

    def load(self) -> Any:
        return self._target()


@pytest.fixture
def mapper_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    (tmp_path / "typegen_test_mappers.py").write_text(
        "def upper(name, origin):\n"
        "    return name.upper()\n"
        "\n"
        "class Renamers:\n"
        "    @staticmethod\n"
        "    def tagged(name, origin):\n"
        "        return origin.rsplit('/', 1)[-1] + name\n"
        "\n"
        "NOT_CALLABLE = 3\n",
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    return "typegen_test_mappers"


def test_loads_module_attribute(mapper_module: str) -> None:
    mapper = load_type_name_mapper(f"{mapper_module}:upper")

    assert mapper("Bar", "example.com/app/pkg/foo") == "BAR"


def test_loads_nested_attribute(mapper_module: str) -> None:
    mapper = load_type_name_mapper(f"{mapper_module}:Renamers.tagged")

    assert mapper("Bar", "example.com/app/pkg/foo") == "fooBar"


@pytest.mark.parametrize(
    ("reference", "message"),
    [
        ("", "empty"),
        ("typegen_missing_module:upper", "import mapper module"),
        ("{module}:missing", "not found"),
        ("{module}:NOT_CALLABLE", "not callable"),
        ("unregistered", "Unknown mapper"),
    ],
)
def test_invalid_references(mapper_module: str, reference: str, message: str) -> None:
    with pytest.raises(ConfigurationError, match=message):
        load_type_name_mapper(reference.format(module=mapper_module))


def test_loads_registered_entry_point(monkeypatch: pytest.MonkeyPatch) -> None:
    def prefixed(name: str, origin: str) -> str:
        return "Api" + name

    monkeypatch.setattr(
        mappers,
        "_iter_entry_points",
        lambda: [_EntryPoint("other", lambda: None), _EntryPoint("api", lambda: prefixed)],
    )

    mapper = load_type_name_mapper("api")

    assert mapper("User", "example.com/app/pkg") == "ApiUser"


def test_entry_points_are_selected_by_group(mapper_module: str, monkeypatch: pytest.MonkeyPatch) -> None:
    installed = metadata.EntryPoints(
        [
            metadata.EntryPoint(name="shout", value="typegen_missing_module:upper", group="console_scripts"),
            metadata.EntryPoint(name="shout", value=f"{mapper_module}:upper", group="typegen.mappers"),
        ]
    )
    monkeypatch.setattr(mappers.metadata, "entry_points", lambda: installed)

    mapper = load_type_name_mapper("shout")

    assert mapper("Bar", "example.com/app/pkg/foo") == "BAR"
