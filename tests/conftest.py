from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.module_builder import GoModuleBuilder


@pytest.fixture
def go_module(tmp_path: Path) -> GoModuleBuilder:
    """Provide a Go module builder rooted at the pytest tmp_path."""
    return GoModuleBuilder(tmp_path)


@pytest.fixture
def sample_module(go_module: GoModuleBuilder) -> GoModuleBuilder:
    """Provide a module pre-populated with the `foo` and `baz` packages."""
    go_module.write_sample()
    return go_module
