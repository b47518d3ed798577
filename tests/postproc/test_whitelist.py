"""Tests for whitelist selection and dependency closure."""

from __future__ import annotations

import re

from typegen.postproc.blocks import parse_blocks
from typegen.postproc.whitelist import expand_closure, filter_by_whitelist, matches_whitelist

SAMPLE = """// header

// From a/a.go
export interface A {
    readonly b: B;
    readonly missing: Unknown;
}

// From b/b.go
export interface B {
    readonly c: C | null;
}

// From c/c.go
export type C = "x" | "y";

// From d/d.go
export interface D {
    readonly a: A;
}

// From e/e.go
// a block without a declaration
"""


def _names(text: str) -> list[str]:
    return [block.name for block in parse_blocks(text).blocks]


def test_no_patterns_returns_input_unchanged() -> None:
    assert filter_by_whitelist(SAMPLE) is SAMPLE
    assert filter_by_whitelist(SAMPLE, None, None) == SAMPLE


def test_name_pattern_pulls_in_transitive_references() -> None:
    result = filter_by_whitelist(SAMPLE, name_pattern=re.compile(r"^A$"))

    assert _names(result) == ["A", "B", "C"]
    assert result.startswith("// header\n\n// From a/a.go\n")


def test_path_pattern_selects_by_origin() -> None:
    result = filter_by_whitelist(SAMPLE, path_pattern=re.compile(r"^c/"))

    assert _names(result) == ["C"]


def test_patterns_are_conjunctive() -> None:
    result = filter_by_whitelist(
        SAMPLE, path_pattern=re.compile(r"^a/"), name_pattern=re.compile(r"^B$")
    )

    assert _names(result) == []
    assert result == "// header\n"


def test_selection_preserves_original_order() -> None:
    result = filter_by_whitelist(SAMPLE, name_pattern=re.compile(r"^(D|C)$"))

    assert _names(result) == ["A", "B", "C", "D"]


def test_loosening_a_pattern_never_drops_blocks() -> None:
    strict = set(_names(filter_by_whitelist(SAMPLE, name_pattern=re.compile(r"^B$"))))
    loose = set(_names(filter_by_whitelist(SAMPLE, name_pattern=re.compile(r"^(B|D)$"))))

    assert strict == {"B", "C"}
    assert strict <= loose


def test_unnamed_blocks_are_dropped_when_filtering() -> None:
    result = filter_by_whitelist(SAMPLE, path_pattern=re.compile(r"."))

    assert "a block without a declaration" not in result
    assert _names(result) == ["A", "B", "C", "D"]


def test_expand_closure_ignores_unresolved_names() -> None:
    graph = {"A": frozenset({"B"}), "B": frozenset({"C", "A"}), "C": frozenset()}

    assert expand_closure(["A"], graph) == {"A", "B", "C"}
    assert expand_closure(["Ghost"], graph) == {"Ghost"}
    assert expand_closure([], graph) == set()


def test_matches_whitelist_requires_name_for_name_pattern() -> None:
    pattern = re.compile("Req$")

    assert matches_whitelist("foo/foo.go", "FooReq", None, pattern)
    assert not matches_whitelist("foo/foo.go", "", None, pattern)
    assert matches_whitelist("foo/foo.go", "", re.compile("^foo/"), None)
