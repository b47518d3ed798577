"""Tests for declaration block parsing and the reference graph."""

from __future__ import annotations

import pytest

from typegen.postproc.blocks import extract_export_name, index_blocks, parse_blocks
from typegen.postproc.graph import build_reference_graph

SAMPLE = """// Code generated by typegen. DO NOT EDIT.

// From a/a.go
/**
 * A holds a B.
 */
export interface A {
    readonly b: B;
}

// From b/b.go
export interface B {
    readonly c: C | null;
}

// From c/c.go
export type C = "x" | "y";

// From d/d.go
export interface D<T> {
    readonly value: T;
}
"""


def test_parse_blocks_splits_header_and_blocks() -> None:
    document = parse_blocks(SAMPLE)

    assert document.header == ["// Code generated by typegen. DO NOT EDIT.", ""]
    assert [block.name for block in document.blocks] == ["A", "B", "C", "D"]
    assert [block.source for block in document.blocks] == ["a/a.go", "b/b.go", "c/c.go", "d/d.go"]
    assert document.blocks[0].lines[0] == "// From a/a.go"
    assert document.blocks[0].lines[-1] == ""


def test_render_reproduces_input() -> None:
    assert parse_blocks(SAMPLE).render() == SAMPLE


def test_text_without_markers_is_all_header() -> None:
    document = parse_blocks("export type Lonely = string;\n")

    assert document.blocks == []
    assert document.header == ["export type Lonely = string;", ""]


def test_block_without_declaration_has_no_name() -> None:
    document = parse_blocks("// From x/x.go\n// only a comment\n")

    assert len(document.blocks) == 1
    assert document.blocks[0].name == ""


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("export interface Foo {", "Foo"),
        ("export interface Foo<T> extends Bar {", "Foo"),
        ("export type Alias = string;", "Alias"),
        ("export type Gen<T>= T;", "Gen"),
        ("export const Value = 1;", "Value"),
        ("export enum Color {", "Color"),
        ("export class Widget(", "Widget"),
        ("export interface Tail", "Tail"),
        ("  export interface Indented {", ""),
        ("export function run() {", ""),
        ("interface Local {", ""),
    ],
)
def test_extract_export_name(line: str, expected: str) -> None:
    assert extract_export_name(line) == expected


def test_index_blocks_keeps_first_owner() -> None:
    document = parse_blocks(
        "// From one.go\nexport type Dup = string;\n// From two.go\nexport type Dup = number;\n"
    )

    index = index_blocks(document.blocks)

    assert index["Dup"].source == "one.go"


def test_reference_graph_records_known_names() -> None:
    graph = build_reference_graph(parse_blocks(SAMPLE).blocks)

    assert graph == {
        "A": frozenset({"B"}),
        "B": frozenset({"C"}),
        "C": frozenset(),
        "D": frozenset(),
    }


def test_reference_graph_ignores_comments_and_self() -> None:
    text = """// From n.go
/**
 * Node links to Leaf in docs only.
 */
// Leaf again
export interface Node {
    readonly children: readonly Node[] | null;
}

// From l.go
export type Leaf = string;
"""
    graph = build_reference_graph(parse_blocks(text).blocks)

    assert graph["Node"] == frozenset()


def test_reference_graph_matches_colliding_identifiers() -> None:
    # A property spelled like a declared type still counts as a reference.
    text = """// From a.go
export interface Account {
    readonly Name: string;
}

// From n.go
export type Name = string;
"""
    graph = build_reference_graph(parse_blocks(text).blocks)

    assert graph["Account"] == frozenset({"Name"})


def test_reference_graph_merges_duplicate_names() -> None:
    text = """// From one.go
export interface Dup {
    readonly a: First;
}
// From two.go
export interface Dup {
    readonly b: Second;
}
// From f.go
export type First = string;
// From s.go
export type Second = string;
"""
    graph = build_reference_graph(parse_blocks(text).blocks)

    assert graph["Dup"] == frozenset({"First", "Second"})
