"""Default conversion engine: Go type declarations to TypeScript via tree-sitter."""

from __future__ import annotations

import json
import operator
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template
from tree_sitter import Node, Tree

from ..discovery import is_go_source
from ..errors import ConversionError, DiscoveryError
from ..golang import (
    GoSourceParser,
    comment_lines,
    first_error,
    is_exported,
    iter_type_specs,
    node_text,
    with_leading_comments,
)
from ..logging import get_logger
from ..models import PackageInfo
from ..naming import Namer
from .base import ConversionEngine

logger = get_logger("engine")

_NUMBER_TYPES = {
    "int", "int8", "int16", "int32", "int64",
    "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
    "float32", "float64", "byte", "rune",
}

_BASIC_TYPES: Dict[str, str] = {
    "string": "string",
    "bool": "boolean",
    "any": "unknown",
    "error": "unknown",
    "complex64": "unknown",
    "complex128": "unknown",
    **{name: "number" for name in _NUMBER_TYPES},
}

STANDARD_MAPPINGS: Dict[Tuple[str, str], str] = {
    ("time", "Time"): "string",
    ("time", "Duration"): "number",
    ("encoding/json", "RawMessage"): "unknown",
    ("encoding/json", "Number"): "string",
    ("database/sql", "NullString"): "string | null",
    ("database/sql", "NullBool"): "boolean | null",
    ("database/sql", "NullInt16"): "number | null",
    ("database/sql", "NullInt32"): "number | null",
    ("database/sql", "NullInt64"): "number | null",
    ("database/sql", "NullFloat64"): "number | null",
    ("database/sql", "NullTime"): "string | null",
    ("math/big", "Int"): "number",
    ("github.com/google/uuid", "UUID"): "string",
}

_TS_PRIMITIVES = {"string", "number", "boolean", "unknown", "null"}
_JSON_TAG = re.compile(r'json:"([^"]*)"')
_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_EXTENDABLE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*(<.*>)?$")
_MAJOR_VERSION = re.compile(r"^v\d+$")
_TEMPLATE_NAME = "declarations.ts.j2"

_INT_OPERATORS = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "<<": operator.lshift,
    ">>": operator.rshift,
    "|": operator.or_,
    "&": operator.and_,
}


@dataclass
class TSField:
    """A rendered interface property."""

    name: str
    type: str
    optional: bool = False
    doc: List[str] = field(default_factory=list)


@dataclass
class TSDeclaration:
    """A rendered top-level TypeScript declaration."""

    origin: str
    name: str
    kind: str = "type"
    doc: List[str] = field(default_factory=list)
    type_params: str = ""
    extends: List[str] = field(default_factory=list)
    fields: List[TSField] = field(default_factory=list)
    type: str = ""


@dataclass
class _SourceFile:
    path: Path
    origin: str
    source: bytes
    tree: Tree
    imports: Dict[str, str]


@dataclass
class _ParsedPackage:
    info: PackageInfo
    files: List[_SourceFile]
    type_names: Set[str] = field(default_factory=set)
    enum_values: Dict[str, List[str]] = field(default_factory=dict)


@dataclass
class _Scope:
    package: _ParsedPackage
    file: _SourceFile
    type_params: frozenset[str] = frozenset()


class TreeSitterGoEngine(ConversionEngine):
    """Parses Go packages with tree-sitter and renders TypeScript with jinja2.

    Packages are parsed on inclusion and rendered on ``serialize`` so that
    references across packages resolve regardless of inclusion order.
    """

    def __init__(
        self,
        namer: Namer,
        pkg_dir: Path,
        *,
        parser: Optional[GoSourceParser] = None,
        templates_dir: Optional[Path] = None,
    ) -> None:
        self.namer = namer
        self.pkg_dir = Path(pkg_dir)
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._parser = parser or GoSourceParser()
        self._packages: List[_ParsedPackage] = []
        self._by_import_path: Dict[str, _ParsedPackage] = {}
        self._env: Optional[Environment] = None

    def include_package(self, package: PackageInfo) -> None:
        try:
            paths = sorted(
                path
                for path in package.directory.iterdir()
                if path.is_file() and is_go_source(path.name)
            )
        except OSError as exc:
            raise ConversionError(f"list package {package.import_path}: {exc}") from exc
        if not paths:
            raise ConversionError(f"no Go files in package {package.import_path}")

        files = [self._parse(path) for path in paths]
        parsed = _ParsedPackage(info=package, files=files)
        for source_file in files:
            for spec, _ in iter_type_specs(source_file.tree.root_node):
                name = node_text(spec.child_by_field_name("name"), source_file.source)
                if is_exported(name):
                    parsed.type_names.add(name)
            _collect_enum_values(source_file, parsed.enum_values)

        self._packages.append(parsed)
        self._by_import_path[package.import_path] = parsed
        logger.debug(
            "Included %s (%d files, %d types)", package.import_path, len(files), len(parsed.type_names)
        )

    def serialize(self) -> str:
        declarations: List[TSDeclaration] = []
        for package in self._packages:
            for source_file in package.files:
                scope = _Scope(package=package, file=source_file)
                for spec, comments in iter_type_specs(source_file.tree.root_node):
                    declaration = self._convert_spec(spec, comments, scope)
                    if declaration is not None:
                        declarations.append(declaration)
        return self._template().render(declarations=declarations)

    def _template(self) -> Template:
        if self._env is None:
            self._env = Environment(
                loader=FileSystemLoader(str(self.templates_dir)),
                trim_blocks=True,
                lstrip_blocks=True,
                autoescape=False,
                undefined=StrictUndefined,
            )
        return self._env.get_template(_TEMPLATE_NAME)

    def _parse(self, path: Path) -> _SourceFile:
        try:
            tree, source = self._parser.parse_file(path)
        except DiscoveryError as exc:
            raise ConversionError(str(exc)) from exc
        error = first_error(tree.root_node)
        if error is not None:
            raise ConversionError(f"parse {path}: syntax error at line {error.start_point[0] + 1}")
        return _SourceFile(
            path=path,
            origin=self._origin(path),
            source=source,
            tree=tree,
            imports=_collect_imports(tree.root_node, source),
        )

    def _origin(self, path: Path) -> str:
        try:
            return path.relative_to(self.pkg_dir).as_posix()
        except ValueError:
            return path.name

    def _convert_spec(
        self, spec: Node, comments: List[Node], scope: _Scope
    ) -> Optional[TSDeclaration]:
        source = scope.file.source
        name = node_text(spec.child_by_field_name("name"), source)
        type_node = spec.child_by_field_name("type")
        if not is_exported(name) or type_node is None:
            return None

        params = _type_param_names(spec.child_by_field_name("type_parameters"), source)
        scope = replace(scope, type_params=frozenset(params))
        declaration = TSDeclaration(
            origin=scope.file.origin,
            name=self.namer(scope.package.info.import_path, name),
            doc=_jsdoc(comment_lines(comments, source)),
            type_params=f"<{', '.join(params)}>" if params else "",
        )

        is_definition = spec.type == "type_spec"
        if type_node.type == "struct_type":
            declaration.kind = "interface"
            declaration.fields, declaration.extends = self._struct_members(type_node, scope)
        elif type_node.type == "interface_type":
            declaration.kind = "interface"
            declaration.extends = self._embedded_interfaces(type_node, scope)
        elif (
            is_definition
            and name in scope.package.enum_values
            and node_text(type_node, source) in _BASIC_TYPES
        ):
            declaration.type = " | ".join(scope.package.enum_values[name])
        else:
            declaration.type = self._ts_type(type_node, scope)
        return declaration

    def _struct_members(self, struct_node: Node, scope: _Scope) -> Tuple[List[TSField], List[str]]:
        source = scope.file.source
        fields: List[TSField] = []
        extends: List[str] = []
        body = next(
            (child for child in struct_node.named_children if child.type == "field_declaration_list"),
            None,
        )
        if body is None:
            return fields, extends

        for declaration, comments in with_leading_comments(body.named_children):
            if declaration.type != "field_declaration":
                continue
            type_node = declaration.child_by_field_name("type")
            if type_node is None:
                continue
            json_name, tag_options = _json_tag(node_text(declaration.child_by_field_name("tag"), source))
            if json_name == "-" and not tag_options:
                continue

            ts_type = self._ts_type(type_node, scope)
            pointer = type_node.type == "pointer_type" or any(
                child.type == "*" for child in declaration.children
            )
            names = [node_text(node, source) for node in declaration.children_by_field_name("name")]
            if not names:
                embedded = _embedded_name(type_node, source)
                if not json_name:
                    if is_exported(embedded) and _EXTENDABLE.match(ts_type) and ts_type not in _TS_PRIMITIVES:
                        extends.append(ts_type)
                    continue
                names = [embedded]
                if pointer and type_node.type != "pointer_type":
                    ts_type = _nullable(ts_type)

            doc = [f"// {line}".rstrip() for line in comment_lines(comments, source)]
            optional = pointer or "omitempty" in tag_options or "omitzero" in tag_options
            for go_name in names:
                if not is_exported(go_name):
                    continue
                fields.append(
                    TSField(
                        name=_property_name(json_name or go_name),
                        type=ts_type,
                        optional=optional,
                        doc=doc,
                    )
                )
        return fields, extends

    def _embedded_interfaces(self, interface_node: Node, scope: _Scope) -> List[str]:
        extends: List[str] = []
        for element in interface_node.named_children:
            if element.type not in {"type_elem", "constraint_elem", "interface_type_name"}:
                continue
            members = element.named_children
            # Unions like `~int | ~string` are constraints, not embeddings.
            if len(members) != 1:
                continue
            ts_type = self._ts_type(members[0], scope)
            if _EXTENDABLE.match(ts_type) and ts_type not in _TS_PRIMITIVES:
                extends.append(ts_type)
        return extends

    def _ts_type(self, node: Optional[Node], scope: _Scope) -> str:
        if node is None:
            return "unknown"
        source = scope.file.source
        kind = node.type

        if kind == "type_identifier":
            return self._resolve_local(node_text(node, source), scope)
        if kind == "qualified_type":
            return self._resolve_qualified(
                node_text(node.child_by_field_name("package"), source),
                node_text(node.child_by_field_name("name"), source),
                scope,
            )
        if kind == "pointer_type":
            return _nullable(self._ts_type(_first_named(node), scope))
        if kind == "slice_type":
            element = node.child_by_field_name("element")
            if element is not None and node_text(element, source) == "byte":
                return "string"
            return _nullable(f"readonly {_array_element(self._ts_type(element, scope))}[]")
        if kind == "array_type":
            element_type = self._ts_type(node.child_by_field_name("element"), scope)
            return f"readonly {_array_element(element_type)}[]"
        if kind == "map_type":
            key = self._ts_type(node.child_by_field_name("key"), scope)
            value = self._ts_type(node.child_by_field_name("value"), scope)
            return f"Record<{'number' if key == 'number' else 'string'}, {value}>"
        if kind == "generic_type":
            base = self._ts_type(node.child_by_field_name("type"), scope)
            arguments = node.child_by_field_name("type_arguments")
            if base in _TS_PRIMITIVES or arguments is None:
                return base
            args = [self._ts_type(_unwrap_type_elem(arg), scope) for arg in arguments.named_children]
            return f"{base}<{', '.join(args)}>"
        if kind == "struct_type":
            fields, _ = self._struct_members(node, scope)
            if not fields:
                return "Record<string, never>"
            members = " ".join(
                f"readonly {item.name}{'?' if item.optional else ''}: {item.type};" for item in fields
            )
            return "{ " + members + " }"
        if kind == "parenthesized_type":
            return self._ts_type(_first_named(node), scope)
        return "unknown"

    def _resolve_local(self, name: str, scope: _Scope) -> str:
        if name in scope.type_params:
            return name
        if name in scope.package.type_names:
            return self.namer(scope.package.info.import_path, name)
        return _BASIC_TYPES.get(name, "unknown")

    def _resolve_qualified(self, alias: str, name: str, scope: _Scope) -> str:
        import_path = scope.file.imports.get(alias)
        if import_path is None:
            return "unknown"
        target = self._by_import_path.get(import_path)
        if target is not None and name in target.type_names:
            return self.namer(import_path, name)
        return STANDARD_MAPPINGS.get((import_path, name), "unknown")


def _collect_imports(root: Node, source: bytes) -> Dict[str, str]:
    imports: Dict[str, str] = {}
    for declaration in root.children:
        if declaration.type != "import_declaration":
            continue
        specs: List[Node] = []
        for child in declaration.named_children:
            if child.type == "import_spec":
                specs.append(child)
            elif child.type == "import_spec_list":
                specs.extend(spec for spec in child.named_children if spec.type == "import_spec")
        for spec in specs:
            path = _unquote(node_text(spec.child_by_field_name("path"), source))
            alias_node = spec.child_by_field_name("name")
            alias = node_text(alias_node, source) if alias_node is not None else _package_name(path)
            if path and alias not in {".", "_"}:
                imports[alias] = path
    return imports


def _collect_enum_values(source_file: _SourceFile, values: Dict[str, List[str]]) -> None:
    """Record typed constant literals per type name, following ``iota`` rules."""
    source = source_file.source
    for declaration in source_file.tree.root_node.children:
        if declaration.type != "const_declaration":
            continue
        type_name = ""
        expressions: List[Node] = []
        for iota, spec in enumerate(
            child for child in declaration.named_children if child.type == "const_spec"
        ):
            value_node = spec.child_by_field_name("value")
            # A spec without a value repeats the previous type and expressions.
            if value_node is not None:
                type_name = node_text(spec.child_by_field_name("type"), source)
                expressions = list(value_node.named_children)
            if not type_name:
                continue
            for index, name_node in enumerate(spec.children_by_field_name("name")):
                if node_text(name_node, source) == "_" or index >= len(expressions):
                    continue
                literal = _const_literal(expressions[index], iota, source)
                if literal is None:
                    continue
                bucket = values.setdefault(type_name, [])
                if literal not in bucket:
                    bucket.append(literal)


def _const_literal(node: Node, iota: int, source: bytes) -> Optional[str]:
    if node.type in {"interpreted_string_literal", "raw_string_literal"}:
        return json.dumps(_unquote(node_text(node, source)))
    number = _eval_int(node, iota, source)
    return None if number is None else str(number)


def _eval_int(node: Optional[Node], iota: int, source: bytes) -> Optional[int]:
    if node is None:
        return None
    text = node_text(node, source)
    kind = node.type
    if kind == "int_literal":
        digits = text.replace("_", "")
        try:
            return int(digits, 0)
        except ValueError:
            # Go accepts legacy octal like 0755.
            try:
                return int(digits, 8)
            except ValueError:
                return None
    if kind == "iota" or (kind == "identifier" and text == "iota"):
        return iota
    if kind == "parenthesized_expression":
        return _eval_int(_first_named(node), iota, source)
    if kind == "unary_expression":
        operand = _eval_int(node.child_by_field_name("operand"), iota, source)
        operator_text = node_text(node.child_by_field_name("operator"), source)
        if operand is None or operator_text not in {"-", "+"}:
            return None
        return -operand if operator_text == "-" else operand
    if kind == "binary_expression":
        left = _eval_int(node.child_by_field_name("left"), iota, source)
        right = _eval_int(node.child_by_field_name("right"), iota, source)
        operator_text = node_text(node.child_by_field_name("operator"), source)
        if left is None or right is None:
            return None
        operation = _INT_OPERATORS.get(operator_text)
        return operation(left, right) if operation is not None else None
    return None


def _type_param_names(node: Optional[Node], source: bytes) -> List[str]:
    if node is None:
        return []
    names: List[str] = []
    for declaration in node.named_children:
        names.extend(node_text(name, source) for name in declaration.children_by_field_name("name"))
    return names


def _embedded_name(node: Node, source: bytes) -> str:
    if node.type == "qualified_type":
        return node_text(node.child_by_field_name("name"), source)
    if node.type == "generic_type":
        inner = node.child_by_field_name("type")
        return _embedded_name(inner, source) if inner is not None else ""
    if node.type == "pointer_type":
        inner = _first_named(node)
        return _embedded_name(inner, source) if inner is not None else ""
    return node_text(node, source)


def _json_tag(tag: str) -> Tuple[str, Set[str]]:
    match = _JSON_TAG.search(tag)
    if match is None:
        return "", set()
    name, *options = match.group(1).split(",")
    return name, set(options)


def _jsdoc(lines: List[str]) -> List[str]:
    if not lines:
        return []
    body = [f" * {_escape_comment(line)}".rstrip() for line in lines]
    return ["/**", *body, " */"]


def _escape_comment(line: str) -> str:
    return line.replace("*/", "*\\/")


def _property_name(name: str) -> str:
    return name if _IDENTIFIER.match(name) else json.dumps(name)


def _nullable(ts_type: str) -> str:
    if ts_type == "unknown" or ts_type.endswith(" | null"):
        return ts_type
    return f"{ts_type} | null"


def _array_element(ts_type: str) -> str:
    if " | " in ts_type or ts_type.startswith("readonly "):
        return f"({ts_type})"
    return ts_type


def _first_named(node: Node) -> Optional[Node]:
    return node.named_children[0] if node.named_children else None


def _unwrap_type_elem(node: Node) -> Node:
    if node.type == "type_elem" and node.named_children:
        return node.named_children[0]
    return node


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == "`" and text[-1] == "`":
        return text[1:-1]
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        try:
            return json.loads(text)
        except ValueError:
            return text[1:-1]
    return text


def _package_name(import_path: str) -> str:
    segments = [segment for segment in import_path.split("/") if segment]
    if not segments:
        return ""
    if len(segments) > 1 and _MAJOR_VERSION.match(segments[-1]):
        return segments[-2]
    return segments[-1]


__all__ = ["STANDARD_MAPPINGS", "TSDeclaration", "TSField", "TreeSitterGoEngine"]
