from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

import tree_sitter_rust
from tree_sitter import Language, Node, Parser

from .config.settings import settings
from .errors import SourceParseError, SourceReadError
from .filesystem import discover_source_files
from .io import SkeletonWriter
from .models import (
    Declaration,
    EnumDecl,
    FunctionDecl,
    ImplDecl,
    MethodSignature,
    OtherDecl,
    SourceTree,
    StructDecl,
    StructField,
    TraitDecl,
    Variant,
    Visibility,
)
from .printer import display_path, render, render_header
from .tokens import COMMENT_NODE_TYPES, node_text, render_node, render_nodes

logger = logging.getLogger(__name__)

RUST_LANGUAGE = Language(tree_sitter_rust.language())

# Children of a function node that are not part of its signature
_SIGNATURE_EXCLUDED = frozenset({"visibility_modifier", "block", ";"})
_METHOD_NODE_TYPES = frozenset({"function_item", "function_signature_item"})
_RAW_STRING = re.compile(r'^r(#*)"(.*)"\1$', re.DOTALL)
_ESCAPE = re.compile(r"\\(u\{([0-9a-fA-F_]+)\}|x([0-9a-fA-F]{2})|\n\s*|.)")
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", "'": "'", '"': '"'}


def _first_error(node: Node) -> Optional[Node]:
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _describe_error(root: Node) -> str:
    node = _first_error(root) or root
    row, column = node.start_point
    if node.is_missing:
        return f"missing `{node.type}` at line {row + 1}, column {column + 1}"
    return f"syntax error at line {row + 1}, column {column + 1}"


# ---------------------------------------------------------------------------
# Doc comments and attributes
# ---------------------------------------------------------------------------


def _block_doc_lines(body: str) -> List[str]:
    lines = []
    for index, line in enumerate(body.splitlines()):
        line = line.rstrip()
        stripped = line.lstrip()
        # Every line after the opening one may carry a leading " * " gutter
        if index > 0 and stripped.startswith("*"):
            line = stripped[1:]
        lines.append(line)
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def _doc_lines(comment: Node) -> List[str]:
    """Return the doc values of an outer doc comment, or [] for other comments."""
    text = node_text(comment).rstrip("\r\n")
    if comment.type == "line_comment":
        if text.startswith("///") and not text.startswith("////"):
            return [text[3:]]
        return []
    if text.startswith("/**") and not text.startswith("/***") and len(text) > 4:
        return _block_doc_lines(text[3:-2])
    return []


def _decode_escape(match: re.Match) -> str:
    if match.group(2):
        return chr(int(match.group(2).replace("_", ""), 16))
    if match.group(3):
        return chr(int(match.group(3), 16))
    escape = match.group(1)
    if escape.startswith("\n"):
        # Line continuation: the newline and leading whitespace are dropped
        return ""
    return _SIMPLE_ESCAPES.get(escape, match.group(0))


def _string_value(literal: Node) -> str:
    text = node_text(literal)
    if literal.type == "raw_string_literal":
        match = _RAW_STRING.match(text)
        return match.group(2) if match else text
    return _ESCAPE.sub(_decode_escape, text[1:-1])


def _doc_from_attribute(item: Node) -> Optional[str]:
    """Return the value of ``#[doc = "..."]``, or None for any other attribute."""
    attribute = next((c for c in item.named_children if c.type == "attribute"), None)
    if attribute is None or not attribute.named_children:
        return None
    path = attribute.named_children[0]
    if path.type != "identifier" or node_text(path) != "doc":
        return None
    value = attribute.child_by_field_name("value")
    if value is None or value.type not in ("string_literal", "raw_string_literal"):
        return None
    return _string_value(value)


def _with_leading_attrs(nodes: Iterable[Node]) -> Iterator[Tuple[Node, List[str], List[str]]]:
    """Pair each named member with the doc lines and other attributes before it.

    Plain comments, inner attributes and punctuation are skipped. Docs and
    attributes are reset after every member, recognized or not.
    """
    docs: List[str] = []
    attrs: List[str] = []
    for node in nodes:
        if node.type in COMMENT_NODE_TYPES:
            docs.extend(_doc_lines(node))
            continue
        if node.type == "attribute_item":
            doc = _doc_from_attribute(node)
            if doc is None:
                attrs.append(render_node(node))
            else:
                docs.extend(doc.split("\n"))
            continue
        if node.type == "inner_attribute_item" or not node.is_named:
            continue
        yield node, docs, attrs
        docs, attrs = [], []


# ---------------------------------------------------------------------------
# Item builders
# ---------------------------------------------------------------------------


def _child_of_type(node: Node, node_type: str) -> Optional[Node]:
    return next((c for c in node.children if c.type == node_type), None)


def _has_token(node: Node, token: str) -> bool:
    return any(c.type == token for c in node.children)


def _field_text(node: Node, field_name: str) -> str:
    child = node.child_by_field_name(field_name)
    return render_node(child) if child is not None else ""


def _visibility_of(modifier: Optional[Node]) -> Visibility:
    if modifier is None:
        return Visibility()
    clause = render_node(modifier)
    if clause == "pub":
        return Visibility(kind="public")
    return Visibility(kind="restricted", clause=clause)


def _visibility(node: Node) -> Visibility:
    return _visibility_of(_child_of_type(node, "visibility_modifier"))


def _where_clause(node: Node) -> str:
    where = _child_of_type(node, "where_clause")
    return render_node(where) if where is not None else ""


def _signature(node: Node) -> str:
    """Render a function's qualifiers, name, generics, parameters, return type
    and where-clause, leaving out visibility and body."""
    return render_nodes(c for c in node.children if c.type not in _SIGNATURE_EXCLUDED)


def _named_fields(body: Node) -> List[StructField]:
    fields = []
    for member, _docs, attrs in _with_leading_attrs(body.children):
        if member.type != "field_declaration":
            continue
        fields.append(
            StructField(
                name=_field_text(member, "name"),
                ty=_field_text(member, "type"),
                visibility=_visibility(member),
                attributes=attrs,
            )
        )
    return fields


def _tuple_fields(body: Node) -> List[StructField]:
    # Positional fields are flat children: [attrs] [visibility] type ","
    fields = []
    modifier: Optional[Node] = None
    attrs: List[str] = []
    for child in body.children:
        if child.type in COMMENT_NODE_TYPES or child.type in ("(", ")", ","):
            continue
        if child.type == "attribute_item":
            if _doc_from_attribute(child) is None:
                attrs.append(render_node(child))
            continue
        if child.type == "visibility_modifier":
            modifier = child
            continue
        fields.append(
            StructField(ty=render_node(child), visibility=_visibility_of(modifier), attributes=attrs)
        )
        modifier, attrs = None, []
    return fields


def _fields_of(body: Optional[Node]) -> Tuple[str, List[StructField]]:
    if body is None:
        return "unit", []
    if body.type == "field_declaration_list":
        return "named", _named_fields(body)
    return "tuple", _tuple_fields(body)


def _methods(body: Optional[Node]) -> List[MethodSignature]:
    if body is None:
        return []
    methods = []
    for member, docs, _attrs in _with_leading_attrs(body.children):
        if member.type not in _METHOD_NODE_TYPES:
            continue
        methods.append(
            MethodSignature(
                name=_field_text(member, "name"),
                signature=_signature(member),
                visibility=_visibility(member),
                docs=docs,
            )
        )
    return methods


def _build_function(node: Node, docs: List[str]) -> FunctionDecl:
    return FunctionDecl(
        name=_field_text(node, "name"),
        visibility=_visibility(node),
        generics=_field_text(node, "type_parameters"),
        where_clause=_where_clause(node),
        docs=docs,
        signature=_signature(node),
    )


def _build_struct(node: Node, docs: List[str]) -> StructDecl:
    shape, fields = _fields_of(node.child_by_field_name("body"))
    return StructDecl(
        name=_field_text(node, "name"),
        visibility=_visibility(node),
        generics=_field_text(node, "type_parameters"),
        where_clause=_where_clause(node),
        docs=docs,
        shape=shape,
        fields=fields,
    )


def _build_enum(node: Node, docs: List[str]) -> EnumDecl:
    variants = []
    body = node.child_by_field_name("body")
    for member, variant_docs, attrs in _with_leading_attrs(body.children if body is not None else []):
        if member.type != "enum_variant":
            continue
        shape, fields = _fields_of(member.child_by_field_name("body"))
        variants.append(
            Variant(
                name=_field_text(member, "name"),
                docs=variant_docs,
                shape=shape,
                fields=fields,
                discriminant=_field_text(member, "value") or None,
                attributes=attrs,
            )
        )
    return EnumDecl(
        name=_field_text(node, "name"),
        visibility=_visibility(node),
        generics=_field_text(node, "type_parameters"),
        where_clause=_where_clause(node),
        docs=docs,
        variants=variants,
    )


def _build_trait(node: Node, docs: List[str]) -> TraitDecl:
    bounds = node.child_by_field_name("bounds")
    supertraits = [render_node(b) for b in bounds.named_children] if bounds is not None else []
    return TraitDecl(
        name=_field_text(node, "name"),
        visibility=_visibility(node),
        generics=_field_text(node, "type_parameters"),
        where_clause=_where_clause(node),
        docs=docs,
        unsafe=_has_token(node, "unsafe"),
        supertraits=[s for s in supertraits if s],
        methods=_methods(node.child_by_field_name("body")),
    )


def _build_impl(node: Node, docs: List[str]) -> ImplDecl:
    trait = node.child_by_field_name("trait")
    self_ty = _field_text(node, "type")
    return ImplDecl(
        name=self_ty,
        generics=_field_text(node, "type_parameters"),
        where_clause=_where_clause(node),
        docs=docs,
        unsafe=_has_token(node, "unsafe"),
        negative=_has_token(node, "!"),
        trait_path=render_node(trait) if trait is not None else None,
        self_ty=self_ty,
        methods=_methods(node.child_by_field_name("body")),
    )


_BUILDERS: Dict[str, Callable[[Node, List[str]], Declaration]] = {
    "function_item": _build_function,
    "struct_item": _build_struct,
    "enum_item": _build_enum,
    "trait_item": _build_trait,
    "impl_item": _build_impl,
}


def _iter_declarations(nodes: Iterable[Node]) -> Iterator[Declaration]:
    for node, docs, _attrs in _with_leading_attrs(nodes):
        builder = _BUILDERS.get(node.type)
        if builder is None:
            logger.debug(f"Skipping unsupported item kind: {node.type}")
            yield OtherDecl(node_type=node.type)
            continue
        yield builder(node, docs)


# ---------------------------------------------------------------------------
# Parse front end and driver
# ---------------------------------------------------------------------------


def parse_source(text: str, path: Path | str = "<memory>") -> SourceTree:
    """Parse Rust source text into a SourceTree.

    Raises SourceParseError if the syntax tree contains an error or missing node.
    """
    parser = Parser(RUST_LANGUAGE)
    tree = parser.parse(text.encode("utf-8"))
    root = tree.root_node
    if root.has_error:
        raise SourceParseError(path, _describe_error(root))
    return SourceTree(path=str(path), declarations=list(_iter_declarations(root.children)))


def _read_source(path: Path, encoding: str) -> str:
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(path, exc) from exc


def parse_file(path: Path, encoding: Optional[str] = None) -> SourceTree:
    text = _read_source(path, encoding or settings.ENCODING)
    return parse_source(text, path)


def extract_skeletons(
    root: Path,
    writer: SkeletonWriter,
    extension: Optional[str] = None,
    encoding: Optional[str] = None,
) -> int:
    """Render the skeleton of every source file under root, in discovery order.

    The first unreadable or unparsable file aborts the run with a
    SourceReadError or SourceParseError; blocks already written stay written.
    Returns the number of files rendered.
    """
    extension = extension or settings.normalized_extension()

    files_rendered = 0
    for path in discover_source_files(root, extension):
        tree = parse_file(path, encoding)
        render_header(display_path(path, root), writer)
        render(tree, writer)
        writer.flush()
        files_rendered += 1
        logger.debug(f"Rendered {len(tree.names())} declarations from {path}")

    logger.info(f"Rendered {files_rendered} files")
    return files_rendered
