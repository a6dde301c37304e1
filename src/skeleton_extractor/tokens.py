"""Whitespace-normalized re-emission of syntax tree fragments.

The leaf tokens under a node are joined with single spaces, except that no
space follows ``(`` or ``[`` and none precedes ``)`` or ``]``. An empty brace
pair is written ``{}``. ``fn add(a: i32)`` therefore becomes
``fn add (a : i32)``.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List

from tree_sitter import Node


COMMENT_NODE_TYPES = frozenset({"line_comment", "block_comment"})

# Nodes whose text is emitted as-is instead of being split into children
ATOMIC_NODE_TYPES = frozenset(
    {
        "string_literal",
        "raw_string_literal",
        "char_literal",
        "integer_literal",
        "float_literal",
        "lifetime",
    }
)

_NO_SPACE_AFTER = frozenset({"(", "["})
_NO_SPACE_BEFORE = frozenset({")", "]"})


def node_text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text else ""


def iter_tokens(node: Node) -> Iterator[str]:
    if node.type in COMMENT_NODE_TYPES:
        return
    if node.child_count == 0 or node.type in ATOMIC_NODE_TYPES:
        text = node_text(node)
        if text:
            yield text
        return
    for child in node.children:
        yield from iter_tokens(child)


def join_tokens(tokens: Iterable[str]) -> str:
    out: List[str] = []
    prev = None
    for tok in tokens:
        if prev is not None:
            glued = (
                prev in _NO_SPACE_AFTER
                or tok in _NO_SPACE_BEFORE
                or (prev == "{" and tok == "}")
            )
            if not glued:
                out.append(" ")
        out.append(tok)
        prev = tok
    return "".join(out)


def render_node(node: Node) -> str:
    return join_tokens(iter_tokens(node))


def render_nodes(nodes: Iterable[Node]) -> str:
    return join_tokens(tok for node in nodes for tok in iter_tokens(node))
