from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from .io import SkeletonWriter
from .models import (
    Declaration,
    EnumDecl,
    FunctionDecl,
    ImplDecl,
    MethodSignature,
    SourceTree,
    StructDecl,
    StructField,
    TraitDecl,
    Variant,
)

HEADER_MARKER = "// *************"


def display_path(path: Path, root: Path) -> str:
    """Path shown in a file header: relative to root, else absolute."""
    try:
        relative = path.relative_to(root)
    except ValueError:
        return path.resolve().as_posix()
    if relative == Path("."):
        # root is the file itself
        return path.name
    return relative.as_posix()


def render_header(shown_path: str, writer: SkeletonWriter) -> None:
    writer.line(f"{HEADER_MARKER} {shown_path}")


def _join(*parts: str) -> str:
    return " ".join(p for p in parts if p)


def _render_docs(docs: Iterable[str], writer: SkeletonWriter, depth: int) -> None:
    for doc in docs:
        writer.line(f"///{doc}", depth)


def _render_field(field: StructField) -> str:
    if field.name:
        return _join(*field.attributes, field.visibility.render(), field.name, ":", field.ty)
    return _join(*field.attributes, field.visibility.render(), field.ty)


def _fields_block(shape: str, fields: List[StructField]) -> str:
    rendered = " , ".join(_render_field(f) for f in fields)
    if shape == "named":
        return f"{{ {rendered} }}" if rendered else "{}"
    if shape == "tuple":
        return f"({rendered})"
    return ""


def _render_methods(methods: List[MethodSignature], writer: SkeletonWriter, depth: int) -> None:
    for method in methods:
        _render_docs(method.docs, writer, depth)
        writer.line(_join(method.visibility.render(), method.signature, ";"), depth)


def _render_function(decl: FunctionDecl, writer: SkeletonWriter, depth: int) -> None:
    writer.line(_join(decl.visibility.render(), decl.signature, ";"), depth)


def _render_struct(decl: StructDecl, writer: SkeletonWriter, depth: int) -> None:
    head = (decl.visibility.render(), "struct", decl.name, decl.generics)
    if decl.shape == "unit":
        writer.line(_join(*head, ";", decl.where_clause), depth)
    else:
        writer.line(_join(*head, _fields_block(decl.shape, decl.fields), decl.where_clause), depth)


def _render_variant(variant: Variant) -> str:
    discriminant = f"= {variant.discriminant}" if variant.discriminant else ""
    return _join(
        *variant.attributes,
        variant.name,
        _fields_block(variant.shape, variant.fields),
        discriminant,
    )


def _render_enum(decl: EnumDecl, writer: SkeletonWriter, depth: int) -> None:
    writer.line(
        _join(decl.visibility.render(), "enum", decl.name, decl.generics, decl.where_clause, "{"),
        depth,
    )
    for variant in decl.variants:
        _render_docs(variant.docs, writer, depth + 1)
        writer.line(_render_variant(variant), depth + 1)
    writer.line("}", depth)


def _render_trait(decl: TraitDecl, writer: SkeletonWriter, depth: int) -> None:
    supertraits = f": {' + '.join(decl.supertraits)}" if decl.supertraits else ""
    writer.line(
        _join(
            decl.visibility.render(),
            "unsafe" if decl.unsafe else "",
            "trait",
            decl.name,
            decl.generics,
            supertraits,
            decl.where_clause,
            "{",
        ),
        depth,
    )
    _render_methods(decl.methods, writer, depth + 1)
    writer.line("}", depth)


def _render_impl(decl: ImplDecl, writer: SkeletonWriter, depth: int) -> None:
    trait_part = ""
    if decl.trait_path:
        trait_part = _join("!" if decl.negative else "", decl.trait_path, "for")
    writer.line(
        _join(
            "unsafe" if decl.unsafe else "",
            "impl",
            decl.generics,
            trait_part,
            decl.self_ty,
            decl.where_clause,
            "{",
        ),
        depth,
    )
    _render_methods(decl.methods, writer, depth + 1)
    writer.line("}", depth)


def render_declaration(decl: Declaration, writer: SkeletonWriter, depth: int = 0) -> None:
    """Write one declaration and its members; unsupported kinds write nothing."""
    if isinstance(decl, FunctionDecl):
        renderer = _render_function
    elif isinstance(decl, StructDecl):
        renderer = _render_struct
    elif isinstance(decl, EnumDecl):
        renderer = _render_enum
    elif isinstance(decl, TraitDecl):
        renderer = _render_trait
    elif isinstance(decl, ImplDecl):
        renderer = _render_impl
    else:
        return
    _render_docs(decl.docs, writer, depth)
    renderer(decl, writer, depth)


def render(tree: SourceTree, writer: SkeletonWriter) -> None:
    """Write the skeleton of every top-level declaration in source order."""
    for decl in tree.declarations:
        render_declaration(decl, writer)
