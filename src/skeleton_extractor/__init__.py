"""Rust declaration skeleton extractor.

Exposes a simple API:
    extract_skeletons(root: Path, writer: SkeletonWriter) -> int
which prints the body-less skeleton of every .rs file under root and returns
the number of files rendered.
"""

from .extractor import extract_skeletons, parse_file, parse_source  # noqa: F401
from .io import SkeletonWriter  # noqa: F401
from .printer import render  # noqa: F401

__all__ = ["extract_skeletons", "parse_file", "parse_source", "render", "SkeletonWriter"]
