from __future__ import annotations

from pathlib import Path
from typing import Union


class SkeletonError(Exception):
    """Base class for errors that abort a skeleton run."""

    action = "process"

    def __init__(self, path: Union[str, Path], cause: object) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to {self.action} {self.path}: {cause}")


class SourceReadError(SkeletonError):
    action = "read"


class SourceParseError(SkeletonError):
    action = "parse"
