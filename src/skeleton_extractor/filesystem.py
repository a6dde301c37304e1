from __future__ import annotations

import logging
from pathlib import Path
from typing import Generator, Iterable


logger = logging.getLogger(__name__)


def discover_source_files(root: Path, extension: str = ".rs") -> Generator[Path, None, None]:
    """Yield source files under root whose suffix equals extension.

    Files are yielded in sorted order for determinism. Entries that are not
    regular files (directories named ``*.rs``, broken symlinks) and directories
    that cannot be listed are skipped silently.
    """
    if root.is_file():
        if root.suffix == extension:
            yield root
        return
    if not root.is_dir():
        logger.debug(f"Scan root {root} is not a directory, nothing to discover")
        return

    candidates: Iterable[Path] = sorted(root.rglob(f"*{extension}"))
    for path in candidates:
        if path.suffix != extension:
            continue
        try:
            if not path.is_file():
                continue
        except OSError:
            continue
        yield path
