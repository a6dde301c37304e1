from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer

from .config.settings import settings

app = typer.Typer(add_completion=False, help="Print the declaration skeleton of a Rust source tree")

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
	logging.basicConfig(
		level=getattr(logging, level.upper(), logging.WARNING),
		format="%(levelname)s %(name)s: %(message)s",
		stream=sys.stderr,
	)


@app.command()
def main(
	root: Path = typer.Argument(Path("."), help="Directory to scan (defaults to the current directory)"),
) -> None:
	"""Print functions, structs, enums, traits and impl blocks of every .rs file under ROOT, without bodies."""
	from .errors import SkeletonError
	from .extractor import extract_skeletons
	from .io import SkeletonWriter

	_configure_logging(settings.LOG_LEVEL)

	with SkeletonWriter(sys.stdout) as writer:
		try:
			extract_skeletons(root, writer)
		except SkeletonError as exc:
			writer.flush()
			logger.debug(f"Aborting run on {exc.path}", exc_info=exc)
			typer.echo(f"Error: {exc}", err=True)
			raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
	app()
