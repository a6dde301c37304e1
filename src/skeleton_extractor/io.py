from __future__ import annotations

from typing import TextIO

INDENT_UNIT = "    "


class SkeletonWriter:
	def __init__(self, stream: TextIO) -> None:
		self._fh = stream

	def line(self, text: str, depth: int = 0) -> None:
		self._fh.write(INDENT_UNIT * depth + text)
		self._fh.write("\n")

	def flush(self) -> None:
		self._fh.flush()

	def close(self) -> None:
		# The stream belongs to the caller (usually stdout); only flush it
		self.flush()

	def __enter__(self) -> "SkeletonWriter":
		return self

	def __exit__(self, *exc_info: object) -> None:
		self.close()
