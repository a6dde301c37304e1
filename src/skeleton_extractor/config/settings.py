from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _load_env() -> None:
	# Try CWD first
	load_dotenv(dotenv_path=Path.cwd() / ".env")
	# Walk up from this file looking for .env as fallback
	current = Path(__file__).resolve()
	for parent in [current.parent, *current.parents]:
		candidate = parent / ".env"
		if candidate.exists():
			load_dotenv(dotenv_path=candidate, override=False)
			break


_load_env()


@dataclass
class Settings:
	SOURCE_EXTENSION: str = os.getenv("SKELETON_SOURCE_EXTENSION", ".rs")
	ENCODING: str = os.getenv("SKELETON_ENCODING", "utf-8")
	LOG_LEVEL: str = os.getenv("SKELETON_LOG_LEVEL", "WARNING")

	def normalized_extension(self) -> str:
		ext = self.SOURCE_EXTENSION.strip()
		if ext and not ext.startswith("."):
			ext = "." + ext
		return ext


settings = Settings()
