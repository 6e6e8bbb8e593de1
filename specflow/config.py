"""Environment-driven settings for the specflow server."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

PROJECT_ROOT_ENV = "SPECFLOW_PROJECT_ROOT"
SPECS_DIR_ENV = "SPECFLOW_SPECS_DIR"
LOG_LEVEL_ENV = "SPECFLOW_LOG_LEVEL"
LOG_FILE_ENV = "SPECFLOW_LOG_FILE"
MAX_CONTENT_BYTES_ENV = "SPECFLOW_MAX_CONTENT_BYTES"

CLAUDE_DIR = Path(".claude")
DEFAULT_SPECS_DIR = CLAUDE_DIR / "specs"
BUGS_DIR = CLAUDE_DIR / "bugs"
TEMPLATES_DIR = CLAUDE_DIR / "templates"
STEERING_DIR = CLAUDE_DIR / "steering"
DEFAULT_MAX_CONTENT_BYTES = 50_000

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class Settings:
    project_root: Optional[Path] = None
    specs_dir: Path = DEFAULT_SPECS_DIR
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    max_content_bytes: int = DEFAULT_MAX_CONTENT_BYTES

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``SPECFLOW_*`` variables.

        Raises:
            ValueError: a variable is set to an unusable value.
        """
        env = os.environ if environ is None else environ

        root = env.get(PROJECT_ROOT_ENV)
        project_root = Path(root).expanduser() if root else None

        specs_dir = Path(env.get(SPECS_DIR_ENV) or DEFAULT_SPECS_DIR)
        if specs_dir.is_absolute():
            raise ValueError(f"{SPECS_DIR_ENV} must be relative to the project root, got '{specs_dir}'.")

        log_level = (env.get(LOG_LEVEL_ENV) or "INFO").upper()
        if log_level not in _LOG_LEVELS:
            raise ValueError(f"{LOG_LEVEL_ENV} must be one of {', '.join(_LOG_LEVELS)}, got '{log_level}'.")

        log_file_value = env.get(LOG_FILE_ENV)
        log_file = Path(log_file_value).expanduser() if log_file_value else None

        raw_max = env.get(MAX_CONTENT_BYTES_ENV)
        max_content_bytes = DEFAULT_MAX_CONTENT_BYTES
        if raw_max:
            try:
                max_content_bytes = int(raw_max)
            except ValueError:
                raise ValueError(f"{MAX_CONTENT_BYTES_ENV} must be an integer, got '{raw_max}'.") from None
            if max_content_bytes < 0:
                raise ValueError(f"{MAX_CONTENT_BYTES_ENV} must not be negative, got {max_content_bytes}.")

        return cls(
            project_root=project_root,
            specs_dir=specs_dir,
            log_level=log_level,
            log_file=log_file,
            max_content_bytes=max_content_bytes,
        )
