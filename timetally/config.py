from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

SAVE_FILE_ENV = "TIMETALLY_SAVE_FILE"
LOG_LEVEL_ENV = "TIMETALLY_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True, slots=True)
class Config:
    save_file: Path
    log_level: int


def _required_env(name: str) -> str:
    value = (os.getenv(name) or "").strip()
    if not value:
        raise ValueError(f"Missing required environment variable: {name}")
    return value


def log_level_from_env() -> int:
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level in {LOG_LEVEL_ENV}: {level_name}")
    return level


def load_config() -> Config:
    return Config(
        save_file=Path(_required_env(SAVE_FILE_ENV)).expanduser(),
        log_level=log_level_from_env(),
    )
