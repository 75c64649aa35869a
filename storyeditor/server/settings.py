"""
Runtime settings read from the environment.

A .env file in the working directory (or the project root) is loaded first so
values can be kept out of the shell.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_env_path = os.path.abspath(os.path.join(os.path.dirname(__file__), "../..", ".env"))
load_dotenv(_env_path)
load_dotenv()


@dataclass(frozen=True)
class Settings:
    settle_timeout: float = 1.0
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a number")
        return default


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer")
        return default


def load_settings() -> Settings:
    return Settings(
        settle_timeout=_float_env("STORY_EDITOR_SETTLE_TIMEOUT", Settings.settle_timeout),
        host=os.environ.get("STORY_EDITOR_HOST", Settings.host),
        port=_int_env("STORY_EDITOR_PORT", Settings.port),
        log_level=os.environ.get("STORY_EDITOR_LOG_LEVEL", Settings.log_level).upper(),
    )


settings = load_settings()
