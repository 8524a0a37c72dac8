"""Defaults read from EASY2FA_* environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError

DEFAULT_SEED_LENGTH = 48
DEFAULT_DIGITS      = 6
DEFAULT_STEP        = 30
DEFAULT_DRIFT       = 0


@dataclass(frozen=True)
class Settings:
    seed_length: int      = DEFAULT_SEED_LENGTH
    digits: int           = DEFAULT_DIGITS
    step: int             = DEFAULT_STEP
    drift: int            = DEFAULT_DRIFT
    issuer: Optional[str] = None


def _int_from_env(name: str, default: int, minimum: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}", context={"variable": name}) from e
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}", context={"variable": name})
    return value


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    return Settings(
        seed_length = _int_from_env("EASY2FA_SEED_LENGTH", DEFAULT_SEED_LENGTH, 1),
        digits      = _int_from_env("EASY2FA_DIGITS", DEFAULT_DIGITS, 1),
        step        = _int_from_env("EASY2FA_STEP", DEFAULT_STEP, 1),
        drift       = _int_from_env("EASY2FA_DRIFT", DEFAULT_DRIFT, 0),
        issuer      = os.environ.get("EASY2FA_ISSUER") or None,
    )


def parse_log_level(raw: Optional[str]) -> Optional[int]:
    """Numeric level for an EASY2FA_LOG_LEVEL value ("debug", "10", ...), None if unusable."""
    if raw is None or raw.strip() == "":
        return None
    raw = raw.strip()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else None
