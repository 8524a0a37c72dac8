from __future__ import annotations

from typing import Any, Optional


class Easy2FAError(Exception):
    """Base error for easy2fa."""

    def __init__(self, message: str, *, context: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.context = context or {}


class InvalidArgument(Easy2FAError, ValueError):
    """An argument is missing, out of range or of the wrong type."""


class ConfigurationError(Easy2FAError):
    """An EASY2FA_* environment variable could not be used."""
