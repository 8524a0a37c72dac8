"""
easy2fa: HOTP/TOTP code generation and verification, plus otpauth:// URLs
and QR codes for provisioning authenticator apps.
"""

import logging
import os as _os

from .authenticator import Authenticator
from .config import Settings, load_settings, parse_log_level
from .errors import ConfigurationError, Easy2FAError, InvalidArgument
from .otp import (
    format_code,
    generate_code,
    generate_seed,
    generate_totp,
    time_counter,
    verify_hotp,
    verify_totp,
)
from .provisioning import (
    encode_secret,
    generate_qr_code,
    generate_qr_code_async,
    generate_url,
    render_qr_image,
)

__version__ = "1.0.1"

_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())
_level = parse_log_level(_os.environ.get("EASY2FA_LOG_LEVEL"))
if _level is not None:
    _logger.setLevel(_level)

__all__ = [
    "Authenticator",
    "Settings",
    "load_settings",
    # Errors
    "Easy2FAError",
    "InvalidArgument",
    "ConfigurationError",
    # HOTP / TOTP
    "generate_seed",
    "generate_code",
    "format_code",
    "time_counter",
    "generate_totp",
    "verify_hotp",
    "verify_totp",
    # Provisioning
    "encode_secret",
    "generate_url",
    "generate_qr_code",
    "generate_qr_code_async",
    "render_qr_image",
]
