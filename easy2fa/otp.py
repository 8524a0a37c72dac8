"""
HOTP (RFC 4226) and TOTP (RFC 6238) code derivation and verification.

Every function here is pure apart from the random source used by
generate_seed and the clock used for TOTP counters; both can be injected.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
import string
import struct
import time
from typing import Callable, Optional, Union

from .errors import InvalidArgument

logger = logging.getLogger(__name__)

RandomSource = Callable[[int], bytes]
Clock        = Callable[[], float]

SEED_ALPHABET = string.digits + string.ascii_lowercase
# 252 is the largest multiple of 36 that fits in a byte
_UNBIASED_LIMIT = 256 - 256 % len(SEED_ALPHABET)

COUNTER_MIN = -(2 ** 63)
COUNTER_MAX = 2 ** 63 - 1


def _require_int(name: str, value, minimum: Optional[int] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {type(value).__name__}")
    if minimum is not None and value < minimum:
        raise InvalidArgument(f"{name} must be >= {minimum}, got {value}", context={name: value})
    return value


def _require_secret(secret) -> bytes:
    if not isinstance(secret, str):
        raise InvalidArgument(f"secret must be a string, got {type(secret).__name__}")
    if not secret:
        raise InvalidArgument("secret must not be empty")
    return secret.encode("utf-8")


def generate_seed(length: int = 48, *, random_bytes: Optional[RandomSource] = None,
                  unbiased: bool = False) -> str:
    """
    Generate a secret of `length` characters drawn from 0-9a-z.

    Each character comes from one random byte taken modulo 36, which slightly
    favours the first 4 symbols. Pass unbiased=True to discard bytes >= 252
    instead. Keep the result private: anyone holding it can produce codes.
    """
    _require_int("length", length, 1)
    random_bytes = random_bytes or secrets.token_bytes

    chars = []
    while len(chars) < length:
        value = random_bytes(1)[0]
        if unbiased and value >= _UNBIASED_LIMIT:
            continue
        chars.append(SEED_ALPHABET[value % len(SEED_ALPHABET)])

    logger.debug("generated seed of length %d (unbiased=%s)", length, unbiased)
    return "".join(chars)


def generate_code(secret: str, counter: int, length: int = 6) -> int:
    """Derive the HOTP code for `counter`. Leading zeros are not kept; see format_code."""
    key     = _require_secret(secret)
    counter = _require_int("counter", counter)
    length  = _require_int("length", length, 1)
    if not COUNTER_MIN <= counter <= COUNTER_MAX:
        raise InvalidArgument(f"counter {counter} does not fit in 8 bytes", context={"counter": counter})

    # Pack counter as a signed 8-byte big-endian integer.
    counter_bytes = struct.pack(">q", counter)
    hmac_hash     = hmac.new(key, counter_bytes, hashlib.sha1).digest()
    # Dynamic truncation: 4 bytes at the offset given by the last nibble.
    offset        = hmac_hash[19] & 0x0F
    truncated     = struct.unpack(">I", hmac_hash[offset:offset + 4])[0] & 0x7FFFFFFF

    return int(str(truncated)[-length:].zfill(length))


def format_code(code: int, length: int = 6) -> str:
    """Render a code zero-padded to exactly `length` digits."""
    code   = _require_int("code", code, 0)
    length = _require_int("length", length, 1)
    if code >= 10 ** length:
        raise InvalidArgument(f"code {code} has more than {length} digits")
    return str(code).zfill(length)


def time_counter(step: int = 30, *, clock: Optional[Clock] = None, at: Optional[float] = None) -> int:
    """TOTP counter: number of whole `step`-second periods since the Unix epoch."""
    step = _require_int("step", step, 1)
    now  = at if at is not None else (clock or time.time)()
    return int(now // step)


def generate_totp(secret: str, step: int = 30, length: int = 6, *,
                  clock: Optional[Clock] = None, at: Optional[float] = None) -> int:
    return generate_code(secret, time_counter(step, clock=clock, at=at), length)


def _normalize_code(code: Union[int, str]) -> Optional[int]:
    if isinstance(code, str):
        code = code.strip()
        if not (code.isascii() and code.isdigit()):
            return None
        return int(code)
    return _require_int("code", code)


def verify_hotp(secret: str, code: Union[int, str], counter: int, length: int = 6,
                allowed_before_drift: int = 0, allowed_after_drift: int = 0) -> bool:
    """
    Check `code` against every counter in
    [counter - allowed_before_drift, counter + allowed_after_drift].

    Raises InvalidArgument when any counter of that window falls outside
    the signed 64-bit range.

    The search stops at the first match, so it is not constant time.
    """
    _require_secret(secret)
    _require_int("counter", counter)
    _require_int("length", length, 1)
    _require_int("allowed_before_drift", allowed_before_drift, 0)
    _require_int("allowed_after_drift", allowed_after_drift, 0)

    first = counter - allowed_before_drift
    last  = counter + allowed_after_drift
    # the whole window must be encodable, whether or not the code matches
    if first < COUNTER_MIN or last > COUNTER_MAX:
        raise InvalidArgument(f"counter window {first}..{last} does not fit in 8 bytes",
                              context={"first": first, "last": last})

    expected = _normalize_code(code)
    if expected is None:
        return False

    logger.debug("searching counters %d..%d", first, last)
    for i in range(first, last + 1):
        if generate_code(secret, i, length) == expected:
            return True
    return False


def verify_totp(secret: str, code: Union[int, str], step: int = 30, length: int = 6, *,
                clock: Optional[Clock] = None, allowed_before_drift: int = 0,
                allowed_after_drift: int = 0) -> bool:
    """Verify a code for the current time period."""
    counter = time_counter(step, clock=clock)
    return verify_hotp(secret, code, counter, length,
                       allowed_before_drift=allowed_before_drift,
                       allowed_after_drift=allowed_after_drift)
