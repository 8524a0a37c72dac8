"""otpauth:// provisioning URLs and the QR codes that carry them."""

from __future__ import annotations

import asyncio
import base64
import io
import logging
import urllib.parse
from typing import Optional

import qrcode

from .errors import InvalidArgument

logger = logging.getLogger(__name__)

# Characters JavaScript's encodeURIComponent leaves alone, on top of quote()'s own.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def _encode_component(value: str) -> str:
    return urllib.parse.quote(value, safe=_URI_COMPONENT_SAFE)


def encode_secret(secret: str) -> str:
    """Base32 form of the secret as authenticator apps expect it, without '=' padding."""
    return base64.b32encode(secret.encode("utf-8")).decode("ascii").replace("=", "")


def generate_url(secret: str, issuer: Optional[str] = None, account: Optional[str] = None) -> str:
    """
    Build the otpauth:// URL for `secret`.

    The account name is appended right after the issuer parameter with no
    separator of its own, e.g. otpauth://totp/?issuer=Acmealice&secret=...
    (percent-encoded).
    """
    if not isinstance(secret, str) or not secret:
        raise InvalidArgument("secret must be a non-empty string")

    url = "otpauth://totp/"
    if issuer:
        url += "?issuer=" + _encode_component(issuer)
    if account:
        url += _encode_component(account)
    url += "&secret=" + _encode_component(encode_secret(secret))
    return url


def render_qr_image(text: str):
    """Render `text` into a black-on-white QR image."""
    qr  = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M)
    qr.add_data(text)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    logger.debug("rendered QR code version %s", qr.version)
    return img


def render_qr_data_url(text: str) -> str:
    img     = render_qr_image(text)
    img_io  = io.BytesIO()
    img.save(img_io, format="PNG")
    encoded = base64.b64encode(img_io.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{encoded}"


def _qr_text(seed: Optional[str], issuer: Optional[str], account: Optional[str],
             url: Optional[str]) -> str:
    if not seed and not url:
        raise InvalidArgument("You must provide either a seed or a URL.")
    if url:
        return url
    return generate_url(seed, issuer, account)


def generate_qr_code(seed: Optional[str] = None, issuer: Optional[str] = None,
                     account: Optional[str] = None, url: Optional[str] = None) -> str:
    """
    Render a QR code as a PNG data URL.

    `url` is rendered as is when given; otherwise the URL is built from
    `seed`, `issuer` and `account`. One of `seed` or `url` is required.
    """
    return render_qr_data_url(_qr_text(seed, issuer, account, url))


async def generate_qr_code_async(seed: Optional[str] = None, issuer: Optional[str] = None,
                                 account: Optional[str] = None, url: Optional[str] = None) -> str:
    """Like generate_qr_code, with the rendering done in a worker thread."""
    text = _qr_text(seed, issuer, account, url)
    return await asyncio.to_thread(render_qr_data_url, text)
