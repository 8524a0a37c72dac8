"""Tests for otpauth:// URLs and QR rendering."""

from __future__ import annotations

import asyncio
import base64

import pytest

from easy2fa.errors import InvalidArgument
from easy2fa.provisioning import (
    encode_secret,
    generate_qr_code,
    generate_qr_code_async,
    generate_url,
    render_qr_image,
)

RFC_SECRET = "12345678901234567890"
RFC_SECRET_B32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
PNG_PREFIX = "data:image/png;base64,"


def decode_data_url(data_url: str) -> bytes:
    assert data_url.startswith(PNG_PREFIX)
    return base64.b64decode(data_url[len(PNG_PREFIX):])


def test_encode_secret_strips_padding():
    assert encode_secret(RFC_SECRET) == RFC_SECRET_B32
    assert encode_secret("abc") == "MFRGG"


def test_generate_url_with_issuer_and_account():
    url = generate_url(RFC_SECRET, "Issuer", "acct")
    assert url.startswith("otpauth://totp/")
    assert "issuer=Issuer" in url
    assert f"secret={RFC_SECRET_B32}" in url
    assert url == f"otpauth://totp/?issuer=Issueracct&secret={RFC_SECRET_B32}"


def test_generate_url_secret_only():
    assert generate_url("abc") == "otpauth://totp/&secret=MFRGG"


def test_generate_url_account_only():
    assert generate_url("abc", account="alice") == "otpauth://totp/alice&secret=MFRGG"


def test_generate_url_empty_issuer_is_skipped():
    assert generate_url("abc", issuer="", account="") == "otpauth://totp/&secret=MFRGG"


def test_generate_url_percent_encodes_like_encode_uri_component():
    url = generate_url("abc", "Acme Co!", "a@b.com/(x)")
    assert url == "otpauth://totp/?issuer=Acme%20Co!a%40b.com%2F(x)&secret=MFRGG"


def test_generate_url_rejects_empty_secret():
    with pytest.raises(InvalidArgument):
        generate_url("")


def test_generate_qr_code_requires_seed_or_url():
    with pytest.raises(InvalidArgument, match="seed or a URL"):
        generate_qr_code()
    with pytest.raises(InvalidArgument):
        generate_qr_code(seed="", url="", issuer="Issuer")


def test_generate_qr_code_from_url():
    png = decode_data_url(generate_qr_code(url="otpauth://totp/&secret=MFRGG"))
    assert png.startswith(b"\x89PNG\r\n\x1a\n")


def test_generate_qr_code_from_seed_matches_url():
    from_seed = generate_qr_code(seed=RFC_SECRET, issuer="Issuer", account="acct")
    from_url = generate_qr_code(url=generate_url(RFC_SECRET, "Issuer", "acct"))
    assert from_seed == from_url


def test_generate_qr_code_prefers_url():
    url = "otpauth://totp/&secret=MFRGG"
    assert generate_qr_code(seed=RFC_SECRET, url=url) == generate_qr_code(url=url)


def test_generate_qr_code_async():
    data_url = asyncio.run(generate_qr_code_async(seed=RFC_SECRET, issuer="Issuer"))
    assert data_url == generate_qr_code(seed=RFC_SECRET, issuer="Issuer")


def test_generate_qr_code_async_requires_seed_or_url():
    with pytest.raises(InvalidArgument):
        asyncio.run(generate_qr_code_async())


def test_render_qr_image_size():
    img = render_qr_image("otpauth://totp/&secret=MFRGG")
    # 4 module quiet zone and 10 px modules by default
    assert img.pixel_size > 8 * 10
    assert img.pixel_size % 10 == 0
