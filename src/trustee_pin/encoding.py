"""Unpadded base64url helpers shared by key decoding and the envelope."""

from __future__ import annotations

import base64
import binascii
import re

_B64URL_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def b64url_encode(data: bytes) -> str:
    """Encode bytes as unpadded base64url text.

    Args:
        data: Raw bytes.

    Returns:
        Base64url text without padding.
    """
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(value: str) -> bytes:
    """Decode unpadded base64url text, rejecting the standard alphabet.

    Args:
        value: Base64url text without padding.

    Returns:
        Decoded bytes.

    Raises:
        binascii.Error: If the text has characters outside the url-safe
            alphabet or an impossible length.
    """
    if not _B64URL_ALPHABET.fullmatch(value):
        raise binascii.Error(f"Invalid base64url text: {value[:16]!r}")
    if len(value) % 4 == 1:
        raise binascii.Error("Invalid base64url length")
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))
