"""Envelope codec for the trustee pin."""

from trustee_pin.envelope.codec import (
    open_envelope,
    read_metadata,
    seal,
    seal_with_key,
)
from trustee_pin.envelope.jwe import (
    ALG_DIRECT,
    ENC_A256GCM,
    CompactJwe,
    b64url_encode,
    decrypt_compact,
    encrypt_compact,
    parse_compact,
)
from trustee_pin.envelope.metadata import CLAIM_NAME, PIN_NAME, PinMetadata

__all__ = [
    "ALG_DIRECT",
    "CLAIM_NAME",
    "ENC_A256GCM",
    "PIN_NAME",
    "CompactJwe",
    "PinMetadata",
    "b64url_encode",
    "decrypt_compact",
    "encrypt_compact",
    "open_envelope",
    "parse_compact",
    "read_metadata",
    "seal",
    "seal_with_key",
]
