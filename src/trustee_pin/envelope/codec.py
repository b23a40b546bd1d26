"""Seal and open self-describing trustee envelopes."""

from __future__ import annotations

import logging

from trustee_pin.config import PinConfig
from trustee_pin.engine import KeyResolutionEngine
from trustee_pin.envelope.jwe import decrypt_compact, encrypt_compact, parse_compact
from trustee_pin.envelope.metadata import CLAIM_NAME, PinMetadata
from trustee_pin.key_material import KeyMaterial, decode_key_material

_LOGGER = logging.getLogger(__name__)


def seal(plaintext: bytes, config: PinConfig, engine: KeyResolutionEngine) -> str:
    """Resolve a key for ``config`` and encrypt ``plaintext`` under it.

    Args:
        plaintext: Bytes to protect.
        config: Parsed pin config; embedded in the header as-is.
        engine: Resolution engine used to fetch the key.

    Returns:
        Compact envelope text.
    """
    material = decode_key_material(
        engine.resolve(config.resolution_request(), config.retry_policy())
    )
    metadata = PinMetadata.from_config(config)
    token = seal_with_key(plaintext, metadata, material)
    _LOGGER.info("Encryption successful.")
    return token


def seal_with_key(
    plaintext: bytes, metadata: PinMetadata, material: KeyMaterial
) -> str:
    """Encrypt with already-resolved key material.

    Args:
        plaintext: Bytes to protect.
        metadata: Pin metadata to embed.
        material: Decoded key material.

    Returns:
        Compact envelope text.
    """
    return encrypt_compact(
        plaintext,
        {CLAIM_NAME: metadata.to_claim()},
        material.content_encryption_key(),
    )


def read_metadata(token: str) -> PinMetadata:
    """Return the pin metadata of an envelope without decrypting it.

    Args:
        token: Compact envelope text.

    Returns:
        Embedded pin metadata.

    Raises:
        CryptoError: If the envelope or its metadata is malformed.
    """
    return PinMetadata.from_claim(parse_compact(token).header.get(CLAIM_NAME))


def open_envelope(token: str, engine: KeyResolutionEngine) -> bytes:
    """Re-resolve the envelope's key and decrypt it.

    Args:
        token: Compact envelope text.
        engine: Resolution engine used to fetch the key.

    Returns:
        Original plaintext bytes.

    Raises:
        CryptoError: On malformed envelope, metadata or authentication failure.
    """
    jwe = parse_compact(token)
    metadata = PinMetadata.from_claim(jwe.header.get(CLAIM_NAME))
    _LOGGER.debug(
        "Decrypt with %d server(s), path %s", len(metadata.servers), metadata.path
    )
    material = decode_key_material(
        engine.resolve(metadata.resolution_request(), metadata.retry_policy())
    )
    plaintext = decrypt_compact(jwe, material.content_encryption_key())
    _LOGGER.info("Decryption successful.")
    return plaintext
