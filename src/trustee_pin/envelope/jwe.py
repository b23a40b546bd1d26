"""Compact JWE serialization in direct mode with AES-256-GCM."""

from __future__ import annotations

import binascii
import json
import os
from dataclasses import dataclass

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from trustee_pin.encoding import b64url_decode, b64url_encode
from trustee_pin.errors import CryptoError

ALG_DIRECT = "dir"
ENC_A256GCM = "A256GCM"
_IV_BYTES = 12
_TAG_BYTES = 16


@dataclass(frozen=True)
class CompactJwe:
    """The five parts of a compact JWE, header already decoded."""

    protected: str
    header: dict[str, object]
    encrypted_key: bytes
    iv: bytes
    ciphertext: bytes
    tag: bytes


def encrypt_compact(plaintext: bytes, header: dict[str, object], key: bytes) -> str:
    """Encrypt ``plaintext`` and serialize it as a compact JWE.

    The encoded protected header is the AEAD additional data.

    Args:
        plaintext: Bytes to protect.
        header: Protected header claims besides ``alg`` and ``enc``.
        key: 32-byte content-encryption key.

    Returns:
        Compact serialization ``header..iv.ciphertext.tag``.
    """
    protected_header = {"alg": ALG_DIRECT, "enc": ENC_A256GCM, **header}
    protected = b64url_encode(
        json.dumps(protected_header, separators=(",", ":")).encode("utf-8")
    )
    iv = os.urandom(_IV_BYTES)
    sealed = AESGCM(key).encrypt(iv, plaintext, protected.encode("ascii"))
    ciphertext, tag = sealed[:-_TAG_BYTES], sealed[-_TAG_BYTES:]
    return ".".join(
        [protected, "", b64url_encode(iv), b64url_encode(ciphertext), b64url_encode(tag)]
    )


def parse_compact(token: str) -> CompactJwe:
    """Split and decode a compact JWE without decrypting it.

    Args:
        token: Compact serialization.

    Returns:
        Parsed parts.

    Raises:
        CryptoError: If the token is malformed or not direct-mode A256GCM.
    """
    parts = token.strip().split(".")
    if len(parts) != 5:
        raise CryptoError(f"Invalid compact JWE: expected 5 parts, got {len(parts)}")
    protected = parts[0]
    try:
        header = json.loads(b64url_decode(protected).decode("utf-8"))
        encrypted_key, iv, ciphertext, tag = (b64url_decode(p) for p in parts[1:])
    except (binascii.Error, ValueError) as exc:
        raise CryptoError(f"Error decoding header: {exc}") from exc
    if not isinstance(header, dict):
        raise CryptoError("Invalid JWE header: must be a JSON object")
    if header.get("alg") != ALG_DIRECT:
        raise CryptoError(f"Unsupported JWE algorithm: {header.get('alg')!r}")
    if header.get("enc") != ENC_A256GCM:
        raise CryptoError(
            f"Unsupported content encryption: {header.get('enc')!r}"
        )
    if encrypted_key:
        raise CryptoError("Direct-mode JWE must not carry an encrypted key")
    if len(iv) != _IV_BYTES or len(tag) != _TAG_BYTES:
        raise CryptoError("Invalid JWE initialization vector or tag length")
    return CompactJwe(
        protected=protected,
        header=header,
        encrypted_key=encrypted_key,
        iv=iv,
        ciphertext=ciphertext,
        tag=tag,
    )


def decrypt_compact(jwe: CompactJwe, key: bytes) -> bytes:
    """Authenticate and decrypt a parsed compact JWE.

    Args:
        jwe: Parsed token.
        key: 32-byte content-encryption key.

    Returns:
        Plaintext bytes.

    Raises:
        CryptoError: If authentication fails.
    """
    try:
        return AESGCM(key).decrypt(
            jwe.iv, jwe.ciphertext + jwe.tag, jwe.protected.encode("ascii")
        )
    except InvalidTag as exc:
        raise CryptoError("Error decrypting JWE: authentication failed") from exc
