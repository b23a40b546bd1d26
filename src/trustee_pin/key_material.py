"""Decode resolver key payloads into key material."""

from __future__ import annotations

import base64
import binascii
import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from trustee_pin.encoding import b64url_decode
from trustee_pin.errors import CryptoError, KeyDecodeStage, PayloadDecodeError

_CEK_BYTES = 32


class KeyMaterial(BaseModel):
    """Key type and value as published by the resolver."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    key_type: str = Field(min_length=1)
    key_value: str = Field(alias="key", min_length=1)

    def content_encryption_key(self) -> bytes:
        """Return the raw 256-bit content-encryption key.

        Returns:
            32 key bytes.

        Raises:
            CryptoError: If the key is not an ``oct`` key of 32 bytes.
        """
        if self.key_type != "oct":
            raise CryptoError(
                f"Unsupported key type for direct encryption: {self.key_type!r}"
            )
        try:
            raw = b64url_decode(self.key_value)
        except (binascii.Error, ValueError) as exc:
            raise CryptoError(f"Invalid key value encoding: {exc}") from exc
        if len(raw) != _CEK_BYTES:
            raise CryptoError(
                f"Key must be {_CEK_BYTES} bytes for A256GCM, got {len(raw)}"
            )
        return raw


def decode_key_material(raw_key: str) -> KeyMaterial:
    """Decode base64 -> UTF-8 -> JSON -> key material.

    Args:
        raw_key: Key string returned by a resolver.

    Returns:
        Decoded key material.

    Raises:
        PayloadDecodeError: Naming the step that failed.
    """
    try:
        decoded = base64.b64decode(raw_key, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PayloadDecodeError(
            KeyDecodeStage.BASE64, f"Error decoding key in base64: {exc}"
        ) from exc
    try:
        text = decoded.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise PayloadDecodeError(
            KeyDecodeStage.UTF8, f"Error decoding key as UTF-8: {exc}"
        ) from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PayloadDecodeError(
            KeyDecodeStage.JSON, f"Error parsing the fetched key: {exc}"
        ) from exc
    try:
        return KeyMaterial.model_validate(payload)
    except ValidationError as exc:
        raise PayloadDecodeError(
            KeyDecodeStage.SCHEMA, f"Invalid key payload: {exc}"
        ) from exc
