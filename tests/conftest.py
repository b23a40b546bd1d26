"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import base64
import json
from collections.abc import Callable

import pytest

from trustee_pin.config import PinConfig, parse_pin_config

CEK = bytes(range(32))


def make_key_string(key: bytes = CEK, key_type: str = "oct") -> str:
    """Encode key bytes the way a Trustee resource publishes them.

    Args:
        key: Raw key bytes.
        key_type: JWK key type.

    Returns:
        base64(JSON{key_type, key}) string.
    """
    k = base64.urlsafe_b64encode(key).rstrip(b"=").decode("ascii")
    payload = json.dumps({"key_type": key_type, "key": k})
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


@pytest.fixture
def key_string() -> str:
    """Valid resolver output for the fixed test key."""
    return make_key_string()


@pytest.fixture
def config_json() -> Callable[..., str]:
    """Factory for encrypt-time config JSON."""

    def _build(
        urls: tuple[str, ...] = ("http://kbs-a.example:8080",),
        path: str = "default/luks/key1",
        **extra: object,
    ) -> str:
        payload: dict[str, object] = {
            "servers": [{"url": url, "cert": ""} for url in urls],
            "path": path,
        }
        payload.update(extra)
        return json.dumps(payload)

    return _build


@pytest.fixture
def pin_config(config_json: Callable[..., str]) -> Callable[..., PinConfig]:
    """Factory for parsed pin configs."""

    def _build(*args: object, **kwargs: object) -> PinConfig:
        return parse_pin_config(config_json(*args, **kwargs))

    return _build


@pytest.fixture
def make_key() -> Callable[..., str]:
    """Factory for resolver output with a chosen key or key type."""
    return make_key_string


@pytest.fixture
def cek() -> bytes:
    """Raw content-encryption key matching ``key_string``."""
    return CEK
