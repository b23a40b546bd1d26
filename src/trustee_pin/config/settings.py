"""Operator settings for the production resolver."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from trustee_pin.errors import ConfigError

DEFAULT_SETTINGS_PATH = Path("/etc/trustee-pin/settings.yaml")


class PinSettings(BaseModel):
    """Attester invocation settings."""

    model_config = ConfigDict(extra="forbid")

    attester_binary: str = Field(default="trustee-attester", min_length=1)
    cert_dir: Path = Path("/var/run/trustee")
    attester_timeout_s: float | None = Field(default=None, gt=0)
    env: dict[str, str] = Field(default_factory=dict)


class SettingsError(ConfigError):
    """Raised when settings cannot be decoded or validated."""


def _decode_settings_payload(path: Path) -> dict[str, object]:
    """Decode settings payload from JSON or YAML.

    Args:
        path: Settings file path.

    Returns:
        Parsed mapping payload.

    Raises:
        SettingsError: If read or decode fails or payload is not an object.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SettingsError(f"Unable to read settings {path}: {exc}") from exc
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SettingsError(f"Invalid settings JSON: {exc}") from exc
    else:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise SettingsError(f"Invalid settings YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise SettingsError("Invalid settings payload: root must be an object")
    return payload


def load_settings(path: Path) -> PinSettings:
    """Load settings from disk, defaulting when missing.

    Args:
        path: Settings file path.

    Returns:
        Parsed settings, or defaults when file does not exist.

    Raises:
        SettingsError: If payload decode or validation fails.
    """
    if not path.exists():
        return PinSettings()
    payload = _decode_settings_payload(path)
    try:
        return PinSettings.model_validate(payload)
    except ValidationError as exc:
        raise SettingsError(f"Invalid settings payload: {exc}") from exc
