"""Pin configuration models and parsing helpers."""

from __future__ import annotations

import json
from typing import Annotated, Literal

import tomli_w
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    PlainValidator,
    ValidationError,
)

from trustee_pin.errors import ConfigError

DEFAULT_ATTEMPTS = 10
INFINITY_TOKEN = "infinity"
INITDATA_VERSION = "0.1.0"
_MAX_ATTEMPTS = 2**32 - 1


class FiniteRetries(BaseModel):
    """Bounded retry policy: at most ``attempts`` rounds over all servers."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    attempts: int = Field(ge=1, le=_MAX_ATTEMPTS)


class InfiniteRetries(BaseModel):
    """Unbounded retry policy; only external termination stops it."""

    model_config = ConfigDict(extra="forbid", frozen=True)


RetryPolicy = FiniteRetries | InfiniteRetries


def parse_retry_policy(value: object) -> FiniteRetries | InfiniteRetries:
    """Build a retry policy from its wire value.

    Args:
        value: Positive integer, the string ``"infinity"`` or an existing policy.

    Returns:
        Matching retry policy.

    Raises:
        ValueError: If value is zero, negative, too large or any other shape.
    """
    if isinstance(value, (FiniteRetries, InfiniteRetries)):
        return value
    # bool is an int subclass; JSON true/false is never a retry count.
    if isinstance(value, bool):
        raise ValueError(
            f"expected a positive number or '{INFINITY_TOKEN}', got: {value!r}"
        )
    if isinstance(value, int):
        if value <= 0:
            raise ValueError(f"number must be at least 1, got: {value}")
        if value > _MAX_ATTEMPTS:
            raise ValueError(f"number too large: {value}")
        return FiniteRetries(attempts=value)
    if isinstance(value, str):
        if value == INFINITY_TOKEN:
            return InfiniteRetries()
        raise ValueError(f"expected '{INFINITY_TOKEN}', got: '{value}'")
    raise ValueError(
        f"expected a positive number or '{INFINITY_TOKEN}', got: {value!r}"
    )


def dump_retry_policy(policy: FiniteRetries | InfiniteRetries) -> int | str:
    """Return the wire value of a retry policy.

    Args:
        policy: Retry policy.

    Returns:
        Attempt count, or ``"infinity"``.
    """
    if isinstance(policy, FiniteRetries):
        return policy.attempts
    return INFINITY_TOKEN


NumRetries = Annotated[
    FiniteRetries | InfiniteRetries,
    PlainValidator(parse_retry_policy),
    PlainSerializer(dump_retry_policy, return_type=int | str),
]


def effective_retry_policy(num_retries: RetryPolicy | None) -> RetryPolicy:
    """Apply the default policy when ``num_retries`` was not given.

    Args:
        num_retries: Parsed policy, or None when absent.

    Returns:
        The given policy, or ``FiniteRetries(attempts=10)``.
    """
    if num_retries is None:
        return FiniteRetries(attempts=DEFAULT_ATTEMPTS)
    return num_retries


class Server(BaseModel):
    """One resolver endpoint; empty ``cert`` means no certificate."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    url: str = Field(min_length=1)
    cert: str = ""


class InitdataDocument(BaseModel):
    """Init-data document as handed to the attester."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: str = INITDATA_VERSION
    algorithm: Literal["sha256"] = "sha256"
    data: dict[str, str]

    def to_wire(self) -> str:
        """Serialize the document to its TOML wire form.

        Returns:
            TOML text.
        """
        return tomli_w.dumps(self.model_dump(mode="json"))


class ResolutionRequest(BaseModel):
    """Everything needed to ask resolvers for a key."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    servers: tuple[Server, ...]
    path: str
    initdata: str | None = None


class PinConfig(BaseModel):
    """Encrypt-time pin configuration, parsed once and never mutated."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    servers: tuple[Server, ...]
    path: str
    initdata: str | None = None  # serialized InitdataDocument
    num_retries: NumRetries | None = None

    def resolution_request(self) -> ResolutionRequest:
        """Return the resolution request described by this config.

        Returns:
            Resolution request with servers, path and init-data.
        """
        return ResolutionRequest(
            servers=self.servers, path=self.path, initdata=self.initdata
        )

    def retry_policy(self) -> RetryPolicy:
        """Return the effective retry policy.

        Returns:
            Configured policy or the default.
        """
        return effective_retry_policy(self.num_retries)


def _initdata_document(raw: object) -> str | None:
    """Turn caller init-data into its serialized wire document.

    Args:
        raw: JSON-encoded object string, decoded object, or None.

    Returns:
        Serialized init-data document, or None when absent.

    Raises:
        ConfigError: If init-data is not an object of strings.
    """
    if raw is None:
        return None
    payload = raw
    if isinstance(raw, str):
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Failed to parse config initdata: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError("Invalid config initdata: must be a JSON object")
    try:
        document = InitdataDocument(data=payload)
    except ValidationError as exc:
        raise ConfigError(
            f"Invalid config initdata: values must be strings: {exc}"
        ) from exc
    return document.to_wire()


def parse_pin_config(raw: str) -> PinConfig:
    """Parse and validate the encrypt-time JSON configuration.

    Args:
        raw: JSON configuration document.

    Returns:
        Validated pin config with init-data serialized.

    Raises:
        ConfigError: If JSON decode or validation fails.
    """
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Failed to parse config JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError("Invalid config payload: root must be an object")
    payload = dict(payload)
    payload["initdata"] = _initdata_document(payload.get("initdata"))
    try:
        return PinConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config payload: {exc}") from exc
