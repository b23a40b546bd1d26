"""Deterministic pin error contracts."""

from __future__ import annotations

from enum import StrEnum


class PinErrorCode(StrEnum):
    """Stable pin error codes."""

    CONFIG_INVALID = "config_invalid"
    NO_SERVERS = "no_servers"
    RESOLUTION_FAILED = "resolution_failed"
    ALL_SERVERS_FAILED = "all_servers_failed"
    PAYLOAD_DECODE_FAILED = "payload_decode_failed"
    CRYPTO_FAILED = "crypto_failed"
    IO_FAILED = "io_failed"


class PinError(RuntimeError):
    """Pin failure with stable deterministic code."""

    code: PinErrorCode = PinErrorCode.CONFIG_INVALID

    def __init__(
        self,
        message: str,
        *,
        data: dict[str, object] | None = None,
    ) -> None:
        """Create pin failure.

        Args:
            message: Human-readable error message.
            data: Optional structured payload for diagnostics.
        """
        super().__init__(message)
        self.data = data or {}


class ConfigError(PinError):
    """Raised when configuration input is malformed or invalid."""

    code = PinErrorCode.CONFIG_INVALID


class NoServersError(ConfigError):
    """Raised when a resolution request carries no servers."""

    code = PinErrorCode.NO_SERVERS

    def __init__(self, message: str = "No servers provided") -> None:
        """Create no-servers error.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)


class ResolutionError(PinError):
    """Single-server key resolution failure."""

    code = PinErrorCode.RESOLUTION_FAILED

    def __init__(self, url: str, message: str) -> None:
        """Create resolution failure for one server.

        Args:
            url: Server URL that failed.
            message: Failure cause.
        """
        super().__init__(message, data={"url": url})
        self.url = url


class AllServersFailedError(PinError):
    """Raised when every server failed on every attempt of a finite policy."""

    code = PinErrorCode.ALL_SERVERS_FAILED

    def __init__(self, attempts: int) -> None:
        """Create exhaustion error.

        Args:
            attempts: Number of attempts made.
        """
        super().__init__(
            f"Failed to fetch the key from all servers after {attempts} attempts",
            data={"attempts": attempts},
        )
        self.attempts = attempts


class KeyDecodeStage(StrEnum):
    """Step of key payload decoding that failed."""

    BASE64 = "base64"
    UTF8 = "utf8"
    JSON = "json"
    SCHEMA = "schema"


class PayloadDecodeError(PinError):
    """Raised when a resolved key payload cannot be decoded."""

    code = PinErrorCode.PAYLOAD_DECODE_FAILED

    def __init__(self, stage: KeyDecodeStage, message: str) -> None:
        """Create payload decode error.

        Args:
            stage: Decoding step that failed.
            message: Human-readable error message.
        """
        super().__init__(message, data={"stage": stage.value})
        self.stage = stage


class CryptoError(PinError):
    """Raised on envelope header, algorithm or authentication failures."""

    code = PinErrorCode.CRYPTO_FAILED


class PinIOError(PinError):
    """Raised when reading input or writing output fails."""

    code = PinErrorCode.IO_FAILED
