"""Pin metadata embedded in the envelope's protected header."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from trustee_pin.config import (
    NumRetries,
    PinConfig,
    ResolutionRequest,
    RetryPolicy,
    Server,
    effective_retry_policy,
)
from trustee_pin.errors import CryptoError

PIN_NAME = "trustee"
CLAIM_NAME = "clevis"


class PinMetadata(BaseModel):
    """Resolution settings carried inside the envelope header."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    pin: Literal["trustee"]
    servers: tuple[Server, ...]
    path: str
    initdata: str | None = None
    num_retries: NumRetries | None = None

    @classmethod
    def from_config(cls, config: PinConfig) -> PinMetadata:
        """Copy resolution settings from a config as parsed.

        Args:
            config: Encrypt-time pin config.

        Returns:
            Metadata holding the same servers, path, init-data and policy.
        """
        return cls(
            pin=PIN_NAME,
            servers=config.servers,
            path=config.path,
            initdata=config.initdata,
            num_retries=config.num_retries,
        )

    @classmethod
    def from_claim(cls, claim: object) -> PinMetadata:
        """Parse the header claim back into metadata.

        Args:
            claim: Value of the ``clevis`` header claim.

        Returns:
            Parsed metadata.

        Raises:
            CryptoError: If the claim is missing or malformed.
        """
        if claim is None:
            raise CryptoError(f"Envelope header has no {CLAIM_NAME!r} claim")
        try:
            return cls.model_validate(claim)
        except ValidationError as exc:
            raise CryptoError(f"Invalid {CLAIM_NAME!r} header claim: {exc}") from exc

    def to_claim(self) -> dict[str, object]:
        """Return the JSON claim; ``num_retries`` is omitted when unset.

        Returns:
            JSON-ready mapping.
        """
        claim = self.model_dump(mode="json")
        if self.num_retries is None:
            del claim["num_retries"]
        return claim

    def resolution_request(self) -> ResolutionRequest:
        """Return the resolution request embedded at seal time.

        Returns:
            Resolution request.
        """
        return ResolutionRequest(
            servers=self.servers, path=self.path, initdata=self.initdata
        )

    def retry_policy(self) -> RetryPolicy:
        """Return the effective retry policy, defaulting like the config does.

        Returns:
            Retry policy.
        """
        return effective_retry_policy(self.num_retries)
