"""Key resolution engine: ordered server failover with a retry policy."""

from __future__ import annotations

import itertools
import logging
import time
from collections.abc import Callable

from trustee_pin.config import (
    FiniteRetries,
    ResolutionRequest,
    RetryPolicy,
)
from trustee_pin.errors import AllServersFailedError, NoServersError, ResolutionError
from trustee_pin.resolver import KeyResolver

_LOGGER = logging.getLogger(__name__)

RETRY_DELAY_SECONDS = 5.0


class KeyResolutionEngine:
    """Query resolvers for a key, server by server, attempt by attempt."""

    def __init__(
        self,
        resolver: KeyResolver,
        *,
        sleep_fn: Callable[[float], None] = time.sleep,
    ) -> None:
        """Create engine.

        Args:
            resolver: Client used to query each server.
            sleep_fn: Injectable sleep function for the inter-attempt wait.
        """
        self._resolver = resolver
        self._sleep_fn = sleep_fn

    def resolve(self, request: ResolutionRequest, policy: RetryPolicy) -> str:
        """Return the first key any server yields under ``policy``.

        Args:
            request: Servers, resource path and init-data.
            policy: Finite or infinite retry policy.

        Returns:
            Raw key string from the first successful server.

        Raises:
            NoServersError: If ``request.servers`` is empty.
            AllServersFailedError: If a finite policy is exhausted.
        """
        if not request.servers:
            raise NoServersError()

        max_attempts = policy.attempts if isinstance(policy, FiniteRetries) else None
        attempts = (
            range(1, max_attempts + 1)
            if max_attempts is not None
            else itertools.count(1)
        )
        for attempt in attempts:
            if max_attempts is None:
                _LOGGER.info("Attempting to fetch key (attempt %d)", attempt)
            else:
                _LOGGER.info(
                    "Attempting to fetch key (attempt %d/%d)", attempt, max_attempts
                )
            key = self._try_servers(request)
            if key is not None:
                return key
            if attempt == max_attempts:
                break
            _LOGGER.warning(
                "All servers failed for attempt %d. Retrying in %.0f seconds...",
                attempt,
                RETRY_DELAY_SECONDS,
            )
            self._sleep_fn(RETRY_DELAY_SECONDS)
        raise AllServersFailedError(max_attempts or 0)

    def _try_servers(self, request: ResolutionRequest) -> str | None:
        """Try every server once, in order, stopping at the first success.

        Args:
            request: Servers, resource path and init-data.

        Returns:
            Key string, or None when every server failed.
        """
        total = len(request.servers)
        for index, server in enumerate(request.servers, start=1):
            _LOGGER.info("Trying server %d/%d: %s", index, total, server.url)
            try:
                key = self._resolver.fetch_key(
                    server.url, request.path, server.cert, request.initdata
                )
            except ResolutionError as exc:
                _LOGGER.warning("Error with server %s: %s", server.url, exc)
                continue
            _LOGGER.info("Fetched key from server %s", server.url)
            return key
        return None
