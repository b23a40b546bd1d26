"""Resolver client contract."""

from __future__ import annotations

from typing import Protocol


class KeyResolver(Protocol):
    """Capability that fetches a key string from one resolver endpoint."""

    def fetch_key(
        self,
        url: str,
        path: str,
        cert: str,
        initdata: str | None,
    ) -> str:
        """Fetch a key from one server.

        Args:
            url: Resolver URL.
            path: Resource path of the key.
            cert: PEM certificate for the server, or empty for none.
            initdata: Serialized init-data document, if any.

        Returns:
            Raw key string as returned by the resolver.

        Raises:
            ResolutionError: If the server could not provide a key.
        """
