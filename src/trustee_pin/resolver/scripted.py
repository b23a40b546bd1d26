"""Scripted in-process resolver for tests and dry runs."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from trustee_pin.errors import ResolutionError


@dataclass(frozen=True)
class ResolverCall:
    """One recorded ``fetch_key`` invocation."""

    url: str
    path: str
    cert: str
    initdata: str | None


class ScriptedResolver:
    """Resolver answering from per-URL scripts instead of a subprocess.

    Each URL maps to a sequence of outcomes consumed one per call: a string is
    returned as the key, an exception is raised. The last outcome repeats once
    the script is exhausted. Unknown URLs always fail.
    """

    def __init__(self, scripts: Mapping[str, Sequence[str | Exception]]) -> None:
        """Store outcome scripts.

        Args:
            scripts: Outcomes per URL, in call order.
        """
        self._scripts = {url: list(outcomes) for url, outcomes in scripts.items()}
        self._positions: dict[str, int] = {}
        self.calls: list[ResolverCall] = []

    @classmethod
    def always(cls, key: str, *urls: str) -> ScriptedResolver:
        """Build resolver where every listed URL returns ``key``.

        Args:
            key: Key string to return.
            *urls: Server URLs.

        Returns:
            Scripted resolver.
        """
        return cls({url: [key] for url in urls})

    def calls_for(self, url: str) -> int:
        """Return how many times ``url`` was queried.

        Args:
            url: Server URL.

        Returns:
            Call count.
        """
        return sum(1 for call in self.calls if call.url == url)

    def fetch_key(
        self,
        url: str,
        path: str,
        cert: str,
        initdata: str | None,
    ) -> str:
        """Return or raise the next scripted outcome for ``url``.

        Args:
            url: Resolver URL.
            path: Resource path of the key.
            cert: PEM certificate, or empty for none.
            initdata: Serialized init-data document, if any.

        Returns:
            Scripted key string.

        Raises:
            ResolutionError: If the scripted outcome is a failure.
        """
        self.calls.append(ResolverCall(url=url, path=path, cert=cert, initdata=initdata))
        outcomes = self._scripts.get(url)
        if not outcomes:
            raise ResolutionError(url, f"no script for {url}")
        position = self._positions.get(url, 0)
        self._positions[url] = position + 1
        outcome = outcomes[min(position, len(outcomes) - 1)]
        if isinstance(outcome, ResolutionError):
            raise outcome
        if isinstance(outcome, Exception):
            raise ResolutionError(url, str(outcome)) from outcome
        return outcome
