"""Production resolver: runs the trustee attester as a subprocess."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from trustee_pin.errors import ResolutionError
from trustee_pin.run_cmd import TimeoutExpired, minimal_env, run_subprocess

_LOGGER = logging.getLogger(__name__)


def cert_path_for(cert_dir: Path, url: str) -> Path:
    """Return the per-URL certificate file location.

    Args:
        cert_dir: Directory holding written certificates.
        url: Server URL.

    Returns:
        ``<cert_dir>/cert_<sanitized url>.pem``.
    """
    sanitized = url.replace("://", "_").replace("/", "_").replace(":", "_")
    return cert_dir / f"cert_{sanitized}.pem"


class AttesterResolver:
    """Fetch keys by invoking ``trustee-attester get-resource``."""

    def __init__(
        self,
        *,
        binary: str = "trustee-attester",
        cert_dir: Path = Path("/var/run/trustee"),
        timeout_s: float | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Create attester resolver.

        Args:
            binary: Attester executable name or path.
            cert_dir: Directory for per-server certificate files.
            timeout_s: Optional per-invocation timeout in seconds.
            env: Extra environment variables for the attester.
        """
        self._binary = binary
        self._cert_dir = cert_dir
        self._timeout_s = timeout_s
        self._env = dict(env or {})

    def build_argv(
        self,
        url: str,
        path: str,
        cert_file: Path | None,
        initdata: str | None,
    ) -> list[str]:
        """Build attester argv for one server.

        Args:
            url: Resolver URL.
            path: Resource path.
            cert_file: Written certificate file, if any.
            initdata: Serialized init-data document, if any.

        Returns:
            Command and arguments.
        """
        argv = [self._binary]
        if cert_file is not None:
            argv += ["--cert-file", str(cert_file)]
        argv += ["--url", url, "get-resource", "--path", path]
        if initdata is not None:
            argv += ["--initdata", initdata]
        return argv

    def _write_cert(self, url: str, cert: str) -> Path:
        cert_file = cert_path_for(self._cert_dir, url)
        try:
            cert_file.parent.mkdir(parents=True, exist_ok=True)
            cert_file.write_text(cert, encoding="utf-8")
        except OSError as exc:
            raise ResolutionError(
                url, f"Failed to write certificate {cert_file}: {exc}"
            ) from exc
        return cert_file

    def fetch_key(
        self,
        url: str,
        path: str,
        cert: str,
        initdata: str | None,
    ) -> str:
        """Run the attester against one server and return its stdout.

        Args:
            url: Resolver URL.
            path: Resource path of the key.
            cert: PEM certificate, or empty for none.
            initdata: Serialized init-data document, if any.

        Returns:
            Stripped key string.

        Raises:
            ResolutionError: On spawn failure, timeout, non-zero exit, or empty
                or non-UTF-8 output.
        """
        cert_file = self._write_cert(url, cert) if cert else None
        argv = self.build_argv(url, path, cert_file, initdata)
        try:
            result = run_subprocess(
                argv, env=minimal_env(self._env), timeout=self._timeout_s
            )
        except FileNotFoundError as exc:
            raise ResolutionError(url, f"command not found: {exc}") from exc
        except TimeoutExpired as exc:
            raise ResolutionError(
                url, f"{self._binary} timed out after {exc.timeout}s"
            ) from exc
        except OSError as exc:
            raise ResolutionError(
                url, f"Failed to execute {self._binary}: {exc}"
            ) from exc

        stderr = result.stderr.decode("utf-8", errors="replace")
        if stderr.strip():
            _LOGGER.debug("%s stderr for %s: %s", self._binary, url, stderr.strip())
        if result.returncode != 0:
            raise ResolutionError(
                url,
                f"{self._binary} failed (exit code {result.returncode}): "
                f"{stderr.strip()}",
            )
        try:
            key = result.stdout.decode("utf-8").strip()
        except UnicodeDecodeError as exc:
            raise ResolutionError(url, f"Invalid UTF-8 for the key: {exc}") from exc
        if not key:
            raise ResolutionError(url, "Received empty key")
        return key
