"""Spawning of the attester process.

Arguments are always a list and the shell is never involved, so URLs, paths
and init-data documents reach the attester verbatim. The child sees only PATH
plus the variables the operator configured.
"""

from __future__ import annotations

import os
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence

TimeoutExpired = subprocess.TimeoutExpired


def minimal_env(extra: Mapping[str, str] | None = None) -> dict[str, str]:
    """Build the attester environment: PATH overlaid with ``extra``.

    Args:
        extra: Optional variables to add.

    Returns:
        Environment dict for run_subprocess.
    """
    env = {"PATH": os.environ.get("PATH", "")}
    if extra:
        env.update(extra)
    return env


def run_subprocess(
    argv: Sequence[str],
    *,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[bytes]:
    """Run the attester and capture its raw output.

    The exit status is left for the caller to judge; stdout stays bytes so
    the key is decoded in one place.

    Args:
        argv: Command and arguments.
        env: Environment dict; minimal_env() when None.
        timeout: Optional timeout in seconds.

    Returns:
        Finished process with stdout, stderr and returncode.
    """
    return subprocess.run(  # nosec B603
        list(argv),
        env=env or minimal_env(),
        capture_output=True,
        timeout=timeout,
        check=False,
    )
