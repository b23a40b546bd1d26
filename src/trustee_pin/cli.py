"""Typer CLI entrypoint for the trustee pin."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from trustee_pin import __version__
from trustee_pin.config import (
    DEFAULT_SETTINGS_PATH,
    PinSettings,
    load_settings,
    parse_pin_config,
)
from trustee_pin.engine import KeyResolutionEngine
from trustee_pin.envelope import open_envelope, seal
from trustee_pin.errors import CryptoError, PinError, PinIOError
from trustee_pin.resolver import AttesterResolver, KeyResolver

app = typer.Typer(help="Clevis PIN for Trustee", no_args_is_help=True)
_LOGGER = logging.getLogger(__name__)
_LOGGING_CONFIGURED = False


def configure_logging(*, verbose: bool = False) -> None:
    """Configure Rich-backed stderr logging once for CLI commands.

    Args:
        verbose: Log at DEBUG instead of INFO.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if _LOGGING_CONFIGURED:
        return
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True), show_path=False, rich_tracebacks=True
            )
        ],
    )
    _LOGGING_CONFIGURED = True


def _build_resolver(settings: PinSettings) -> KeyResolver:
    """Build the production attester resolver.

    Args:
        settings: Operator settings.

    Returns:
        Resolver client.
    """
    return AttesterResolver(
        binary=settings.attester_binary,
        cert_dir=settings.cert_dir,
        timeout_s=settings.attester_timeout_s,
        env=settings.env,
    )


def _read_input() -> bytes:
    try:
        return sys.stdin.buffer.read()
    except OSError as exc:
        raise PinIOError(f"Error reading input: {exc}") from exc


def _write_output(data: bytes) -> None:
    try:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    except OSError as exc:
        raise PinIOError(f"Error writing output: {exc}") from exc


def _fail(exc: PinError) -> typer.Exit:
    _LOGGER.error("%s: %s", exc.code, exc)
    return typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"clevis-pin-trustee {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    settings_path: Annotated[
        Path,
        typer.Option(
            "--settings",
            envvar="TRUSTEE_PIN_SETTINGS",
            dir_okay=False,
            help="Attester settings file (YAML or JSON).",
        ),
    ] = DEFAULT_SETTINGS_PATH,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging.")
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """Encrypt and decrypt data with keys resolved from Trustee servers."""
    del version
    configure_logging(verbose=verbose)
    try:
        ctx.obj = load_settings(settings_path)
    except PinError as exc:
        raise _fail(exc) from exc


@app.command()
def encrypt(
    ctx: typer.Context,
    config: Annotated[str, typer.Argument(help="Pin configuration JSON.")],
) -> None:
    """Encrypt stdin into an envelope written to stdout.

    Args:
        ctx: Typer context carrying settings.
        config: Pin configuration JSON.
    """
    try:
        pin_config = parse_pin_config(config)
        plaintext = _read_input()
        engine = KeyResolutionEngine(_build_resolver(ctx.obj))
        token = seal(plaintext, pin_config, engine)
        _write_output(token.encode("ascii"))
    except PinError as exc:
        raise _fail(exc) from exc


@app.command()
def decrypt(ctx: typer.Context) -> None:
    """Decrypt an envelope read from stdin and write the plaintext to stdout.

    Args:
        ctx: Typer context carrying settings.
    """
    try:
        raw = _read_input()
        try:
            token = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CryptoError(f"Input is not valid UTF-8: {exc}") from exc
        engine = KeyResolutionEngine(_build_resolver(ctx.obj))
        plaintext = open_envelope(token, engine)
        _write_output(plaintext)
    except PinError as exc:
        raise _fail(exc) from exc
