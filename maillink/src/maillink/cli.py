"""MailLink command-line interface.

What:
  Provide a Typer entry point exposing ``interpret`` (address to locator),
  ``describe`` (locator plus warnings, updating the account registry) and
  ``accounts`` (inspect or prune the registry).

Why:
  Scripts and browser native-messaging hosts need the interpreter without
  importing Python code; a CLI with JSON output is the narrowest seam.

How:
  ``interpret`` calls :func:`maillink.core.interpret` directly and never needs
  configuration. ``describe`` and ``accounts`` load the runtime configuration,
  build an :class:`~maillink.config.accounts.AccountRegistry` from it and
  delegate to :func:`~maillink.core.link_info.describe_message_link`.

Interfaces:
  ``app`` (Typer application), ``interpret_command``, ``describe``,
  ``accounts``, ``main``.

Invariants & Safety:
  - Exit codes follow shell expectations (``0`` success, ``1`` failure).
  - ``interpret`` always exits ``0``: unrecognised addresses are a valid
    fallback result, not an error.
  - Command results go to stdout; logs go to stderr.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from .config.accounts import AccountRegistry
from .config.loader import ConfigLoadError, load_runtime_config
from .config.schema import RuntimeConfig
from .core.fragment import interpret
from .core.link_info import describe_message_link
from .utils.logging import get_logger


app = typer.Typer(help="Turn webmail addresses into durable message links")

LOGGER = logging.getLogger("maillink.cli")


def _load_runtime(config_path: Optional[Path]) -> RuntimeConfig:
    try:
        return load_runtime_config(config_path)
    except ConfigLoadError as exc:
        LOGGER.error("runtime_load_failed: %s", exc)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _open_registry(runtime: RuntimeConfig) -> AccountRegistry:
    logger = get_logger("maillink.accounts", level=runtime.logging.level)
    try:
        return AccountRegistry.from_config(runtime, logger=logger)
    except ConfigLoadError as exc:
        LOGGER.error("registry_open_failed: %s", exc)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command("interpret")
def interpret_command(
    address: str = typer.Argument(..., help="Address of the open webmail tab"),
    as_json: bool = typer.Option(False, "--json", help="Print the locator as JSON"),
) -> None:
    """Print the account index, message id and canonical address."""

    locator = interpret(address)
    if as_json:
        typer.echo(json.dumps(locator.to_dict()))
        return
    typer.echo(f"account_index: {locator.account_index}")
    typer.echo(f"message_id: {locator.message_id if locator.has_message else '-'}")
    typer.echo(f"canonical_address: {locator.canonical_address}")


@app.command("describe")
def describe(
    address: str = typer.Argument(..., help="Address of the open webmail tab"),
    account_email: Optional[str] = typer.Option(
        None,
        "--account-email",
        help="Email of the logged-in account; enables account reorder detection",
    ),
    confidential: bool = typer.Option(
        False,
        "--confidential",
        help="The open message uses confidential mode",
    ),
    subject: Optional[str] = typer.Option(None, "--subject", help="Subject to include in the output"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to config.yaml"),
) -> None:
    """Print the link description, including warnings, as JSON.

    What:
      Interpret the address and attach reorder and confidential-mode warnings.

    Why:
      A link about to be stored should carry its caveats with it.

    How:
      Load the runtime configuration, open the registry only when an account
      email is given, and print :meth:`MessageLinkInfo.to_dict` as JSON. A
      registry that cannot be opened is logged and skipped; only a broken
      configuration exits with ``1``.
    """

    runtime = _load_runtime(config_path)
    registry: Optional[AccountRegistry] = None
    if account_email:
        try:
            registry = AccountRegistry.from_config(
                runtime,
                logger=get_logger("maillink.accounts", level=runtime.logging.level),
            )
        except ConfigLoadError as exc:
            # Only reorder detection depends on the registry; the link is still printed.
            LOGGER.warning("registry_open_failed: %s", exc)
    info = describe_message_link(
        address,
        account_email=account_email,
        confidential=confidential,
        subject=subject,
        registry=registry,
        logger=get_logger("maillink.link_info", level=runtime.logging.level),
    )
    typer.echo(json.dumps(info.to_dict()))


@app.command("accounts")
def accounts(
    prune: bool = typer.Option(False, "--prune", help="Drop entries past the retention window"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to config.yaml"),
) -> None:
    """List remembered accounts as ``index<TAB>email<TAB>last seen``."""

    runtime = _load_runtime(config_path)
    registry = _open_registry(runtime)
    try:
        if prune:
            removed = registry.prune()
            typer.echo(f"pruned {removed} entr{'y' if removed == 1 else 'ies'}")
        entries = registry.entries()
    except ConfigLoadError as exc:
        LOGGER.error("registry_read_failed: %s", exc)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    for entry in sorted(entries, key=lambda item: (int(item.account_index), item.email)):
        typer.echo(f"{entry.account_index}\t{entry.email}\t{entry.seen_at.isoformat()}")


def main() -> None:
    """Execute the Typer application entry point."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
