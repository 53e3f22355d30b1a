"""
Oraculum CLI

Command-line interface for inspecting and invoking any smart contract from
its interface description (ABI) alone.

Identity = local ECDSA/secp256k1 wallet (PRIVATE_KEY). Without a wallet the
client is read-only.

Commands:
  methods    - List the contract's operations (read / write)
  interface  - Print the interface signature listing
  invoke     - Execute one operation
  console    - Interactive prompt over all operations
  whoami     - Show current wallet address
  info       - Show configuration
"""

from __future__ import annotations

import logging
import os
import sys

import click

from .sigil.eth import ORACULUM_ENV, LocalKeyProvider, load_env


# ============ Constants ============

VERSION = "0.3.0"


# ============ Banner ============


def _print_banner() -> None:
    border = click.style("  ◆ ═══════════════════════════════════════ ◆", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()
    click.echo(
        click.style("        O R A C U L U M", fg="bright_white", bold=True)
        + click.style(f"        v{VERSION}", dim=True)
    )
    click.secho("        ─── ABI-driven contract console ───", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="oraculum")
@click.option("--verbose", "-v", is_flag=True, help="Log RPC traffic and invocation steps")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Oraculum: talk to any contract through its ABI."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    load_env()
    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.methods import methods
from .theurgy.interface import interface
from .theurgy.invoke import invoke
from .theurgy.console import console

cli.add_command(methods)
cli.add_command(interface)
cli.add_command(invoke)
cli.add_command(console)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show current wallet identity."""
    address = LocalKeyProvider().get_active_account()
    if address is None:
        click.echo("No wallet found.")
        click.echo(f"Set PRIVATE_KEY in the environment or in {ORACULUM_ENV}.")
        sys.exit(1)
    click.echo(f"Address: {address}")


# ============ Info ============


@cli.command()
def info() -> None:
    """Show configuration and available commands."""
    _print_banner()

    # ── Status ──
    click.secho("  Status ─────────────────────────────────", fg="cyan")
    click.echo()

    address = LocalKeyProvider().get_active_account()
    if address:
        click.echo(click.style("  Address:     ", dim=True) + click.style(address, fg="bright_white"))
    else:
        click.echo(
            click.style("  Address:     ", dim=True)
            + click.style("not set", fg="yellow")
            + click.style("  (read-only)", dim=True)
        )

    for label, key in (
        ("Contract:    ", "ORACULUM_CONTRACT"),
        ("ABI:         ", "ORACULUM_ABI"),
        ("RPC:         ", "ORACULUM_RPC_URL"),
    ):
        value = os.environ.get(key)
        click.echo(
            click.style(f"  {label}", dim=True)
            + (click.style(value, fg="bright_white") if value else click.style("not set", fg="yellow"))
        )

    click.echo()

    # ── Commands ──
    click.secho("  Commands ───────────────────────────────", fg="cyan")
    click.echo()

    commands = [
        ("methods  ", "List read / write operations"),
        ("interface", "Print the interface signature listing"),
        ("invoke   ", "Execute one operation"),
        ("console  ", "Interactive prompt over all operations"),
        ("whoami   ", "Show current wallet address"),
    ]
    for cmd, desc in commands:
        click.echo(
            click.style("  ", dim=True)
            + click.style(cmd, fg="bright_white", bold=True)
            + click.style("  ◇  ", fg="cyan")
            + click.style(desc, dim=True)
        )

    click.echo()


# ============ Entry Points ============


def main() -> None:
    """Oraculum CLI entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass
    cli()


if __name__ == "__main__":
    main()
