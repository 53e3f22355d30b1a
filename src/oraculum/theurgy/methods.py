"""
Theurgy Methods - List the callable operations of a contract.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from .common import open_session, session_options


@click.command()
@session_options
@click.option("--all", "show_all", is_flag=True, help="Also list events and errors")
def methods(
    contract: Optional[str],
    abi_path: Optional[Path],
    rpc_url: str,
    gas_limit: Optional[int],
    show_all: bool,
) -> None:
    """List the contract's functions and whether they read or write."""
    session = open_session(contract, abi_path, rpc_url, gas_limit)
    registry = session.registry

    click.echo(f"  Contract: {session.config.contract_address}")
    click.echo(
        f"  Functions: {len(registry)} "
        f"({len(registry.read_operations)} read, {len(registry.write_operations)} write)"
    )
    click.echo("")

    for fn in registry:
        params = ", ".join(f"{p.name or f'arg{i}'}: {p.type_string}" for i, p in enumerate(fn.parameters))
        tag = click.style("read ", fg="cyan") if fn.is_read else click.style("write", fg="magenta")
        line = f"  [{tag}] {registry.key_for(fn)}({params})"
        if fn.is_payable:
            line += click.style("  payable", fg="yellow")
        click.echo(line)

    for fn in registry.shadowed:
        click.secho(f"  [skip ] {fn.signature}  declared again; the first declaration is used", fg="yellow")

    if show_all:
        for title, entries in (("Events", registry.events), ("Errors", registry.errors)):
            if not entries:
                continue
            click.echo("")
            click.echo(f"  {title}:")
            for entry in entries:
                click.echo(f"    {entry.signature}")
