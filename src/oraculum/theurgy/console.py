"""
Theurgy Console - Interactive prompt over every contract operation.

Argument text typed for an operation is remembered for the rest of the
session and offered as the default the next time it is invoked.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import click

from ..codex.formatter import format_outcome
from ..codex.summary import describe_operation
from ..errors import OraculumError
from ..session import Session
from .common import bind_wallet, echo_message, open_session, session_options


def _list_operations(session: Session) -> None:
    for number, fn in enumerate(session.registry, start=1):
        label = click.style("Fetch  ", fg="cyan") if fn.is_read else click.style("Execute", fg="magenta")
        click.echo(f"  {number:>3}  {label}  {describe_operation(fn)}")
    click.echo("")


def _resolve(session: Session, choice: str) -> Optional[str]:
    functions = session.registry.functions
    if choice.isdigit() and 1 <= int(choice) <= len(functions):
        return session.registry.key_for(functions[int(choice) - 1])
    try:
        return session.registry.key_for(session.registry.get(choice))
    except OraculumError as exc:
        click.secho(f"  {exc}", fg="red")
        return None


@click.command()
@session_options
def console(
    contract: Optional[str],
    abi_path: Optional[Path],
    rpc_url: str,
    gas_limit: Optional[int],
) -> None:
    """Browse and invoke the contract's operations interactively."""
    click.echo("=== Oraculum Console ===")
    click.echo("")

    session = open_session(contract, abi_path, rpc_url, gas_limit)
    bind_wallet(session)
    click.echo(f"  Contract: {session.config.contract_address}")
    click.echo("")
    _list_operations(session)

    while True:
        choice = click.prompt("Operation (number or name, ? to list, q to quit)", default="q").strip()
        if choice in ("q", "quit", "exit"):
            break
        if choice == "?":
            _list_operations(session)
            continue

        key = _resolve(session, choice)
        if key is None:
            continue
        descriptor = session.registry.get(key)

        current = session.get_args(key)
        for index, param in enumerate(descriptor.parameters):
            typed = click.prompt(
                f"  {param.name or f'arg{index}'} ({param.type_string})",
                default=current[index],
                show_default=bool(current[index]),
            )
            session.set_slot(key, index, typed)

        value = 0
        if descriptor.is_payable:
            value = click.prompt("  value (wei)", default=0, type=int)

        outcome = asyncio.run(session.invoke(key, value=value))
        echo_message(format_outcome(outcome))
        click.echo("")
