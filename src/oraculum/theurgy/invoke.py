"""
Theurgy Invoke - Execute one contract operation.

Read operations are queried with eth_call; write operations are signed with
the local wallet, sent, and reported once their receipt confirms them.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click

from ..codex.formatter import format_outcome
from ..errors import OraculumError, exit_code_for
from .common import bind_wallet, echo_message, open_session, session_options


@click.command()
@session_options
@click.argument("operation")
@click.argument("args", nargs=-1)
@click.option("--value", default=0, type=int, help="Wei attached to payable operations")
def invoke(
    contract: Optional[str],
    abi_path: Optional[Path],
    rpc_url: str,
    gas_limit: Optional[int],
    operation: str,
    args: tuple[str, ...],
    value: int,
) -> None:
    """
    Execute OPERATION with positional ARGS.

    OPERATION is a function name, or its full signature when overloaded.
    Arrays and tuples are passed as JSON, e.g. '["0x01","0x02"]'.
    """
    click.echo("=== Oraculum Invoke ===")
    click.echo("")

    session = open_session(contract, abi_path, rpc_url, gas_limit)

    try:
        descriptor = session.registry.get(operation)
        for index, raw in enumerate(args):
            session.set_slot(operation, index, raw)
    except IndexError:
        click.secho(
            f"ERROR: {descriptor.signature} takes {len(descriptor.parameters)} arguments, "
            f"got {len(args)}",
            fg="red",
        )
        sys.exit(2)
    except OraculumError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)

    bind_wallet(session)
    click.echo(f"  Target: {session.config.contract_address}")
    click.echo(f"  Function: {descriptor.signature} ({'read' if descriptor.is_read else 'write'})")
    click.echo(f"  Args: {session.get_args(operation)}")
    if value > 0:
        click.echo(f"  Value: {value} wei")
    click.echo("")

    outcome = asyncio.run(session.invoke(operation, value=value))
    echo_message(format_outcome(outcome))
    if not outcome.ok:
        sys.exit(exit_code_for(outcome.kind))
