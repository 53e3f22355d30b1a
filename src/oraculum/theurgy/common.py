"""Options and helpers shared by the session-based commands."""

from __future__ import annotations

import asyncio
import functools
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import click

from ..codex.formatter import Message
from ..errors import MalformedDescriptor
from ..session import Session, SessionConfig
from ..sigil.eth import Capability, LocalKeyProvider


def session_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach --contract / --abi / --rpc-url / --gas-limit to a command."""

    @click.option(
        "--contract",
        envvar="ORACULUM_CONTRACT",
        help="Contract address (0x...)",
    )
    @click.option(
        "--abi",
        "abi_path",
        envvar="ORACULUM_ABI",
        type=click.Path(dir_okay=False, path_type=Path),
        help="ABI JSON file (plain array or compiler artifact)",
    )
    @click.option(
        "--rpc-url",
        envvar="ORACULUM_RPC_URL",
        default="http://127.0.0.1:8545",
        help="JSON-RPC endpoint URL",
    )
    @click.option("--gas-limit", default=None, type=int, help="Gas limit (default: estimate)")
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return wrapper


def open_session(
    contract: Optional[str],
    abi_path: Optional[Path],
    rpc_url: str,
    gas_limit: Optional[int] = None,
) -> Session:
    """Build a Session or exit with a readable error."""
    try:
        config = SessionConfig.from_env(
            contract_address=contract,
            abi_path=abi_path,
            rpc_url=rpc_url,
            gas_limit=gas_limit,
        )
        return Session(config)
    except MalformedDescriptor as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)
    except (ValueError, FileNotFoundError) as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)


def bind_wallet(session: Session, provider: Optional[LocalKeyProvider] = None) -> None:
    """Bind the local wallet if there is one, otherwise a read-only capability."""
    provider = provider or LocalKeyProvider()
    if provider.get_active_account():
        handle = asyncio.run(session.connect(provider))
        click.echo(f"  Wallet: {handle.capability.address}")
    else:
        session.bind(Capability())
        click.secho("  Wallet: none (read-only; write operations are disabled)", fg="yellow")


def echo_message(message: Message) -> None:
    click.secho(message.text, fg="green" if message.ok else "red")
