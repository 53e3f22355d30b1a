"""
Theurgy Interface - Print the generated interface signature listing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from .common import open_session, session_options


@click.command()
@session_options
def interface(
    contract: Optional[str],
    abi_path: Optional[Path],
    rpc_url: str,
    gas_limit: Optional[int],
) -> None:
    """Print one `name(param: type, ...): effect` line per function."""
    session = open_session(contract, abi_path, rpc_url, gas_limit)
    click.echo(session.interface_summary)
