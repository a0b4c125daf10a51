"""
Identity - Show the operator wallet and the endpoint it talks to.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from .. import __version__
from ..errors import NetworkError
from ..pneuma.rpc import CHAIN_ID, get_rpc_url
from ..sigil import eth
from .common import echo_field, label, run_with_endpoint


def _wallet_address() -> Optional[str]:
    try:
        return eth.get_address()
    except ValueError:
        return None


def _chain_status(rpc_url: str) -> str:
    try:
        chain_id = run_with_endpoint(rpc_url, 1, lambda ep: ep.get_chain_id())
    except NetworkError as exc:
        return click.style(f"unreachable ({exc})", fg="red")
    if chain_id != CHAIN_ID:
        return click.style(f"{chain_id} (expected {CHAIN_ID})", fg="yellow")
    return click.style(f"{chain_id} (ok)", fg="green")


@click.command()
def whoami() -> None:
    """Show current wallet address."""
    address = _wallet_address()
    if address is None:
        click.echo("No wallet found.")
        click.echo("Run 'obol genesis' to create one.")
        sys.exit(1)
    click.echo(f"Address: {address}")


@click.command()
def info() -> None:
    """Show configuration and endpoint status."""
    click.secho(f"obol v{__version__}", fg="cyan", bold=True)
    click.echo()

    address = _wallet_address()
    if address is None:
        echo_field("Address", "not initialized (run: obol genesis)", fg="yellow")
    else:
        echo_field("Address", address, fg="bright_white")

    rpc_url = get_rpc_url()
    echo_field("Config", eth.OBOL_ENV)
    echo_field("RPC", rpc_url)
    click.echo(label("Chain ID") + _chain_status(rpc_url))
    click.echo()
