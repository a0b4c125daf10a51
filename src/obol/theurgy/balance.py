"""
Theurgy Balance - Query the native balance of an address.
"""

from __future__ import annotations

from typing import Optional

import click

from ..errors import ObolError
from ..utils import format_units, validate_address
from .common import echo_field, fail, load_wallet, retries_option, rpc_url_option, run_with_endpoint


@click.command()
@click.argument("address", required=False)
@rpc_url_option
@retries_option
def balance(address: Optional[str], rpc_url: str, retries: int) -> None:
    """Show the ETH balance of ADDRESS (default: your wallet)."""
    try:
        target = validate_address(address) if address else load_wallet().address
        wei = run_with_endpoint(rpc_url, retries, lambda ep: ep.get_balance(target))
    except ObolError as exc:
        fail(exc)

    click.echo("=== Balance (Arbitrum Sepolia) ===")
    click.echo()
    echo_field("Address", target, fg="bright_white")
    echo_field("Balance", f"{format_units(wei)} ETH", fg="green", bold=True)
    echo_field("Wei", wei)
    click.echo()
