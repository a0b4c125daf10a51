"""
Theurgy Gas - Show current network gas cost for a plain transfer.

Displays the node's gas price, the price obol would submit with (+10%),
the base transfer gas limit and the resulting fee estimate.
"""

from __future__ import annotations

import click

from ..errors import ObolError
from ..pneuma.gas import apply_premium, get_gas_info
from ..utils import format_units
from .common import echo_field, fail, retries_option, rpc_url_option, run_with_endpoint


@click.command()
@rpc_url_option
@retries_option
def gas(rpc_url: str, retries: int) -> None:
    """Show gas price and estimated transfer fee."""
    try:
        info = run_with_endpoint(rpc_url, retries, get_gas_info)
    except ObolError as exc:
        fail(exc, prefix="Failed to get gas info")

    click.echo("=== Gas (Arbitrum Sepolia) ===")
    click.echo()
    for line in info.display().splitlines():
        click.echo(f"  {line}")
    click.echo()

    submit_price = apply_premium(info.gas_price_wei)
    echo_field(
        "Submit at",
        f"{format_units(submit_price, 'gwei')} gwei (+10% premium)",
        fg="bright_white",
    )
    click.echo()
