"""
Theurgy Send - Transfer ETH from the wallet to a recipient.

Flow:
1. Load the wallet from ~/.obol/.env
2. Validate recipient and amount (no network access yet)
3. Show sender / recipient balances
4. Run the transfer pipeline (price, limit, nonce, balance check, sign,
   broadcast, wait for receipt)
5. Show balances after the transfer
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..errors import NetworkError, ObolError
from ..pneuma.models import Outcome, TransferResult
from ..pneuma.rpc import RpcEndpoint
from ..pneuma.transfer import send_transfer
from ..utils import format_units, parse_amount, validate_address
from .common import echo_field, fail, label, load_wallet, retries_option, rpc_url_option, run_with_endpoint


async def _balances(endpoint: RpcEndpoint, sender: str, recipient: str) -> tuple[int, int]:
    return await endpoint.get_balance(sender), await endpoint.get_balance(recipient)


def _echo_balances(title: str, sender_wei: int, recipient_wei: int) -> None:
    click.secho(f"  {title}", fg="cyan")
    echo_field("Sender", f"{format_units(sender_wei)} ETH")
    echo_field("Recipient", f"{format_units(recipient_wei)} ETH")
    click.echo()


def _echo_result(result: TransferResult) -> None:
    request = result.request
    click.secho("  Transaction", fg="cyan")
    echo_field("Nonce", request.nonce)
    echo_field("Gas price", f"{request.gas_price} wei")
    echo_field("Gas limit", request.gas_limit)
    echo_field("Max fee", f"{format_units(request.max_fee)} ETH")
    echo_field("Hash", result.tx_hash, fg="bright_white")
    echo_field("Explorer", result.explorer_url)
    click.echo()

    if result.outcome is Outcome.UNCONFIRMED:
        click.secho("  Broadcast, but confirmation is unknown.", fg="yellow", bold=True)
        if result.error is not None:
            click.echo(label("Reason") + result.error.reason)
        click.echo("  The transaction may still be mined; check the explorer link.")
        click.echo()
        return

    receipt = result.receipt
    if receipt is not None:
        echo_field("Block", receipt.block_number)
        echo_field("Gas used", receipt.gas_used)
    if result.outcome is Outcome.CONFIRMED:
        echo_field("Status", "success", fg="green", bold=True)
    else:
        echo_field("Status", "failed", fg="red", bold=True)
    click.echo()


@click.command()
@click.option("--to", "recipient", required=True, help="Recipient address (0x...)")
@click.option("--amount", required=True, help="Amount in ETH (e.g. 0.00001)")
@click.option(
    "--timeout",
    default=None,
    type=click.FloatRange(min=0),
    help="Seconds to wait for a receipt (default: wait indefinitely)",
)
@click.option(
    "--poll-interval",
    default=2.0,
    show_default=True,
    type=click.FloatRange(min=0),
    help="Seconds between receipt queries",
)
@rpc_url_option
@retries_option
def send(
    recipient: str,
    amount: str,
    timeout: Optional[float],
    poll_interval: float,
    rpc_url: str,
    retries: int,
) -> None:
    """Send ETH to a recipient and wait for confirmation.

    \b
    Examples:
      obol send --to 0x6FC3... --amount 0.00001
      obol send --to 0x6FC3... --amount 0.5 --timeout 120
    """
    wallet = load_wallet()

    try:
        to_address = validate_address(recipient)
        value = parse_amount(amount)
    except ObolError as exc:
        fail(exc)

    click.echo("=== ETH Transfer (Arbitrum Sepolia) ===")
    click.echo()
    echo_field("From", wallet.address, fg="bright_white")
    echo_field("To", to_address, fg="bright_white")
    echo_field("Amount", f"{format_units(value)} ETH", fg="bright_white")
    click.echo()

    async def _transfer(endpoint: RpcEndpoint) -> tuple[TransferResult, Optional[tuple[int, int]]]:
        before = await _balances(endpoint, wallet.address, to_address)
        _echo_balances("Balances before", *before)

        click.echo("  Sending transaction...")
        click.echo()
        result = await send_transfer(
            endpoint,
            wallet,
            to_address,
            value,
            timeout=timeout,
            poll_interval=poll_interval,
        )
        _echo_result(result)

        try:
            after: Optional[tuple[int, int]] = await _balances(endpoint, wallet.address, to_address)
        except NetworkError as exc:
            click.secho(f"  Could not read balances after transfer: {exc}", fg="yellow")
            after = None
        return result, after

    try:
        result, after = run_with_endpoint(rpc_url, retries, _transfer)
    except ObolError as exc:
        fail(exc, prefix="Transfer failed")

    if after is not None:
        _echo_balances("Balances after", *after)

    if result.outcome is Outcome.FAILED:
        sys.exit(1)
    if result.error is not None:
        sys.exit(result.error.exit_code)
