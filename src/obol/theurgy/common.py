"""Helpers shared by the theurgy commands."""

from __future__ import annotations

import asyncio
import sys
from typing import Any, Awaitable, Callable, NoReturn, TypeVar

import click
from eth_account.signers.local import LocalAccount

from ..errors import ObolError
from ..pneuma.retry import RetryPolicy
from ..pneuma.rpc import DEFAULT_RPC_URL, RpcEndpoint
from ..sigil.eth import get_account

T = TypeVar("T")

rpc_url_option = click.option(
    "--rpc-url",
    envvar="ARBITRUM_SEPOLIA_RPC",
    default=DEFAULT_RPC_URL,
    show_default=True,
    help="Arbitrum Sepolia RPC URL",
)

retries_option = click.option(
    "--retries",
    default=1,
    type=click.IntRange(min=1),
    show_default=True,
    help="Attempts per read-only RPC query",
)


def make_endpoint(rpc_url: str, retries: int = 1) -> RpcEndpoint:
    return RpcEndpoint(rpc_url, retry=RetryPolicy(max_attempts=retries))


def run_with_endpoint(
    rpc_url: str,
    retries: int,
    action: Callable[[RpcEndpoint], Awaitable[T]],
) -> T:
    """Open an endpoint, run ``action`` on it and close it again."""

    async def _main() -> T:
        async with make_endpoint(rpc_url, retries) as endpoint:
            return await action(endpoint)

    return asyncio.run(_main())


def load_wallet() -> LocalAccount:
    try:
        return get_account()
    except (ValueError, FileNotFoundError) as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        click.echo("Run 'obol genesis' first.")
        sys.exit(1)


def fail(exc: ObolError, prefix: str = "ERROR") -> NoReturn:
    click.secho(f"{prefix}: {exc}", fg="red")
    stage = getattr(exc, "stage", None)
    if stage is not None:
        click.echo(click.style("  Stage: ", dim=True) + str(getattr(stage, "value", stage)))
    sys.exit(exc.exit_code)


def label(text: str, width: int = 12) -> str:
    return click.style(f"  {text + ':':<{width}}", dim=True)


def echo_field(name: str, value: Any, **style: Any) -> None:
    click.echo(label(name) + click.style(str(value), **style))
