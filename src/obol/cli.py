"""
obol CLI

    obol genesis                        create the operator wallet
    obol whoami / obol info             wallet and endpoint status
    obol balance [ADDRESS]              ETH balance of an address
    obol gas                            gas price and transfer fee
    obol send --to ADDR --amount ETH    transfer and wait for the receipt

Exit status is the ``exit_code`` of the error that stopped the command.
"""

from __future__ import annotations

import sys

import click

from . import __version__
from .log import setup_logging
from .pneuma.rpc import CHAIN_ID
from .sigil.eth import load_config
from .theurgy.balance import balance
from .theurgy.gas import gas
from .theurgy.genesis import genesis
from .theurgy.identity import info, whoami
from .theurgy.send import send


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="obol")
@click.option("-v", "--verbose", is_flag=True, help="Log pipeline progress to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """obol: minimal Arbitrum Sepolia transfer client."""
    setup_logging(verbose)
    load_config()
    if ctx.invoked_subcommand is None:
        click.secho(f"obol v{__version__} / Arbitrum Sepolia (chain {CHAIN_ID})", fg="cyan", bold=True)
        click.echo()
        click.echo(ctx.get_help())


for _command in (genesis, whoami, info, balance, gas, send):
    cli.add_command(_command)


# ============ Entry Point ============


def main() -> None:
    """obol CLI entry point."""
    if sys.platform == "win32":
        for stream in (sys.stdout, sys.stderr):
            reconfigure = getattr(stream, "reconfigure", None)
            if reconfigure is not None:
                reconfigure(encoding="utf-8")
    cli()


if __name__ == "__main__":
    main()
