"""
Genesis - Create the operator wallet.

Generates an ECDSA wallet if none exists and writes default settings to
~/.obol/.env.  Existing keys and user overrides are never replaced.
"""

from __future__ import annotations

import os
import sys

import click

from ..pneuma.rpc import DEFAULT_RPC_URL
from ..sigil import eth

# Written into ~/.obol/.env when absent
_DEFAULTS: dict[str, str] = {
    "ARBITRUM_SEPOLIA_RPC": DEFAULT_RPC_URL,
}

FAUCET_URL = "https://www.alchemy.com/faucets/arbitrum-sepolia"


def _ensure_identity() -> tuple[str, bool]:
    """
    Ensure an ECDSA wallet exists.  Returns (address, created).

    Raises:
        ValueError: If a PRIVATE_KEY is configured but unusable; the file is
            left untouched
    """
    try:
        private_key = eth.load_private_key()
    except ValueError:
        private_key, address = eth.generate_eoa()
        eth.save_private_key(private_key)
        created = True
    else:
        address = eth.get_address(private_key)
        created = False

    _ensure_defaults()
    return address, created


def _ensure_defaults() -> None:
    """Add default config keys missing from ~/.obol/.env."""
    existing = eth.read_env_file(eth.OBOL_ENV)
    missing = {k: v for k, v in _DEFAULTS.items() if k not in existing}
    if missing:
        eth.update_env_file(missing, eth.OBOL_ENV)
        for key, value in missing.items():
            os.environ.setdefault(key, value)


@click.command()
def genesis() -> None:
    """Create a wallet key (if missing) and default configuration."""
    click.echo()
    click.echo(
        click.style("  ◆ ", fg="cyan")
        + click.style("Genesis", fg="bright_white", bold=True)
        + click.style(" ─── Prepare the operator wallet", fg="cyan")
    )
    click.echo()

    try:
        address, created = _ensure_identity()
    except ValueError as exc:
        click.secho(f"  ERROR: {exc}", fg="red")
        click.echo(f"  Fix or remove PRIVATE_KEY in {eth.OBOL_ENV}; nothing was written.")
        sys.exit(1)

    click.echo(click.style("        Address: ", dim=True) + click.style(address, fg="bright_white"))
    click.echo(click.style("        Config:  ", dim=True) + click.style(str(eth.OBOL_ENV), fg="bright_white"))
    click.echo()

    if not created:
        click.secho("  Wallet already exists; nothing changed.", dim=True)
        click.echo()
        return

    click.secho("        IMPORTANT: Back up ~/.obol/.env; loss is irreversible.", fg="yellow", bold=True)
    click.echo()
    click.secho("  Next steps:", fg="cyan")
    click.echo(f"    1. Fund your address with testnet ETH: {FAUCET_URL}")
    click.echo("    2. Run 'obol balance' to check it arrived")
    click.echo("    3. Run 'obol send --to <address> --amount <eth>'")
    click.echo()
