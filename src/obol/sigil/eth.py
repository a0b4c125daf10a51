"""
Operator wallet storage.

The wallet key lives in ~/.obol/.env as PRIVATE_KEY (hex) next to the other
settings.  Only the CLI reads it; the transfer pipeline is handed a ready
``LocalAccount`` and never sees the key.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values, load_dotenv, set_key
from eth_account import Account
from eth_account.signers.local import LocalAccount

OBOL_DIR = Path.home() / ".obol"
OBOL_ENV = OBOL_DIR / ".env"

KEY_VAR = "PRIVATE_KEY"


def generate_eoa() -> tuple[str, str]:
    """Create a fresh wallet.  Returns (0x-prefixed private key, checksummed address)."""
    account = Account.create()
    return "0x" + bytes(account.key).hex(), account.address


def read_env_file(env_path: Path) -> dict[str, str]:
    """Entries of ``env_path``; empty when the file does not exist."""
    if not env_path.exists():
        return {}
    return {k: v for k, v in dotenv_values(env_path).items() if v is not None}


def update_env_file(values: Mapping[str, str], env_path: Path) -> Path:
    """Set ``values`` in ``env_path``, keeping every other entry.  Owner-only on Unix."""
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(exist_ok=True)
    for key, value in values.items():
        set_key(env_path, key, value, quote_mode="never")
    if os.name != "nt":
        env_path.chmod(0o600)
    return env_path


def save_private_key(private_key: str, env_path: Optional[Path] = None) -> Path:
    return update_env_file({KEY_VAR: private_key}, env_path or OBOL_ENV)


def load_config(env_path: Optional[Path] = None) -> None:
    """Export ~/.obol/.env entries that the environment does not already set."""
    load_dotenv(env_path or OBOL_ENV, override=False)


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Configured wallet key; the .env file wins over the process environment.

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If no key is configured
    """
    env_path = env_path or OBOL_ENV
    key = (read_env_file(env_path).get(KEY_VAR) or os.environ.get(KEY_VAR) or "").strip()
    if not key:
        raise ValueError(f"{KEY_VAR} not set. Run 'obol genesis' or add it to {env_path}")
    return key if key.startswith("0x") else "0x" + key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """
    Wallet for ``private_key``, or for the configured key when omitted.

    Raises:
        ValueError: If the key is missing or not a valid secp256k1 key
    """
    key = private_key if private_key is not None else load_private_key()
    try:
        return Account.from_key(key)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{KEY_VAR} is not a valid private key") from exc


def get_address(private_key: Optional[str] = None) -> str:
    return get_account(private_key).address
