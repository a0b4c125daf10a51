from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from eth_utils import (
    from_wei,
    is_address,
    is_checksum_address,
    is_checksum_formatted_address,
    to_checksum_address,
    to_wei,
)

from .errors import ValidationError

ZERO_ADDRESS = "0x" + "0" * 40

EXPLORER_TX_URL = "https://sepolia.arbiscan.io/tx/{tx_hash}"

UNIT_DECIMALS = {
    "wei": 0,
    "gwei": 9,
    "ether": 18,
}

_AMOUNT_RE = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")


def validate_address(address: str) -> str:
    """Return the checksummed form of ``address``.

    Rejects anything that is not a 20-byte hex address (including a bad
    mixed-case checksum) and the zero address.
    """
    if not isinstance(address, str) or not is_address(address.strip()):
        raise ValidationError(f"Invalid address format: {address!r}")
    address = address.strip()
    if is_checksum_formatted_address(address) and not is_checksum_address(address):
        raise ValidationError(f"Invalid address format: {address!r} (bad checksum)")
    checksummed = to_checksum_address(address)
    if checksummed == ZERO_ADDRESS:
        raise ValidationError("Address must not be the zero address")
    return checksummed


def parse_amount(amount: str, unit: str = "ether") -> int:
    """Parse a non-negative decimal string into wei."""
    if unit not in UNIT_DECIMALS:
        raise ValidationError(f"Unknown unit: {unit}")
    text = (amount or "").strip()
    if not _AMOUNT_RE.match(text):
        raise ValidationError(f"Invalid amount: {amount!r}")
    # Counted on the digits; Decimal arithmetic rounds at the context precision
    fraction = text.partition(".")[2].rstrip("0")
    if len(fraction) > UNIT_DECIMALS[unit]:
        raise ValidationError(
            f"Amount {amount!r} has more than {UNIT_DECIMALS[unit]} decimal places"
        )
    try:
        return int(to_wei(Decimal(text), unit))
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid amount: {amount!r}") from exc
    except ValueError as exc:
        raise ValidationError(f"Amount {amount!r} exceeds the largest transferable value") from exc


def format_units(value: int, unit: str = "ether") -> str:
    """Render a wei quantity in ``unit`` without trailing zeros."""
    text = format(Decimal(from_wei(value, unit)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def explorer_url(tx_hash: str) -> str:
    if not tx_hash.startswith("0x"):
        tx_hash = "0x" + tx_hash
    return EXPLORER_TX_URL.format(tx_hash=tx_hash)
