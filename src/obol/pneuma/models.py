from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional

from ..errors import ConfirmationIndeterminate, NetworkError
from ..utils import explorer_url


class Stage(str, enum.Enum):
    """Progress of a single transfer, in pipeline order."""

    UNBUILT = "unbuilt"
    PRICED = "priced"
    LIMIT_ESTIMATED = "limit_estimated"
    NONCE_ASSIGNED = "nonce_assigned"
    BALANCE_VERIFIED = "balance_verified"
    SIGNED = "signed"
    BROADCAST = "broadcast"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    UNCONFIRMED = "unconfirmed"


class Outcome(str, enum.Enum):
    CONFIRMED = "confirmed"
    FAILED = "failed"
    UNCONFIRMED = "unconfirmed"


@dataclass(frozen=True)
class TransactionRequest:
    """
    A legacy (fixed gas price) native-currency transfer.

    Attributes:
        sender: Checksummed address of the signing account
        to: Checksummed destination address (never the zero address)
        value: Amount in wei
        gas_price: Gas price in wei
        gas_limit: Maximum gas units
        nonce: Sender's sequence number
        chain_id: Network the signature is bound to
    """
    sender: str
    to: str
    value: int
    gas_price: int
    gas_limit: int
    nonce: int
    chain_id: int

    @property
    def max_fee(self) -> int:
        return self.gas_price * self.gas_limit

    @property
    def total_cost(self) -> int:
        return self.value + self.max_fee

    def to_dict(self) -> dict[str, Any]:
        """Field layout expected by eth-account's ``sign_transaction``."""
        return {
            "to": self.to,
            "value": self.value,
            "gas": self.gas_limit,
            "gasPrice": self.gas_price,
            "nonce": self.nonce,
            "chainId": self.chain_id,
        }


@dataclass(frozen=True)
class SignedTransaction:
    raw_transaction: bytes
    tx_hash: str
    request: TransactionRequest

    @property
    def raw_hex(self) -> str:
        return "0x" + self.raw_transaction.hex()


@dataclass(frozen=True)
class TransactionReceipt:
    transaction_hash: str
    block_number: Optional[int]
    gas_used: int
    status: bool

    @classmethod
    def from_rpc(cls, payload: dict[str, Any]) -> "TransactionReceipt":
        """Parse an ``eth_getTransactionReceipt`` result object."""
        try:
            block = payload.get("blockNumber")
            status = payload.get("status")
            return cls(
                transaction_hash=str(payload["transactionHash"]),
                block_number=int(block, 16) if block is not None else None,
                gas_used=int(payload.get("gasUsed") or "0x0", 16),
                status=status is not None and int(status, 16) == 1,
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise NetworkError(
                "eth_getTransactionReceipt", f"malformed receipt: {payload!r}"
            ) from exc


@dataclass(frozen=True)
class TransferResult:
    outcome: Outcome
    tx_hash: str
    request: TransactionRequest
    receipt: Optional[TransactionReceipt] = None
    error: Optional[ConfirmationIndeterminate] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is Outcome.CONFIRMED

    @property
    def explorer_url(self) -> str:
        return explorer_url(self.tx_hash)
