"""
Error taxonomy for the transfer pipeline.

Every error carries a CLI ``exit_code`` and, once it has passed through the
pipeline, the last :class:`~obol.pneuma.transfer.Stage` reached before the
failure (``stage``).
"""

from __future__ import annotations

from typing import Any, Optional


class ObolError(RuntimeError):
    """Base class for every error obol raises."""

    exit_code: int = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.stage: Optional[Any] = None


class ValidationError(ObolError):
    """Malformed address, zero address, malformed amount or transaction field."""

    exit_code = 2


class NetworkError(ObolError):
    """Endpoint unreachable or returned an unusable response."""

    exit_code = 3

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class RpcError(NetworkError):
    """The node answered with a JSON-RPC error object."""

    def __init__(self, operation: str, code: Optional[int], message: str) -> None:
        super().__init__(operation, f"RPC error {code}: {message}")
        self.code = code
        self.rpc_message = message


class InsufficientFundsError(ObolError):
    """Balance does not cover value plus the maximum gas fee."""

    exit_code = 4

    def __init__(self, balance: int, total_cost: int) -> None:
        from .utils import format_units

        self.balance = balance
        self.total_cost = total_cost
        self.shortfall = total_cost - balance
        super().__init__(
            "Insufficient funds: "
            f"balance {format_units(balance)} ETH, "
            f"required {format_units(total_cost)} ETH, "
            f"short {format_units(self.shortfall)} ETH"
        )


class SubmissionError(ObolError):
    """Broadcast rejected by the node, or the broadcast call itself failed."""

    exit_code = 5

    def __init__(self, message: str, tx_hash: Optional[str] = None) -> None:
        super().__init__(message)
        self.tx_hash = tx_hash


class ConfirmationIndeterminate(ObolError):
    """Broadcast succeeded but no receipt could be obtained."""

    exit_code = 6

    def __init__(self, tx_hash: str, reason: str) -> None:
        super().__init__(f"Transaction {tx_hash} broadcast, confirmation unknown: {reason}")
        self.tx_hash = tx_hash
        self.reason = reason
