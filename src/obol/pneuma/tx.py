"""
Transaction Builder - Build, sign, and send legacy transfer transactions.

Uses eth-account for signing and httpx-based JSON-RPC for sending.
The signing key never enters this module: signing goes through any object
implementing :class:`TransactionSigner` (eth-account's ``LocalAccount`` does).
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any, Callable, Optional, Protocol

from loguru import logger

from ..errors import (
    ConfirmationIndeterminate,
    NetworkError,
    RpcError,
    SubmissionError,
    ValidationError,
)
from ..utils import validate_address
from .models import Outcome, SignedTransaction, TransactionReceipt, TransactionRequest, TransferResult
from .rpc import CHAIN_ID, RpcEndpoint


class TransactionSigner(Protocol):
    """Anything that can sign a transaction dict for its own address."""

    @property
    def address(self) -> str:
        ...

    def sign_transaction(self, transaction_dict: dict[str, Any]) -> Any:
        ...


def _require_int(name: str, value: Any, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ValidationError(f"{name} must be >= {minimum}, got {value}")
    return value


def build_transfer(
    sender: str,
    to: str,
    value: int,
    gas_price: int,
    gas_limit: int,
    nonce: int,
    chain_id: int = CHAIN_ID,
) -> TransactionRequest:
    """
    Assemble an unsigned transfer.

    Raises:
        ValidationError: If any field is missing or malformed, or ``to`` is
            the zero address
    """
    if not sender:
        raise ValidationError("Sender address is required")
    if not to:
        raise ValidationError("Destination address is required")
    try:
        sender = validate_address(sender)
    except ValidationError as exc:
        raise ValidationError(f"Invalid sender: {exc}") from exc

    return TransactionRequest(
        sender=sender,
        to=validate_address(to),
        value=_require_int("value", value, 0),
        gas_price=_require_int("gas_price", gas_price, 0),
        gas_limit=_require_int("gas_limit", gas_limit, 1),
        nonce=_require_int("nonce", nonce, 0),
        chain_id=_require_int("chain_id", chain_id, 1),
    )


def sign_transaction(request: TransactionRequest, wallet: TransactionSigner) -> SignedTransaction:
    """
    Sign ``request`` with ``wallet``.

    The hash is computed locally, so it is known before broadcast.
    """
    if validate_address(wallet.address) != request.sender:
        raise ValidationError(
            f"Wallet address {wallet.address} does not match sender {request.sender}"
        )
    try:
        signed = wallet.sign_transaction(request.to_dict())
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Cannot sign transaction: {exc}") from exc

    return SignedTransaction(
        raw_transaction=bytes(signed.raw_transaction),
        tx_hash="0x" + bytes(signed.hash).hex(),
        request=request,
    )


class Submitter:
    """
    Broadcast a signed transaction and wait for its receipt.

    The once-only broadcast guard is per instance: reuse one Submitter to get
    it.  ``send_transfer`` builds a new Submitter (and a fresh nonce) per call.

    Args:
        endpoint: JSON-RPC endpoint
        poll_interval: Seconds between receipt queries
    """

    def __init__(self, endpoint: RpcEndpoint, poll_interval: float = 2.0) -> None:
        self.endpoint = endpoint
        self.poll_interval = poll_interval
        self._sent: set[str] = set()

    async def broadcast(self, signed: SignedTransaction) -> str:
        """
        Send the raw transaction.  Returns the hash the node reports.

        Raises:
            SubmissionError: If the node rejects the transaction, the call
                fails, or this transaction was already broadcast
        """
        if signed.tx_hash in self._sent:
            raise SubmissionError(
                f"Transaction {signed.tx_hash} was already broadcast", signed.tx_hash
            )
        self._sent.add(signed.tx_hash)

        try:
            tx_hash = await self.endpoint.send_raw_transaction(signed.raw_transaction)
        except RpcError as exc:
            raise SubmissionError(
                f"Broadcast rejected: {exc.rpc_message}", signed.tx_hash
            ) from exc
        except NetworkError as exc:
            raise SubmissionError(
                f"Broadcast failed, transaction may still reach the network: {exc}",
                signed.tx_hash,
            ) from exc

        if tx_hash.lower() != signed.tx_hash.lower():
            logger.warning(f"Node returned hash {tx_hash}, locally computed {signed.tx_hash}")
        logger.info(f"Broadcast {tx_hash}")
        return tx_hash

    async def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: Optional[float] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> TransactionReceipt:
        """
        Poll until the transaction is mined.

        Args:
            tx_hash: Transaction hash
            timeout: Maximum wait in seconds (None waits indefinitely)
            cancel: Event that abandons the wait when set

        Raises:
            ConfirmationIndeterminate: On query failure, timeout or cancellation
        """
        try:
            return await asyncio.wait_for(self._poll(tx_hash, cancel), timeout)
        except asyncio.TimeoutError as exc:
            raise ConfirmationIndeterminate(tx_hash, f"no receipt within {timeout}s") from exc
        except NetworkError as exc:
            raise ConfirmationIndeterminate(tx_hash, str(exc)) from exc

    async def _poll(self, tx_hash: str, cancel: Optional[asyncio.Event]) -> TransactionReceipt:
        while True:
            if cancel is not None and cancel.is_set():
                raise ConfirmationIndeterminate(tx_hash, "wait cancelled")
            receipt = await self.endpoint.get_transaction_receipt(tx_hash)
            if receipt is not None and receipt.block_number is not None:
                return receipt
            if cancel is None:
                await asyncio.sleep(self.poll_interval)
            else:
                with contextlib.suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(cancel.wait(), self.poll_interval)

    async def submit(
        self,
        signed: SignedTransaction,
        timeout: Optional[float] = None,
        cancel: Optional[asyncio.Event] = None,
        on_broadcast: Optional[Callable[[str], None]] = None,
    ) -> TransferResult:
        """Broadcast, then report Confirmed, Failed or Unconfirmed."""
        tx_hash = await self.broadcast(signed)
        if on_broadcast is not None:
            on_broadcast(tx_hash)

        try:
            receipt = await self.wait_for_receipt(tx_hash, timeout=timeout, cancel=cancel)
        except ConfirmationIndeterminate as exc:
            logger.warning(str(exc))
            return TransferResult(
                outcome=Outcome.UNCONFIRMED,
                tx_hash=tx_hash,
                request=signed.request,
                error=exc,
            )

        outcome = Outcome.CONFIRMED if receipt.status else Outcome.FAILED
        logger.info(f"Transaction {tx_hash} {outcome.value} in block {receipt.block_number}")
        return TransferResult(
            outcome=outcome,
            tx_hash=tx_hash,
            request=signed.request,
            receipt=receipt,
        )
