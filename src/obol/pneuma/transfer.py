"""
Transfer pipeline.

Drives one native-currency transfer through its stages, strictly in order::

    UNBUILT -> PRICED -> LIMIT_ESTIMATED -> NONCE_ASSIGNED -> BALANCE_VERIFIED
            -> SIGNED -> BROADCAST -> CONFIRMED | FAILED | UNCONFIRMED

Anything raised before SIGNED leaves no trace on-chain.  Once BROADCAST is
reached the transaction may already be in the network; do not resend it
without deriving a fresh nonce.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional, Union

from loguru import logger

from ..errors import ObolError, ValidationError
from ..utils import format_units, parse_amount, validate_address
from .account import BalanceChecker, NonceProvider
from .gas import GasEstimator, GasPricer
from .models import Outcome, Stage, TransferResult
from .rpc import CHAIN_ID, RpcEndpoint
from .tx import Submitter, TransactionSigner, build_transfer, sign_transaction

StageCallback = Callable[[Stage], None]

_FINAL_STAGE = {
    Outcome.CONFIRMED: Stage.CONFIRMED,
    Outcome.FAILED: Stage.FAILED,
    Outcome.UNCONFIRMED: Stage.UNCONFIRMED,
}


async def send_transfer(
    endpoint: RpcEndpoint,
    wallet: TransactionSigner,
    to: str,
    amount: Union[str, int],
    *,
    unit: str = "ether",
    chain_id: int = CHAIN_ID,
    timeout: Optional[float] = None,
    cancel: Optional[asyncio.Event] = None,
    poll_interval: float = 2.0,
    on_stage: Optional[StageCallback] = None,
) -> TransferResult:
    """
    Price, sign, broadcast and confirm a transfer of ``amount`` to ``to``.

    Args:
        endpoint: JSON-RPC endpoint
        wallet: Signing capability for the sending account
        to: Destination address
        amount: Decimal string in ``unit``, or an int already in wei
        unit: Unit of a string ``amount``
        chain_id: Chain the signature is bound to
        timeout: Maximum seconds to wait for a receipt (None = no limit)
        cancel: Event that abandons the receipt wait when set
        poll_interval: Seconds between receipt queries
        on_stage: Called with each stage as it is reached

    Returns:
        TransferResult with outcome CONFIRMED, FAILED or UNCONFIRMED

    Raises:
        ValidationError, NetworkError, InsufficientFundsError, SubmissionError.
        The raised error's ``stage`` is the last stage reached.
    """
    stage = Stage.UNBUILT

    def advance(next_stage: Stage) -> None:
        nonlocal stage
        stage = next_stage
        logger.debug(f"Transfer stage: {stage.value}")
        if on_stage is not None:
            on_stage(stage)

    try:
        recipient = validate_address(to)
        if isinstance(amount, int) and not isinstance(amount, bool):
            if amount < 0:
                raise ValidationError(f"Invalid amount: {amount}")
            value = amount
        else:
            value = parse_amount(str(amount), unit)
        sender = validate_address(wallet.address)

        gas_price = await GasPricer(endpoint).price()
        advance(Stage.PRICED)

        gas_limit = await GasEstimator(endpoint).estimate(sender, recipient, value)
        advance(Stage.LIMIT_ESTIMATED)

        nonce = await NonceProvider(endpoint).next_nonce(sender)
        advance(Stage.NONCE_ASSIGNED)

        await BalanceChecker(endpoint).verify(sender, value, gas_price, gas_limit)
        advance(Stage.BALANCE_VERIFIED)

        request = build_transfer(
            sender=sender,
            to=recipient,
            value=value,
            gas_price=gas_price,
            gas_limit=gas_limit,
            nonce=nonce,
            chain_id=chain_id,
        )
        logger.info(
            f"Transfer {format_units(value)} ETH {sender} -> {recipient} "
            f"(nonce {nonce}, gas price {gas_price} wei, gas limit {gas_limit}, "
            f"max fee {format_units(request.max_fee)} ETH)"
        )
        signed = sign_transaction(request, wallet)
        advance(Stage.SIGNED)

        submitter = Submitter(endpoint, poll_interval=poll_interval)
        result = await submitter.submit(
            signed,
            timeout=timeout,
            cancel=cancel,
            on_broadcast=lambda _hash: advance(Stage.BROADCAST),
        )
    except ObolError as exc:
        exc.stage = stage
        raise

    if result.error is not None:
        result.error.stage = stage
    advance(_FINAL_STAGE[result.outcome])
    return result
