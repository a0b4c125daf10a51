"""
Gas pricing and gas-limit estimation for plain value transfers.

All arithmetic is integer arithmetic in wei:

- price = network gas price * 110 // 100
- limit = (estimate or 21000) * 120 // 100
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from ..errors import NetworkError
from ..utils import format_units
from .rpc import RpcEndpoint

# Intrinsic cost of a value transfer without calldata
BASE_TRANSFER_GAS = 21_000

GAS_PRICE_PREMIUM_PERCENT = 110
GAS_LIMIT_BUFFER_PERCENT = 120


def apply_premium(base_price: int) -> int:
    return base_price * GAS_PRICE_PREMIUM_PERCENT // 100


def apply_buffer(gas_limit: int) -> int:
    return gas_limit * GAS_LIMIT_BUFFER_PERCENT // 100


class GasPricer:
    """Submission gas price: the node's current price plus a 10% premium."""

    def __init__(self, endpoint: RpcEndpoint) -> None:
        self.endpoint = endpoint

    async def price(self) -> int:
        base = await self.endpoint.get_gas_price()
        price = apply_premium(base)
        logger.debug(f"Gas price: base {base} wei, with premium {price} wei")
        return price


class GasEstimator:
    """
    Gas limit for a draft transfer.

    Falls back to ``BASE_TRANSFER_GAS`` when simulation fails.  That is only
    sound because transfers built here never carry calldata.
    """

    def __init__(self, endpoint: RpcEndpoint) -> None:
        self.endpoint = endpoint

    async def estimate(self, sender: str, to: str, value: int) -> int:
        try:
            estimate = await self.endpoint.estimate_gas(sender, to, value)
        except NetworkError as exc:
            logger.warning(
                f"Gas estimation failed ({exc}); using base transfer cost {BASE_TRANSFER_GAS}"
            )
            estimate = BASE_TRANSFER_GAS
        limit = apply_buffer(estimate)
        logger.debug(f"Gas limit: estimate {estimate}, with buffer {limit}")
        return limit


@dataclass(frozen=True)
class GasInfo:
    """Snapshot of network gas cost for a plain transfer."""
    gas_price_wei: int
    base_gas_limit: int = BASE_TRANSFER_GAS

    @property
    def gas_price_gwei(self) -> str:
        return format_units(self.gas_price_wei, "gwei")

    @property
    def estimated_fee_wei(self) -> int:
        return self.gas_price_wei * self.base_gas_limit

    @property
    def estimated_fee_eth(self) -> str:
        return format_units(self.estimated_fee_wei, "ether")

    def display(self) -> str:
        return (
            f"Gas price:          {self.gas_price_gwei} gwei ({self.gas_price_wei} wei)\n"
            f"Base gas limit:     {self.base_gas_limit}\n"
            f"Estimated transfer: {self.estimated_fee_eth} ETH ({self.estimated_fee_wei} wei)"
        )


async def get_gas_info(endpoint: RpcEndpoint) -> GasInfo:
    """Query the node's raw gas price (no premium) and derive the transfer fee."""
    return GasInfo(gas_price_wei=await endpoint.get_gas_price())
