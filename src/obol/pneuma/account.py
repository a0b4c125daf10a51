"""
Per-account state lookups: next nonce and balance sufficiency.

Neither component caches anything.  Two transfers in flight from the same
account can read the same nonce; callers must not run them concurrently.
"""

from __future__ import annotations

from loguru import logger

from ..errors import InsufficientFundsError
from .rpc import RpcEndpoint


class NonceProvider:
    def __init__(self, endpoint: RpcEndpoint) -> None:
        self.endpoint = endpoint

    async def next_nonce(self, address: str) -> int:
        nonce = await self.endpoint.get_transaction_count(address)
        logger.debug(f"Nonce for {address}: {nonce}")
        return nonce


class BalanceChecker:
    def __init__(self, endpoint: RpcEndpoint) -> None:
        self.endpoint = endpoint

    async def verify(self, address: str, value: int, gas_price: int, gas_limit: int) -> int:
        """
        Ensure ``address`` can pay ``value + gas_price * gas_limit``.

        Returns:
            The current balance in wei

        Raises:
            InsufficientFundsError: If the balance is below the total cost
        """
        total_cost = value + gas_price * gas_limit
        balance = await self.endpoint.get_balance(address)
        if balance < total_cost:
            raise InsufficientFundsError(balance=balance, total_cost=total_cost)
        logger.debug(f"Balance {balance} wei covers total cost {total_cost} wei")
        return balance
