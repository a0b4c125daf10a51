"""
JSON-RPC client for Arbitrum Sepolia.

Lightweight alternative to web3.py: uses httpx for HTTP.  Every call is an
independent request/response exchange, so one ``RpcEndpoint`` can be shared by
concurrent transfers from different accounts.
"""

from __future__ import annotations

import itertools
import os
from typing import Any, Optional, Union

import httpx
from loguru import logger

from ..errors import NetworkError, RpcError
from .models import TransactionReceipt
from .retry import NO_RETRY, RetryPolicy

# Default RPC endpoint (Arbitrum Sepolia)
DEFAULT_RPC_URL = "https://arbitrum-sepolia-rpc.publicnode.com"
CHAIN_ID = 421614  # Arbitrum Sepolia


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("ARBITRUM_SEPOLIA_RPC", DEFAULT_RPC_URL)


def _quantity(operation: str, result: Any) -> int:
    """Decode a hex-encoded JSON-RPC quantity."""
    if not isinstance(result, str) or not result.startswith("0x"):
        raise NetworkError(operation, f"malformed quantity: {result!r}")
    try:
        return int(result, 16)
    except ValueError as exc:
        raise NetworkError(operation, f"malformed quantity: {result!r}") from exc


class RpcEndpoint:
    """
    Async JSON-RPC endpoint.

    Args:
        url: RPC endpoint URL
        timeout: Per-request HTTP timeout in seconds
        retry: Policy applied to read-only queries (default: single attempt)
        transport: Optional httpx transport (tests use ``httpx.MockTransport``)
    """

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        timeout: float = 30.0,
        retry: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url or DEFAULT_RPC_URL
        self.retry = retry or NO_RETRY
        self._ids = itertools.count(1)
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "RpcEndpoint":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def call(self, method: str, params: list) -> Any:
        """
        Make a single JSON-RPC call.

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the node answers with an error object
            NetworkError: On transport failure or an unparseable reply
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        logger.debug(f"RPC -> {method}")

        try:
            response = await self._client.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise NetworkError(method, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise NetworkError(method, f"invalid JSON response: {exc}") from exc

        if not isinstance(data, dict):
            raise NetworkError(method, f"unexpected response: {data!r}")

        if data.get("error") is not None:
            error = data["error"]
            if isinstance(error, dict):
                raise RpcError(method, error.get("code"), str(error.get("message", error)))
            raise RpcError(method, None, str(error))

        if "result" not in data:
            raise NetworkError(method, f"response has no result: {data!r}")

        return data["result"]

    async def _query(self, method: str, params: list) -> Any:
        return await self.retry.run(method, lambda: self.call(method, params))

    async def get_balance(self, address: str, block: str = "latest") -> int:
        """Get the balance of ``address`` in wei."""
        method = "eth_getBalance"
        return _quantity(method, await self._query(method, [address, block]))

    async def get_gas_price(self) -> int:
        """Get current gas price in wei."""
        method = "eth_gasPrice"
        return _quantity(method, await self._query(method, []))

    async def estimate_gas(self, sender: str, to: str, value: int) -> int:
        """Simulate a plain transfer and return the gas it would use."""
        method = "eth_estimateGas"
        draft = {"from": sender, "to": to, "value": hex(value)}
        return _quantity(method, await self._query(method, [draft]))

    async def get_transaction_count(self, address: str, block: str = "pending") -> int:
        """
        Get the transaction count for ``address``.

        The ``pending`` tag counts transactions already sitting in the node's
        pool, so the result is the next usable nonce.
        """
        method = "eth_getTransactionCount"
        return _quantity(method, await self._query(method, [address, block]))

    async def get_chain_id(self) -> int:
        method = "eth_chainId"
        return _quantity(method, await self._query(method, []))

    async def send_raw_transaction(self, raw_tx: Union[bytes, str]) -> str:
        """
        Send a signed raw transaction.  Never retried.

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        method = "eth_sendRawTransaction"
        if isinstance(raw_tx, bytes):
            raw_tx = "0x" + raw_tx.hex()
        result = await self.call(method, [raw_tx])
        if not isinstance(result, str) or not result.startswith("0x"):
            raise NetworkError(method, f"malformed transaction hash: {result!r}")
        return result

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[TransactionReceipt]:
        """Return the receipt, or None while the transaction is not mined."""
        method = "eth_getTransactionReceipt"
        result = await self._query(method, [tx_hash])
        if result is None:
            return None
        if not isinstance(result, dict):
            raise NetworkError(method, f"malformed receipt: {result!r}")
        return TransactionReceipt.from_rpc(result)
