"""Tests for nonce lookup and the balance sufficiency check."""

from __future__ import annotations

import pytest

from conftest import FakeNode
from obol.errors import InsufficientFundsError, NetworkError
from obol.pneuma.account import BalanceChecker, NonceProvider
from obol.pneuma.rpc import RpcEndpoint

SENDER = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


class TestNonceProvider:
    @pytest.mark.asyncio
    async def test_next_nonce_is_transaction_count(self, node: FakeNode, endpoint: RpcEndpoint) -> None:
        node.nonce = 3
        assert await NonceProvider(endpoint).next_nonce(SENDER) == 3

    @pytest.mark.asyncio
    async def test_not_cached(self, node: FakeNode, endpoint: RpcEndpoint) -> None:
        provider = NonceProvider(endpoint)
        node.nonce = 3
        await provider.next_nonce(SENDER)
        node.nonce = 4
        assert await provider.next_nonce(SENDER) == 4

    @pytest.mark.asyncio
    async def test_network_failure(self, node: FakeNode, endpoint: RpcEndpoint) -> None:
        node.down.add("eth_getTransactionCount")
        with pytest.raises(NetworkError, match="eth_getTransactionCount"):
            await NonceProvider(endpoint).next_nonce(SENDER)


class TestBalanceChecker:
    @pytest.mark.asyncio
    async def test_shortfall_reported(self, node: FakeNode, endpoint: RpcEndpoint) -> None:
        node.balances[SENDER.lower()] = 100
        with pytest.raises(InsufficientFundsError) as exc_info:
            # 50 + 1 * 100 = 150
            await BalanceChecker(endpoint).verify(SENDER, value=50, gas_price=1, gas_limit=100)
        err = exc_info.value
        assert err.balance == 100
        assert err.total_cost == 150
        assert err.shortfall == 50
        assert err.exit_code == 4

    @pytest.mark.asyncio
    async def test_message_in_ether(self, node: FakeNode, endpoint: RpcEndpoint) -> None:
        node.balances[SENDER.lower()] = 10**18
        with pytest.raises(InsufficientFundsError) as exc_info:
            await BalanceChecker(endpoint).verify(SENDER, value=2 * 10**18, gas_price=0, gas_limit=21_000)
        message = str(exc_info.value)
        assert "balance 1 ETH" in message
        assert "required 2 ETH" in message
        assert "short 1 ETH" in message

    @pytest.mark.asyncio
    async def test_exact_balance_is_enough(self, node: FakeNode, endpoint: RpcEndpoint) -> None:
        node.balances[SENDER.lower()] = 150
        balance = await BalanceChecker(endpoint).verify(SENDER, value=50, gas_price=1, gas_limit=100)
        assert balance == 150

    @pytest.mark.asyncio
    async def test_network_failure(self, node: FakeNode, endpoint: RpcEndpoint) -> None:
        node.down.add("eth_getBalance")
        with pytest.raises(NetworkError):
            await BalanceChecker(endpoint).verify(SENDER, value=1, gas_price=1, gas_limit=1)
