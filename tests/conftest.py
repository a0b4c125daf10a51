"""Shared fixtures: a fake JSON-RPC node served through httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx
import pytest
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import keccak

from obol.pneuma.rpc import CHAIN_ID, RpcEndpoint

TEST_PRIVATE_KEY = "0x" + "4c" * 32
RECIPIENT = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"
ONE_ETH = 10**18
GWEI = 10**9


class FakeNode:
    """
    In-memory JSON-RPC node.

    Attributes mirror node state; tests mutate them to script a scenario:
        balances:        lowercase address -> wei (missing = default_balance)
        gas_price:       eth_gasPrice result
        estimate:        eth_estimateGas result
        nonce:           eth_getTransactionCount result
        receipt_status:  status of mined receipts (1 success, 0 failure)
        pending_polls:   receipt queries answered with null before mining
        errors:          method -> JSON-RPC error object to reply with
        down:            methods whose request fails at the transport level
        overrides:       method -> raw result to reply with
    """

    def __init__(self) -> None:
        self.balances: dict[str, int] = {}
        self.default_balance = ONE_ETH
        self.gas_price = GWEI
        self.estimate = 21_000
        self.nonce = 7
        self.chain_id = CHAIN_ID
        self.receipt_status = 1
        self.pending_polls = 0
        self.errors: dict[str, dict[str, Any]] = {}
        self.down: set[str] = set()
        self.overrides: dict[str, Any] = {}
        self.calls: list[str] = []
        self.params: dict[str, list] = {}
        self.sent: list[str] = []
        self._receipt_polls = 0

    # ---- JSON-RPC methods ----

    def eth_getBalance(self, params: list) -> str:
        return hex(self.balances.get(params[0].lower(), self.default_balance))

    def eth_gasPrice(self, params: list) -> str:
        return hex(self.gas_price)

    def eth_estimateGas(self, params: list) -> str:
        return hex(self.estimate)

    def eth_getTransactionCount(self, params: list) -> str:
        return hex(self.nonce)

    def eth_chainId(self, params: list) -> str:
        return hex(self.chain_id)

    def eth_sendRawTransaction(self, params: list) -> str:
        raw = params[0]
        self.sent.append(raw)
        return "0x" + keccak(hexstr=raw).hex()

    def eth_getTransactionReceipt(self, params: list) -> Optional[dict]:
        tx_hash = params[0]
        known = {"0x" + keccak(hexstr=raw).hex() for raw in self.sent}
        if tx_hash not in known:
            return None
        self._receipt_polls += 1
        if self._receipt_polls <= self.pending_polls:
            return None
        return {
            "transactionHash": tx_hash,
            "blockNumber": hex(1234),
            "gasUsed": hex(21_000),
            "status": hex(self.receipt_status),
        }

    # ---- transport ----

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method = body["method"]
        self.calls.append(method)
        self.params[method] = body["params"]

        if method in self.down:
            raise httpx.ConnectError("connection refused", request=request)

        reply: dict[str, Any] = {"jsonrpc": "2.0", "id": body["id"]}
        if method in self.errors:
            reply["error"] = self.errors[method]
        elif method in self.overrides:
            reply["result"] = self.overrides[method]
        else:
            reply["result"] = getattr(self, method)(body["params"])
        return httpx.Response(200, json=reply)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def endpoint(self, **kwargs: Any) -> RpcEndpoint:
        return RpcEndpoint("http://node.test", transport=self.transport, **kwargs)


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def endpoint(node: FakeNode) -> RpcEndpoint:
    return node.endpoint()


@pytest.fixture()
def wallet() -> LocalAccount:
    return Account.from_key(TEST_PRIVATE_KEY)
