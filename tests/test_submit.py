"""Tests for broadcasting and receipt polling."""

from __future__ import annotations

import asyncio

import pytest
from eth_account.signers.local import LocalAccount

from conftest import RECIPIENT, FakeNode
from obol.errors import ConfirmationIndeterminate, SubmissionError
from obol.pneuma.models import Outcome, SignedTransaction
from obol.pneuma.rpc import RpcEndpoint
from obol.pneuma.tx import Submitter, build_transfer, sign_transaction


@pytest.fixture()
def signed(wallet: LocalAccount) -> SignedTransaction:
    request = build_transfer(
        sender=wallet.address,
        to=RECIPIENT,
        value=1,
        gas_price=1_100_000_000,
        gas_limit=25_200,
        nonce=7,
    )
    return sign_transaction(request, wallet)


@pytest.fixture()
def submitter(endpoint: RpcEndpoint) -> Submitter:
    return Submitter(endpoint, poll_interval=0.01)


class TestBroadcast:
    @pytest.mark.asyncio
    async def test_returns_node_hash(
        self, node: FakeNode, submitter: Submitter, signed: SignedTransaction
    ) -> None:
        assert await submitter.broadcast(signed) == signed.tx_hash
        assert node.sent == [signed.raw_hex]

    @pytest.mark.asyncio
    async def test_rejection(
        self, node: FakeNode, submitter: Submitter, signed: SignedTransaction
    ) -> None:
        node.errors["eth_sendRawTransaction"] = {"code": -32000, "message": "nonce too low"}
        with pytest.raises(SubmissionError, match="nonce too low") as exc_info:
            await submitter.broadcast(signed)
        assert exc_info.value.tx_hash == signed.tx_hash
        assert exc_info.value.exit_code == 5

    @pytest.mark.asyncio
    async def test_transport_failure_is_ambiguous(
        self, node: FakeNode, submitter: Submitter, signed: SignedTransaction
    ) -> None:
        node.down.add("eth_sendRawTransaction")
        with pytest.raises(SubmissionError, match="may still reach the network"):
            await submitter.broadcast(signed)

    @pytest.mark.asyncio
    async def test_second_broadcast_refused(
        self, node: FakeNode, submitter: Submitter, signed: SignedTransaction
    ) -> None:
        await submitter.broadcast(signed)
        with pytest.raises(SubmissionError, match="already broadcast"):
            await submitter.broadcast(signed)
        assert node.calls.count("eth_sendRawTransaction") == 1


class TestSubmit:
    @pytest.mark.asyncio
    async def test_confirmed(
        self, node: FakeNode, submitter: Submitter, signed: SignedTransaction
    ) -> None:
        result = await submitter.submit(signed)
        assert result.outcome is Outcome.CONFIRMED
        assert result.succeeded
        assert result.tx_hash == signed.tx_hash
        assert result.receipt is not None
        assert result.receipt.block_number == 1234
        assert result.receipt.gas_used == 21_000
        assert result.explorer_url == f"https://sepolia.arbiscan.io/tx/{signed.tx_hash}"

    @pytest.mark.asyncio
    async def test_reverted_is_failed(
        self, node: FakeNode, submitter: Submitter, signed: SignedTransaction
    ) -> None:
        node.receipt_status = 0
        result = await submitter.submit(signed)
        assert result.outcome is Outcome.FAILED
        assert not result.succeeded
        assert result.receipt is not None
        assert result.receipt.status is False

    @pytest.mark.asyncio
    async def test_polls_until_mined(
        self, node: FakeNode, submitter: Submitter, signed: SignedTransaction
    ) -> None:
        node.pending_polls = 3
        result = await submitter.submit(signed)
        assert result.outcome is Outcome.CONFIRMED
        assert node.calls.count("eth_getTransactionReceipt") == 4

    @pytest.mark.asyncio
    async def test_pending_receipt_without_block_keeps_polling(
        self, node: FakeNode, endpoint: RpcEndpoint, signed: SignedTransaction
    ) -> None:
        node.overrides["eth_getTransactionReceipt"] = {
            "transactionHash": signed.tx_hash,
            "blockNumber": None,
            "gasUsed": "0x0",
            "status": None,
        }
        result = await Submitter(endpoint, poll_interval=0.01).submit(signed, timeout=0.05)
        assert result.outcome is Outcome.UNCONFIRMED

    @pytest.mark.asyncio
    async def test_receipt_query_failure_is_unconfirmed(
        self, node: FakeNode, submitter: Submitter, signed: SignedTransaction
    ) -> None:
        node.down.add("eth_getTransactionReceipt")
        result = await submitter.submit(signed)
        assert result.outcome is Outcome.UNCONFIRMED
        assert result.tx_hash == signed.tx_hash
        assert isinstance(result.error, ConfirmationIndeterminate)
        assert result.error.exit_code == 6

    @pytest.mark.asyncio
    async def test_timeout(
        self, node: FakeNode, submitter: Submitter, signed: SignedTransaction
    ) -> None:
        node.pending_polls = 10**6
        result = await submitter.submit(signed, timeout=0.05)
        assert result.outcome is Outcome.UNCONFIRMED
        assert result.error is not None
        assert "no receipt within" in result.error.reason

    @pytest.mark.asyncio
    async def test_cancel(
        self, node: FakeNode, submitter: Submitter, signed: SignedTransaction
    ) -> None:
        node.pending_polls = 10**6
        cancel = asyncio.Event()
        asyncio.get_running_loop().call_later(0.05, cancel.set)
        result = await submitter.submit(signed, cancel=cancel)
        assert result.outcome is Outcome.UNCONFIRMED
        assert result.error is not None
        assert result.error.reason == "wait cancelled"

    @pytest.mark.asyncio
    async def test_on_broadcast_called_once(
        self, submitter: Submitter, signed: SignedTransaction
    ) -> None:
        seen: list[str] = []
        await submitter.submit(signed, on_broadcast=seen.append)
        assert seen == [signed.tx_hash]
