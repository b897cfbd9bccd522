"""Node-backed ledger against a fake JSON-RPC node served by aiohttp."""

from __future__ import annotations

import sqlite3

import pytest
from aiohttp import web

from ethtx_adapter.adapter.eth_tx import EthTxAdapter
from ethtx_adapter.adapter.receipts import RECEIPTS_KEY
from ethtx_adapter.errors import SubmissionError, TxLookupError
from ethtx_adapter.ethereum.ledger import NodeTxManager
from ethtx_adapter.ethereum.rpc import EthRpcClient
from ethtx_adapter.models.run import RunInput, RunStatus

from tests.conftest import FAKE_NODE_HOST, FAKE_NODE_PORT, FAKE_NODE_URL
from tests.factories import BLOCK_HASH, CONTRACT_ADDRESS, SENDER_ADDRESS, make_params, make_run

pytestmark = pytest.mark.node


class FakeNode:
    """In-memory chain: a block counter, sent transactions and receipts."""

    def __init__(self) -> None:
        self.block = 100
        self.sent: list[dict] = []
        self.receipts: dict[str, dict] = {}
        self.send_error: dict | None = None
        self.receipt_error: dict | None = None
        self.calls: list[str] = []

    def mine(self, tx_hash: str, blocks: int = 1, status: str = "0x1") -> None:
        """Include ``tx_hash`` in the next block, then mine ``blocks - 1`` more."""
        self.block += 1
        self.receipts[tx_hash] = {
            "transactionHash": tx_hash,
            "blockNumber": hex(self.block),
            "blockHash": BLOCK_HASH,
            "status": status,
            "logs": [],
        }
        self.block += blocks - 1

    async def handle(self, request: web.Request) -> web.Response:
        body = await request.json()
        method, params = body["method"], body["params"]
        self.calls.append(method)
        reply = {"jsonrpc": "2.0", "id": body["id"]}

        if method == "eth_blockNumber":
            reply["result"] = hex(self.block)
        elif method == "eth_sendTransaction":
            if self.send_error:
                reply["error"] = self.send_error
            else:
                self.sent.append(params[0])
                reply["result"] = "0x" + f"{len(self.sent):064x}"
        elif method == "eth_getTransactionReceipt":
            if self.receipt_error:
                reply["error"] = self.receipt_error
            else:
                reply["result"] = self.receipts.get(params[0])
        else:
            reply["error"] = {"code": -32601, "message": "method not found"}
        return web.json_response(reply)


@pytest.fixture
async def fake_node():
    node = FakeNode()
    app = web.Application()
    app.router.add_post("/", node.handle)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, FAKE_NODE_HOST, FAKE_NODE_PORT)
    await site.start()
    yield node
    await runner.cleanup()


@pytest.fixture
async def rpc(fake_node):
    client = EthRpcClient(FAKE_NODE_URL, timeout=5)
    yield client
    await client.close()


@pytest.fixture
def node_ledger(rpc, store):
    return NodeTxManager(rpc, store, SENDER_ADDRESS, min_confirmations=3)


# ── Connectivity ──────────────────────────────────────────────────


async def test_connected_when_node_answers(node_ledger):
    assert await node_ledger.is_connected()


async def test_disconnected_when_nothing_listens(store):
    client = EthRpcClient("http://127.0.0.1:18599", timeout=1)
    try:
        ledger = NodeTxManager(client, store, SENDER_ADDRESS)
        assert not await ledger.is_connected()
    finally:
        await client.close()


# ── Creation ──────────────────────────────────────────────────────


async def test_create_sends_from_managed_account(node_ledger, fake_node, store):
    tx_hash = await node_ledger.create_transaction(
        "run-1", CONTRACT_ADDRESS, b"\xde\xad", 1_000_000_000, 90_000,
    )

    assert fake_node.sent == [{
        "from": SENDER_ADDRESS,
        "to": CONTRACT_ADDRESS,
        "data": "0xdead",
        "gasPrice": hex(1_000_000_000),
        "gas": hex(90_000),
    }]
    record = await store.get_transaction(tx_hash)
    assert record is not None
    assert record.sent_at == 100


async def test_create_is_idempotent_per_key(node_ledger, fake_node):
    first = await node_ledger.create_transaction("run-1", CONTRACT_ADDRESS, b"", None, None)
    second = await node_ledger.create_transaction("run-1", CONTRACT_ADDRESS, b"", None, None)

    assert first == second
    assert len(fake_node.sent) == 1
    assert "gas" not in fake_node.sent[0]


async def test_create_permanent_node_error(node_ledger, fake_node):
    fake_node.send_error = {"code": -32000, "message": "insufficient funds for gas * price + value"}

    with pytest.raises(SubmissionError) as info:
        await node_ledger.create_transaction("run-1", CONTRACT_ADDRESS, b"", None, None)
    assert info.value.retryable is False


async def test_create_transient_node_error(node_ledger, fake_node):
    fake_node.send_error = {"code": -32000, "message": "txpool is full"}

    with pytest.raises(SubmissionError) as info:
        await node_ledger.create_transaction("run-1", CONTRACT_ADDRESS, b"", None, None)
    assert info.value.retryable is True


async def test_unrecorded_broadcast_is_not_retried(node_ledger, fake_node, store, monkeypatch):
    async def locked(*args):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(store, "save_transaction", locked)

    with pytest.raises(SubmissionError, match="sent but not recorded") as info:
        await node_ledger.create_transaction("run-1", CONTRACT_ADDRESS, b"", None, None)
    assert info.value.retryable is False
    assert len(fake_node.sent) == 1


# ── Tracking ──────────────────────────────────────────────────────


async def test_unknown_hash_raises_lookup_error(node_ledger):
    with pytest.raises(TxLookupError):
        await node_ledger.find_transaction_by_hash("0x" + "99" * 32)


async def test_confirmation_needs_depth(node_ledger, fake_node):
    tx_hash = await node_ledger.create_transaction("run-1", CONTRACT_ADDRESS, b"", None, None)

    record = await node_ledger.find_transaction_by_hash(tx_hash)
    assert not record.confirmed

    fake_node.mine(tx_hash, blocks=2)
    record = await node_ledger.find_transaction_by_hash(tx_hash)
    assert not record.confirmed and not record.failed

    fake_node.block += 1
    record = await node_ledger.find_transaction_by_hash(tx_hash)
    assert record.confirmed


async def test_reverted_receipt_marks_failed(node_ledger, fake_node, store):
    tx_hash = await node_ledger.create_transaction("run-1", CONTRACT_ADDRESS, b"", None, None)
    fake_node.mine(tx_hash, blocks=5, status="0x0")

    record = await node_ledger.find_transaction_by_hash(tx_hash)

    assert record.failed
    stored = await store.get_transaction(tx_hash)
    assert stored.failed


async def test_settled_record_skips_node(node_ledger, fake_node):
    tx_hash = await node_ledger.create_transaction("run-1", CONTRACT_ADDRESS, b"", None, None)
    fake_node.mine(tx_hash, blocks=3)
    await node_ledger.find_transaction_by_hash(tx_hash)
    fake_node.calls.clear()

    record = await node_ledger.find_transaction_by_hash(tx_hash)

    assert record.confirmed
    assert fake_node.calls == []


async def test_receipt_fetch_error_raises_lookup_error(node_ledger, fake_node):
    tx_hash = await node_ledger.create_transaction("run-1", CONTRACT_ADDRESS, b"", None, None)
    fake_node.receipt_error = {"code": -32603, "message": "internal error"}

    with pytest.raises(TxLookupError, match="internal error"):
        await node_ledger.get_receipt(tx_hash)


# ── Adapter end to end ────────────────────────────────────────────


async def test_adapter_runs_to_completion_against_node(node_ledger, fake_node):
    adapter = EthTxAdapter(node_ledger)
    params = make_params()
    run = make_run(result="0x2a", run_id="run-e2e")

    out = await adapter.perform(run, params)
    assert out.status is RunStatus.PENDING_CONFIRMATIONS
    tx_hash = out.data["result"]
    assert fake_node.sent[0]["data"].endswith("2a")

    fake_node.mine(tx_hash, blocks=3)
    run = RunInput.from_dict({"runId": run.run_id, "status": out.status.value, "data": out.data})
    out = await adapter.perform(run, params)

    assert out.status is RunStatus.COMPLETED
    assert out.data["result"] == tx_hash
    assert out.data[RECEIPTS_KEY][0]["blockNumber"] == hex(101)
    assert len(fake_node.sent) == 1
