"""Confirmation tracking: failed, unconfirmed and confirmed transactions."""

from __future__ import annotations

import httpx
import pytest

from ethtx_adapter.adapter.receipts import RECEIPTS_KEY, ReceiptAggregator
from ethtx_adapter.adapter.tracker import LATEST_TX_HASH_KEY, ConfirmationTracker
from ethtx_adapter.errors import MissingReceiptError, TransactionFailedError, TxLookupError
from ethtx_adapter.models.run import RunStatus

from tests.factories import HASH_A, make_pending_run, make_receipt, make_run
from tests.mocks import MockTxManager


@pytest.fixture
def tracker(ledger):
    return ConfirmationTracker(ledger, ReceiptAggregator())


async def test_unconfirmed_keeps_waiting_with_both_hash_keys(tracker, ledger):
    ledger.add_record(HASH_A, confirmed=False)

    out = await tracker.check(make_pending_run(HASH_A))

    assert out.status is RunStatus.PENDING_CONFIRMATIONS
    assert out.data["result"] == HASH_A
    assert out.data[LATEST_TX_HASH_KEY] == HASH_A
    assert ledger.receipt_calls == []


@pytest.mark.parametrize("confirmed", [False, True])
async def test_failed_is_terminal_regardless_of_confirmed(tracker, ledger, confirmed):
    ledger.add_record(HASH_A, confirmed=confirmed, failed=True)

    with pytest.raises(TransactionFailedError, match="transaction never succeeded"):
        await tracker.check(make_pending_run(HASH_A))
    assert ledger.receipt_calls == []


async def test_confirmed_aggregates_receipt(tracker, ledger):
    receipt = make_receipt(HASH_A, block_number=77)
    ledger.confirm(receipt)

    out = await tracker.check(make_pending_run(HASH_A))

    assert out.status is RunStatus.COMPLETED
    assert out.data["result"] == HASH_A
    assert out.data[RECEIPTS_KEY] == [receipt.to_json()]


async def test_confirmed_without_receipt_is_missing_receipt(tracker, ledger):
    ledger.add_record(HASH_A, confirmed=True)

    with pytest.raises(MissingReceiptError):
        await tracker.check(make_pending_run(HASH_A))


async def test_unknown_hash_is_lookup_error(tracker):
    with pytest.raises(TxLookupError):
        await tracker.check(make_pending_run(HASH_A))


async def test_ledger_exception_becomes_lookup_error():
    class BrokenLedger(MockTxManager):
        async def find_transaction_by_hash(self, tx_hash):
            raise ConnectionError("db gone")

    tracker = ConfirmationTracker(BrokenLedger(), ReceiptAggregator())
    with pytest.raises(TxLookupError, match="db gone"):
        await tracker.check(make_pending_run(HASH_A))


@pytest.mark.parametrize("result", [None, "", 42, "not a hash"])
async def test_result_without_hash_is_lookup_error(tracker, result):
    run = make_run(result=result, status=RunStatus.PENDING_CONFIRMATIONS)
    with pytest.raises(TxLookupError):
        await tracker.check(run)


async def test_hash_is_normalized_before_lookup(tracker, ledger):
    ledger.add_record(HASH_A)

    await tracker.check(make_pending_run(HASH_A.upper().replace("0X", "0x")))

    assert ledger.lookup_calls == [HASH_A]


async def test_hash_is_read_from_persisted_data(tracker, ledger):
    ledger.add_record(HASH_A)
    run = make_run(result=None, status=RunStatus.PENDING_CONFIRMATIONS, data={"result": HASH_A})

    out = await tracker.check(run)

    assert ledger.lookup_calls == [HASH_A]
    assert out.data[LATEST_TX_HASH_KEY] == HASH_A


async def test_receipt_fetch_exception_becomes_lookup_error():
    class DroppingLedger(MockTxManager):
        async def get_receipt(self, tx_hash):
            raise httpx.ConnectError("node dropped")

    ledger = DroppingLedger()
    ledger.add_record(HASH_A, confirmed=True)
    tracker = ConfirmationTracker(ledger, ReceiptAggregator())

    with pytest.raises(TxLookupError, match="node dropped") as info:
        await tracker.check(make_pending_run(HASH_A))
    assert isinstance(info.value.__cause__, httpx.ConnectError)
