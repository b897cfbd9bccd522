"""Confirmation tracker - re-checks a submitted transaction on each poll."""

from __future__ import annotations

import logging

from ethtx_adapter.adapter.receipts import RESULT_KEY, ReceiptAggregator
from ethtx_adapter.errors import (
    MissingReceiptError,
    TransactionFailedError,
    TxLookupError,
)
from ethtx_adapter.evm.words import normalize_hash
from ethtx_adapter.interfaces.ledger import TxManager
from ethtx_adapter.models.run import RunInput, RunOutput

log = logging.getLogger(__name__)

LATEST_TX_HASH_KEY = "latestOutgoingTxHash"


class ConfirmationTracker:
    """Classifies a pending transaction as failed, still pending, or confirmed."""

    def __init__(self, ledger: TxManager, aggregator: ReceiptAggregator) -> None:
        self._ledger = ledger
        self._aggregator = aggregator

    async def check(self, run: RunInput) -> RunOutput:
        """Raises TxLookupError, TransactionFailedError or MissingReceiptError."""
        tx_hash = _recorded_hash(run)

        try:
            record = await self._ledger.find_transaction_by_hash(tx_hash)
        except TxLookupError:
            raise
        except Exception as exc:
            raise TxLookupError(f"looking up tx {tx_hash}: {exc}") from exc

        data = dict(run.data)
        data[RESULT_KEY] = record.hash

        if record.failed:
            log.error("Run %s: tx %s failed", run.run_id, record.hash[:18])
            raise TransactionFailedError()

        if not record.confirmed:
            log.debug("Run %s: tx %s not yet confirmed", run.run_id, record.hash[:18])
            data[LATEST_TX_HASH_KEY] = record.hash
            return RunOutput.pending_confirmations(data)

        try:
            receipt = await self._ledger.get_receipt(record.hash)
        except TxLookupError:
            raise
        except Exception as exc:
            raise TxLookupError(f"fetching receipt for tx {record.hash}: {exc}") from exc
        if receipt is None:
            raise MissingReceiptError()
        return self._aggregator.aggregate(receipt, run.data, data)


def _recorded_hash(run: RunInput) -> str:
    # the hash persisted in data wins over an upstream result
    value = run.data.get(RESULT_KEY) or run.result
    if not isinstance(value, str) or not value:
        raise TxLookupError(f"run {run.run_id} has no recorded transaction hash")
    try:
        return normalize_hash(value)
    except ValueError as exc:
        raise TxLookupError(f"run {run.run_id} result {value!r} is not a tx hash") from exc
