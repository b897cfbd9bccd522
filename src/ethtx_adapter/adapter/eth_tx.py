"""EthTx adapter - entry point that routes a run to submission or confirmation."""

from __future__ import annotations

import logging

from ethtx_adapter.adapter.encoder import build_call_data
from ethtx_adapter.adapter.receipts import RESULT_KEY, ReceiptAggregator
from ethtx_adapter.adapter.submitter import TransactionSubmitter
from ethtx_adapter.adapter.tracker import ConfirmationTracker
from ethtx_adapter.errors import EncodingError, EthTxError
from ethtx_adapter.interfaces.ledger import TxManager
from ethtx_adapter.models.config import EthTxParams
from ethtx_adapter.models.records import SubmitOutcome
from ethtx_adapter.models.run import RunInput, RunOutput

log = logging.getLogger(__name__)


class EthTxAdapter:
    """Submits a run's result on-chain and follows it to a receipt.

    Each ``perform`` call is one scheduler tick. A run without a submitted
    transaction gets one; a run already pending confirmations is only ever
    re-checked, never resubmitted. The scheduler persists the returned data
    and status and decides when to call again.
    """

    def __init__(self, ledger: TxManager) -> None:
        self._ledger = ledger
        self.submitter = TransactionSubmitter(ledger)
        self.aggregator = ReceiptAggregator()
        self.tracker = ConfirmationTracker(ledger, self.aggregator)

    async def perform(self, run: RunInput, params: EthTxParams) -> RunOutput:
        if not await self._ledger.is_connected():
            return _pending_confirmations_or_connection(run)

        try:
            if run.status.pending_confirmations:
                return await self.tracker.check(run)
            return await self._submit(run, params)
        except EthTxError as exc:
            log.error("Run %s errored: %s", run.run_id, exc)
            return RunOutput.errored(str(exc))

    async def _submit(self, run: RunInput, params: EthTxParams) -> RunOutput:
        try:
            call_data = build_call_data(run.result, params)
        except EncodingError as exc:
            raise EncodingError(f"while constructing EthTx data: {exc}") from exc

        result = await self.submitter.submit(run.run_id, params, call_data)

        if result.outcome is SubmitOutcome.FATAL:
            return RunOutput.errored(result.error or "transaction submission failed")
        if result.outcome is SubmitOutcome.RETRYABLE:
            return RunOutput.pending_confirmations(run.data)

        # Receipt is checked on the next poll, never inline.
        data = dict(run.data)
        data[RESULT_KEY] = result.tx_hash
        return RunOutput.pending_confirmations(data)


def _pending_confirmations_or_connection(run: RunInput) -> RunOutput:
    # Anything not yet pending confirmations may still submit once connected.
    if run.status.pending_confirmations:
        log.info("Run %s: node disconnected, keeping pending confirmations", run.run_id)
        return RunOutput.pending_confirmations(run.data)
    log.info("Run %s: node disconnected, waiting for connection", run.run_id)
    return RunOutput.pending_connection()
