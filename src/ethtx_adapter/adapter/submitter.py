"""Transaction submitter - asks the ledger for one idempotent transaction."""

from __future__ import annotations

import logging

from ethtx_adapter.errors import SubmissionError
from ethtx_adapter.interfaces.ledger import TxManager
from ethtx_adapter.models.config import EthTxParams
from ethtx_adapter.models.records import SubmitOutcome, SubmitResult

log = logging.getLogger(__name__)


class TransactionSubmitter:
    """Requests transaction creation keyed by the run id.

    Never raises: every failure comes back as a SubmitResult so the caller
    decides between retrying on the next poll and erroring the run.
    """

    def __init__(self, ledger: TxManager) -> None:
        self._ledger = ledger
        self.failures = 0  # retryable failures since start, for monitoring

    async def submit(self, run_id: str, params: EthTxParams, call_data: bytes) -> SubmitResult:
        log.info("Creating tx for run %s to %s", run_id, params.address)

        try:
            tx_hash = await self._ledger.create_transaction(
                run_id,
                params.address,
                call_data,
                params.gas_price,
                params.gas_limit,
            )

        except SubmissionError as exc:
            if not exc.retryable:
                log.error("Tx creation for run %s failed permanently: %s", run_id, exc)
                return SubmitResult(outcome=SubmitOutcome.FATAL, error=str(exc))
            self.failures += 1
            log.warning(
                "Tx creation for run %s failed, retrying next poll (%d failures): %s",
                run_id,
                self.failures,
                exc,
            )
            return SubmitResult(outcome=SubmitOutcome.RETRYABLE, error=str(exc))

        except Exception as exc:
            self.failures += 1
            log.warning(
                "Tx creation for run %s hit unexpected error, retrying next poll: %s",
                run_id,
                exc,
                exc_info=True,
            )
            return SubmitResult(outcome=SubmitOutcome.RETRYABLE, error=str(exc))

        log.info("Tx created for run %s (tx=%s)", run_id, tx_hash[:18])
        return SubmitResult(outcome=SubmitOutcome.SUBMITTED, tx_hash=tx_hash)
