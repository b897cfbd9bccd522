"""Receipt aggregator - appends confirmed receipts to the run's history."""

from __future__ import annotations

import json
import logging
from typing import Any

from ethtx_adapter.models.records import TxReceipt
from ethtx_adapter.models.run import RunOutput

log = logging.getLogger(__name__)

RECEIPTS_KEY = "ethereumReceipts"
RESULT_KEY = "result"


class ReceiptAggregator:
    """Merges a receipt into the persisted receipt history and finishes the run."""

    def __init__(self) -> None:
        self.parse_failures = 0

    def load_history(self, data: dict[str, Any]) -> list[dict[str, Any]]:
        """Existing history from ``data``, or [] when absent or unreadable."""
        raw = data.get(RECEIPTS_KEY)
        if raw is None or raw == "":
            return []
        try:
            history = json.loads(raw) if isinstance(raw, str) else raw
            if not isinstance(history, list):
                raise ValueError(f"expected a list, got {type(history).__name__}")
            # entries are kept as stored, whatever their shape
            return list(history)
        except (TypeError, ValueError) as exc:
            self.parse_failures += 1
            log.error(
                "Unreadable %s history, starting from empty (%d failures): %s",
                RECEIPTS_KEY,
                self.parse_failures,
                exc,
            )
            return []

    def aggregate(self, receipt: TxReceipt, input_data: dict[str, Any], output: dict[str, Any]) -> RunOutput:
        """Append ``receipt`` to the history read from ``input_data``.

        ``output`` is the data built so far for this poll; it receives the new
        history and the receipt hash as the result.
        """
        history = self.load_history(input_data)
        history.append(receipt.to_json())

        data = dict(output)
        data[RECEIPTS_KEY] = history
        data[RESULT_KEY] = receipt.hash
        log.info(
            "Receipt for %s in block %d recorded (%d in history)",
            receipt.hash[:18],
            receipt.block_number,
            len(history),
        )
        return RunOutput.completed(data)
