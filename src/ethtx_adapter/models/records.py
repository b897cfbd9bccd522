"""Ledger-side records and operation results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ethtx_adapter.evm.words import hex_quantity, normalize_hash, parse_quantity


@dataclass
class TxRecord:
    """The ledger's view of a submitted transaction."""

    hash: str
    sent_at: int | None = None  # block number when broadcast
    confirmed: bool = False
    failed: bool = False


@dataclass(frozen=True)
class TxReceipt:
    """On-chain inclusion evidence for a transaction."""

    hash: str
    block_number: int
    status: int | None = None  # 1 success, 0 reverted, None pre-Byzantium
    block_hash: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status != 0

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "transactionHash": self.hash,
            "blockNumber": hex_quantity(self.block_number),
        }
        if self.block_hash is not None:
            out["blockHash"] = self.block_hash
        if self.status is not None:
            out["status"] = hex_quantity(self.status)
        return out

    @classmethod
    def from_json(cls, raw: dict[str, Any]) -> TxReceipt:
        """Parse a receipt object as returned by eth_getTransactionReceipt.

        Raises KeyError/ValueError/TypeError on malformed input.
        """
        block_hash = raw.get("blockHash")
        return cls(
            hash=normalize_hash(raw["transactionHash"]),
            block_number=parse_quantity(raw["blockNumber"]),
            status=parse_quantity(raw.get("status")),
            block_hash=normalize_hash(block_hash) if block_hash else None,
        )


class SubmitOutcome(str, Enum):
    SUBMITTED = "submitted"
    RETRYABLE = "retryable"  # leave the run pending, try again next poll
    FATAL = "fatal"  # error the run


@dataclass
class SubmitResult:
    """Result of one transaction creation request."""

    outcome: SubmitOutcome
    tx_hash: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.outcome is SubmitOutcome.SUBMITTED
