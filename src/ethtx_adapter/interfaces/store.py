"""TxStore protocol - persists transactions created by the node-backed ledger."""

from __future__ import annotations

from typing import Protocol

from ethtx_adapter.models.records import TxRecord


class TxStore(Protocol):
    """Keeps one transaction per idempotency key."""

    # ── Lifecycle ──────────────────────────────────────────

    async def initialize(self) -> None:
        """Create tables if they don't exist."""
        ...

    async def close(self) -> None:
        ...

    # ── Transactions ───────────────────────────────────────

    async def get_hash_for_key(self, idempotency_key: str) -> str | None:
        ...

    async def save_transaction(
        self,
        idempotency_key: str,
        tx_hash: str,
        to: str,
        data: bytes,
        sent_at: int | None,
    ) -> None:
        ...

    async def get_transaction(self, tx_hash: str) -> TxRecord | None:
        ...

    async def mark_confirmed(self, tx_hash: str) -> None:
        ...

    async def mark_failed(self, tx_hash: str) -> None:
        ...
