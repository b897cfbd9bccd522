"""SQLite implementation of the TxStore protocol."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from ethtx_adapter.models.records import TxRecord

SCHEMA = """
-- One transaction per idempotency key (the task run id)
CREATE TABLE IF NOT EXISTS transactions (
    idempotency_key TEXT PRIMARY KEY,
    tx_hash TEXT NOT NULL UNIQUE,
    to_address TEXT NOT NULL,
    data BLOB NOT NULL,
    sent_at INTEGER,
    confirmed INTEGER NOT NULL DEFAULT 0,
    failed INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_transactions_pending ON transactions(confirmed, failed);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SQLiteTxStore:
    """SQLite-backed implementation of the TxStore protocol."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self._db_path)
        self._db.row_factory = aiosqlite.Row
        await self._db.executescript(SCHEMA)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        assert self._db is not None, "Store not initialized. Call initialize() first."
        return self._db

    # ── Transactions ───────────────────────────────────────

    async def get_hash_for_key(self, idempotency_key: str) -> str | None:
        async with self.db.execute(
            "SELECT tx_hash FROM transactions WHERE idempotency_key=?",
            (idempotency_key,),
        ) as cur:
            row = await cur.fetchone()
            return row["tx_hash"] if row else None

    async def save_transaction(
        self,
        idempotency_key: str,
        tx_hash: str,
        to: str,
        data: bytes,
        sent_at: int | None,
    ) -> None:
        now = _now()
        await self.db.execute(
            "INSERT INTO transactions"
            " (idempotency_key, tx_hash, to_address, data, sent_at, created_at, updated_at)"
            " VALUES (?, ?, ?, ?, ?, ?, ?)",
            (idempotency_key, tx_hash, to, data, sent_at, now, now),
        )
        await self.db.commit()

    async def get_transaction(self, tx_hash: str) -> TxRecord | None:
        async with self.db.execute(
            "SELECT tx_hash, sent_at, confirmed, failed FROM transactions WHERE tx_hash=?",
            (tx_hash,),
        ) as cur:
            row = await cur.fetchone()
            if not row:
                return None
            return TxRecord(
                hash=row["tx_hash"],
                sent_at=row["sent_at"],
                confirmed=bool(row["confirmed"]),
                failed=bool(row["failed"]),
            )

    async def mark_confirmed(self, tx_hash: str) -> None:
        await self.db.execute(
            "UPDATE transactions SET confirmed=1, updated_at=? WHERE tx_hash=?",
            (_now(), tx_hash),
        )
        await self.db.commit()

    async def mark_failed(self, tx_hash: str) -> None:
        await self.db.execute(
            "UPDATE transactions SET failed=1, updated_at=? WHERE tx_hash=?",
            (_now(), tx_hash),
        )
        await self.db.commit()
