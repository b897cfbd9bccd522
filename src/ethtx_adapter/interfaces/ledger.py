"""TxManager protocol - the ledger subsystem that broadcasts and tracks transactions."""

from __future__ import annotations

from typing import Protocol

from ethtx_adapter.models.records import TxReceipt, TxRecord


class TxManager(Protocol):
    """Signs, broadcasts, and tracks transactions on behalf of the adapter."""

    async def is_connected(self) -> bool:
        """Whether the Ethereum endpoint is currently reachable."""
        ...

    async def create_transaction(
        self,
        idempotency_key: str,
        to: str,
        data: bytes,
        gas_price: int | None,
        gas_limit: int | None,
    ) -> str:
        """Create (or return the already created) transaction for the key.

        Returns the transaction hash. Raises SubmissionError.
        """
        ...

    async def find_transaction_by_hash(self, tx_hash: str) -> TxRecord:
        """Raises TxLookupError when the hash is unknown."""
        ...

    async def get_receipt(self, tx_hash: str) -> TxReceipt | None:
        ...
