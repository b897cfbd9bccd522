"""Node-backed TxManager - the node signs and broadcasts, SQLite keeps the records."""

from __future__ import annotations

import logging

import httpx

from ethtx_adapter.errors import RpcError, SubmissionError, TxLookupError
from ethtx_adapter.ethereum.rpc import EthRpcClient
from ethtx_adapter.evm.words import normalize_hash
from ethtx_adapter.interfaces.store import TxStore
from ethtx_adapter.models.records import TxReceipt, TxRecord

log = logging.getLogger(__name__)

# Node error messages that will not go away by sending the same tx again
_PERMANENT_ERRORS = (
    "insufficient funds",
    "unknown account",
    "invalid sender",
    "intrinsic gas too low",
    "exceeds block gas limit",
    "execution reverted",
)


def _classify_error(exc: Exception) -> bool:
    """True when retrying the same submission may succeed."""
    if isinstance(exc, RpcError):
        msg = exc.rpc_message.lower()
        return not any(marker in msg for marker in _PERMANENT_ERRORS)
    return True


class NodeTxManager:
    """TxManager that sends from an account managed (unlocked) by the node.

    Signing and nonce assignment happen inside the node. Idempotency comes
    from the store: a key that already has a transaction returns its hash.
    A transaction counts as confirmed once its receipt is ``min_confirmations``
    blocks deep, and as failed when the receipt reports a revert.
    """

    def __init__(
        self,
        rpc: EthRpcClient,
        store: TxStore,
        from_address: str,
        min_confirmations: int = 12,
    ) -> None:
        self._rpc = rpc
        self._store = store
        self._from_address = from_address
        self._min_confirmations = max(1, min_confirmations)

    async def is_connected(self) -> bool:
        try:
            await self._rpc.block_number()
            return True
        except (httpx.HTTPError, RpcError, ValueError) as exc:
            log.debug("Node unreachable: %s", exc)
            return False

    async def create_transaction(
        self,
        idempotency_key: str,
        to: str,
        data: bytes,
        gas_price: int | None,
        gas_limit: int | None,
    ) -> str:
        existing = await self._store.get_hash_for_key(idempotency_key)
        if existing:
            log.info("Tx for %s already created (tx=%s)", idempotency_key, existing[:18])
            return existing

        try:
            sent_at = await self._rpc.block_number()
            tx_hash = await self._rpc.send_transaction(
                self._from_address, to, data, gas_price, gas_limit,
            )
            tx_hash = normalize_hash(tx_hash)
        except (httpx.HTTPError, RpcError, ValueError, TypeError) as exc:
            raise SubmissionError(str(exc), retryable=_classify_error(exc)) from exc

        try:
            await self._store.save_transaction(idempotency_key, tx_hash, to, data, sent_at)
        except Exception as exc:
            # already broadcast; a retry would send a second tx for this key
            log.error("Tx %s for %s sent but not recorded: %s", tx_hash, idempotency_key, exc)
            raise SubmissionError(
                f"tx {tx_hash} sent but not recorded: {exc}", retryable=False,
            ) from exc
        log.info("Broadcast tx %s for %s at block %s", tx_hash[:18], idempotency_key, sent_at)
        return tx_hash

    async def find_transaction_by_hash(self, tx_hash: str) -> TxRecord:
        tx_hash = normalize_hash(tx_hash)
        record = await self._store.get_transaction(tx_hash)
        if record is None:
            raise TxLookupError(f"transaction {tx_hash} not found")
        if record.confirmed or record.failed:
            return record

        try:
            receipt = await self._rpc.get_transaction_receipt(tx_hash)
            if receipt is None:
                return record
            head = await self._rpc.block_number()
        except (httpx.HTTPError, RpcError, ValueError, KeyError, TypeError) as exc:
            raise TxLookupError(f"refreshing transaction {tx_hash}: {exc}") from exc

        if not receipt.succeeded:
            await self._store.mark_failed(tx_hash)
            record.failed = True
            log.warning("Tx %s reverted in block %d", tx_hash[:18], receipt.block_number)
        elif head - receipt.block_number + 1 >= self._min_confirmations:
            await self._store.mark_confirmed(tx_hash)
            record.confirmed = True
            log.info("Tx %s confirmed in block %d", tx_hash[:18], receipt.block_number)
        return record

    async def get_receipt(self, tx_hash: str) -> TxReceipt | None:
        tx_hash = normalize_hash(tx_hash)
        try:
            return await self._rpc.get_transaction_receipt(tx_hash)
        except (httpx.HTTPError, RpcError, ValueError, KeyError, TypeError) as exc:
            raise TxLookupError(f"fetching receipt for {tx_hash}: {exc}") from exc
