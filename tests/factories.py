"""Synthetic runs, params and receipts for testing."""

from __future__ import annotations

from typing import Any

from ethtx_adapter.models.config import DataFormat, EthTxParams
from ethtx_adapter.models.records import TxReceipt
from ethtx_adapter.models.run import RunInput, RunStatus

CONTRACT_ADDRESS = "0x356a04bce728ba4c62a30294a55e6a8600a320b3"
SENDER_ADDRESS = "0x9ca9d2d5e04012c9ed24c0e513c9bfaa4a2dd77f"
SELECTOR = bytes.fromhex("4ab0d190")

HASH_A = "0x" + "ab" * 32
HASH_B = "0x" + "cd" * 32
BLOCK_HASH = "0x" + "11" * 32


def make_params(
    data_format: DataFormat = DataFormat.RAW,
    data_prefix: bytes = b"",
    gas_price: int | None = 20_000_000_000,
    gas_limit: int | None = 500_000,
) -> EthTxParams:
    return EthTxParams(
        address=CONTRACT_ADDRESS,
        function_selector=SELECTOR,
        data_prefix=data_prefix,
        data_format=data_format,
        gas_price=gas_price,
        gas_limit=gas_limit,
    )


def make_run(
    result: Any = "0x1",
    status: RunStatus = RunStatus.IN_PROGRESS,
    data: dict[str, Any] | None = None,
    run_id: str = "run-0001",
) -> RunInput:
    return RunInput(run_id=run_id, status=status, result=result, data=dict(data or {}))


def make_pending_run(
    tx_hash: str = HASH_A,
    data: dict[str, Any] | None = None,
    run_id: str = "run-0001",
) -> RunInput:
    """A run whose transaction was already submitted.

    The hash lives only in ``data["result"]``, as the scheduler persists it.
    """
    base = {"result": tx_hash}
    base.update(data or {})
    return make_run(
        result=None,
        status=RunStatus.PENDING_CONFIRMATIONS,
        data=base,
        run_id=run_id,
    )


def make_receipt(
    tx_hash: str = HASH_A,
    block_number: int = 1000,
    status: int | None = 1,
) -> TxReceipt:
    return TxReceipt(hash=tx_hash, block_number=block_number, status=status, block_hash=BLOCK_HASH)
