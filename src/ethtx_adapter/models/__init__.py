"""Data models for the ethtx adapter."""

from ethtx_adapter.models.run import RunInput, RunOutput, RunStatus
from ethtx_adapter.models.records import SubmitOutcome, SubmitResult, TxReceipt, TxRecord
from ethtx_adapter.models.config import AdapterConfig, DataFormat, EthTxParams

__all__ = [
    "RunInput", "RunOutput", "RunStatus",
    "SubmitOutcome", "SubmitResult", "TxReceipt", "TxRecord",
    "AdapterConfig", "DataFormat", "EthTxParams",
]
