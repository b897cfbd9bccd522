"""Configuration models: per-task parameters and service settings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ethtx_adapter.evm.words import SELECTOR_BYTE_LEN, hex_to_bytes, parse_quantity

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


class DataFormat(str, Enum):
    """How the run result is laid out in the call payload."""

    RAW = ""  # fixed bytes32, no offset word
    BYTES = "bytes"
    UINT256 = "uint256"
    INT256 = "int256"
    BOOL = "bool"

    @property
    def dynamic(self) -> bool:
        return self is not DataFormat.RAW


@dataclass(frozen=True)
class EthTxParams:
    """Static task parameters from the job spec."""

    address: str
    function_selector: bytes
    data_prefix: bytes = b""
    data_format: DataFormat = DataFormat.RAW
    gas_price: int | None = None  # wei; None lets the ledger decide
    gas_limit: int | None = None

    def __post_init__(self) -> None:
        if not _ADDRESS_RE.match(self.address):
            raise ValueError(f"invalid address: {self.address!r}")
        if len(self.function_selector) != SELECTOR_BYTE_LEN:
            raise ValueError(
                f"function selector must be {SELECTOR_BYTE_LEN} bytes,"
                f" got {len(self.function_selector)}"
            )

    @classmethod
    def from_params(cls, raw: dict[str, Any]) -> EthTxParams:
        """Parse the task's JSON params (address, functionSelector, dataPrefix, ...)."""
        try:
            selector = hex_to_bytes(str(raw["functionSelector"]))
            prefix = hex_to_bytes(str(raw["dataPrefix"])) if raw.get("dataPrefix") else b""
        except KeyError as exc:
            raise ValueError(f"missing task param: {exc.args[0]}") from exc
        except ValueError as exc:
            raise ValueError(f"invalid hex in task params: {exc}") from exc

        gas_price = raw.get("gasPrice")
        gas_limit = raw.get("gasLimit")
        return cls(
            address=str(raw.get("address", "")),
            function_selector=selector,
            data_prefix=prefix,
            data_format=DataFormat(raw.get("format") or ""),
            gas_price=parse_quantity(gas_price) if gas_price is not None else None,
            gas_limit=parse_quantity(gas_limit) if gas_limit is not None else None,
        )


@dataclass
class AdapterConfig:
    """Service settings for the node-backed ledger and the CLI."""

    # Node
    rpc_url: str = "http://127.0.0.1:8545"
    request_timeout: float = 10.0  # seconds

    # Ledger
    from_address: str = ""  # node-managed sender account
    min_confirmations: int = 12

    # Storage
    db_path: str = "~/.ethtx_adapter/txs.db"

    # Logging
    log_level: str = "info"
