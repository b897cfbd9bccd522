"""Protocol interfaces for the adapter's external collaborators."""

from ethtx_adapter.interfaces.ledger import TxManager
from ethtx_adapter.interfaces.store import TxStore

__all__ = ["TxManager", "TxStore"]
