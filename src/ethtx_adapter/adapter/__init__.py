"""Adapter components: encoding, submission, confirmation tracking."""

from ethtx_adapter.adapter.eth_tx import EthTxAdapter

__all__ = ["EthTxAdapter"]
