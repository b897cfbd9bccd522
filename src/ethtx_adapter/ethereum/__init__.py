"""Ethereum node access: JSON-RPC client and the node-backed ledger."""
