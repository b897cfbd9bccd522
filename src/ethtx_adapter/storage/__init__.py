"""Persistence for transactions created by the node-backed ledger."""
