"""ethtx_adapter - Ethereum transaction submission and confirmation tracking for oracle runs."""

__version__ = "0.1.0"
