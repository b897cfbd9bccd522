"""EVM payload encoding helpers."""
