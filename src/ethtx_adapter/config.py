"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from ethtx_adapter.models.config import AdapterConfig


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "ETHTX_",
) -> AdapterConfig:
    """Load adapter configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (ETHTX_RPC_URL, etc.)
        2. TOML config file
        3. Defaults from AdapterConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = AdapterConfig()

    # ── Node section ───────────────────────────────────────
    node = raw.get("node", {})
    if v := node.get("rpc_url"):
        cfg.rpc_url = str(v)
    if v := node.get("request_timeout"):
        cfg.request_timeout = float(v)

    # ── Ledger section ─────────────────────────────────────
    ledger = raw.get("ledger", {})
    if v := ledger.get("from_address"):
        cfg.from_address = str(v)
    if v := ledger.get("min_confirmations"):
        cfg.min_confirmations = int(v)

    # ── Storage section ────────────────────────────────────
    storage = raw.get("storage", {})
    if v := storage.get("db_path"):
        cfg.db_path = str(v)

    # ── Logging section ────────────────────────────────────
    logging_raw = raw.get("logging", {})
    if v := logging_raw.get("level"):
        cfg.log_level = str(v)

    # ── Environment variable overrides (highest priority) ──
    if rpc := os.environ.get(f"{env_prefix}RPC_URL"):
        cfg.rpc_url = rpc
    if sender := os.environ.get(f"{env_prefix}FROM_ADDRESS"):
        cfg.from_address = sender
    if db := os.environ.get(f"{env_prefix}DB_PATH"):
        cfg.db_path = db
    if depth := os.environ.get(f"{env_prefix}MIN_CONFIRMATIONS"):
        cfg.min_confirmations = int(depth)

    # Expand ~ in paths
    if cfg.db_path != ":memory:":
        cfg.db_path = str(Path(cfg.db_path).expanduser())

    return cfg
