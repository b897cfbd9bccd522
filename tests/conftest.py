"""Shared fixtures for ethtx_adapter tests."""

from __future__ import annotations

import pytest
from pytest_metadata.plugin import metadata_key

from ethtx_adapter.adapter.eth_tx import EthTxAdapter
from ethtx_adapter.storage.sqlite import SQLiteTxStore

from tests.factories import CONTRACT_ADDRESS, SENDER_ADDRESS, make_params
from tests.mocks import MockTxManager

FAKE_NODE_HOST = "127.0.0.1"
FAKE_NODE_PORT = 18545
FAKE_NODE_URL = f"http://{FAKE_NODE_HOST}:{FAKE_NODE_PORT}"


# ── Report metadata ───────────────────────────────────────────────


def pytest_configure(config):
    """Add node info to the HTML report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Fake node"] = FAKE_NODE_URL
    meta["Target contract"] = CONTRACT_ADDRESS
    meta["Sender account"] = SENDER_ADDRESS


@pytest.fixture
def params():
    """Raw bytes32 params (no data format, no prefix)."""
    return make_params()


@pytest.fixture
def ledger():
    return MockTxManager()


@pytest.fixture
def adapter(ledger):
    return EthTxAdapter(ledger)


@pytest.fixture
async def store():
    """Initialized in-memory SQLiteTxStore."""
    s = SQLiteTxStore(":memory:")
    await s.initialize()
    yield s
    await s.close()
