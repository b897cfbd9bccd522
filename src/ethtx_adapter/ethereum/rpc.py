"""Ethereum JSON-RPC client over HTTP."""

from __future__ import annotations

import itertools
import logging
from typing import Any

import httpx

from ethtx_adapter.errors import RpcError
from ethtx_adapter.evm.words import hex_quantity, parse_quantity, to_hex
from ethtx_adapter.models.records import TxReceipt

log = logging.getLogger(__name__)


class EthRpcClient:
    """Minimal async client for the node methods the ledger needs.

    Transport failures surface as ``httpx.HTTPError``; JSON-RPC error objects
    as :class:`RpcError`.
    """

    def __init__(self, rpc_url: str, timeout: float = 10.0) -> None:
        self._rpc_url = rpc_url
        self._client = httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=5))
        self._ids = itertools.count(1)

    async def close(self) -> None:
        await self._client.aclose()

    async def call(self, method: str, *params: Any) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": list(params),
        }
        resp = await self._client.post(self._rpc_url, json=payload)
        resp.raise_for_status()
        body = resp.json()
        if body.get("error"):
            err = body["error"]
            raise RpcError(int(err.get("code", 0)), str(err.get("message", "")))
        return body.get("result")

    async def block_number(self) -> int:
        return parse_quantity(await self.call("eth_blockNumber"))

    async def send_transaction(
        self,
        from_address: str,
        to: str,
        data: bytes,
        gas_price: int | None = None,
        gas_limit: int | None = None,
    ) -> str:
        """eth_sendTransaction from a node-managed account. Returns the hash."""
        tx: dict[str, str] = {"from": from_address, "to": to, "data": to_hex(data)}
        if gas_price is not None:
            tx["gasPrice"] = hex_quantity(gas_price)
        if gas_limit is not None:
            tx["gas"] = hex_quantity(gas_limit)
        tx_hash = await self.call("eth_sendTransaction", tx)
        log.debug("eth_sendTransaction -> %s", tx_hash)
        return tx_hash

    async def get_transaction_receipt(self, tx_hash: str) -> TxReceipt | None:
        raw = await self.call("eth_getTransactionReceipt", tx_hash)
        if raw is None:
            return None
        return TxReceipt.from_json(raw)
