"""CLI entry point for the ethtx adapter."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from ethtx_adapter.adapter.encoder import build_call_data
from ethtx_adapter.adapter.eth_tx import EthTxAdapter
from ethtx_adapter.config import load_config
from ethtx_adapter.errors import EncodingError
from ethtx_adapter.ethereum.ledger import NodeTxManager
from ethtx_adapter.ethereum.rpc import EthRpcClient
from ethtx_adapter.evm.calldata import decode_call_data
from ethtx_adapter.evm.words import hex_to_bytes, to_hex
from ethtx_adapter.models.config import AdapterConfig, EthTxParams
from ethtx_adapter.models.run import RunInput
from ethtx_adapter.storage.sqlite import SQLiteTxStore


def _load_params(path: str) -> EthTxParams:
    """Read task params from a JSON file, exit with error if invalid."""
    try:
        raw = json.loads(Path(path).read_text())
        return EthTxParams.from_params(raw)
    except (OSError, ValueError) as exc:
        click.echo(f"Error: invalid task params in {path}: {exc}", err=True)
        sys.exit(1)


def _parse_result(value: str) -> Any:
    """JSON values pass through typed; anything else is taken as a string."""
    try:
        return json.loads(value)
    except ValueError:
        return value


def _log_level(cfg: AdapterConfig, verbose: bool) -> int:
    """-v forces debug, otherwise the configured [logging] level applies."""
    if verbose:
        return logging.DEBUG
    level = logging.getLevelName(cfg.log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def _require_sender(cfg: AdapterConfig) -> None:
    if not cfg.from_address:
        click.echo("Error: No sender address configured.", err=True)
        click.echo("Set ETHTX_FROM_ADDRESS or from_address in [ledger].", err=True)
        sys.exit(1)


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """ethtx - submit oracle results on-chain and track their confirmation."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    logging.basicConfig(
        level=_log_level(load_config(config_path), verbose),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Payloads ───────────────────────────────────────────


@cli.command()
@click.argument("result")
@click.option("-p", "--params", "params_path", required=True, help="Task params JSON file")
def encode(result: str, params_path: str) -> None:
    """Print the call data a RESULT would be submitted with."""
    params = _load_params(params_path)
    try:
        call_data = build_call_data(_parse_result(result), params)
    except EncodingError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(to_hex(call_data))


@cli.command()
@click.argument("call_data")
@click.option("-p", "--params", "params_path", required=True, help="Task params JSON file")
def decode(call_data: str, params_path: str) -> None:
    """Split CALL_DATA into selector, prefix and value."""
    params = _load_params(params_path)
    try:
        decoded = decode_call_data(
            hex_to_bytes(call_data), len(params.data_prefix), params.data_format,
        )
        content = decoded.content
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    click.echo(f"Selector:   {to_hex(decoded.selector)}")
    click.echo(f"Prefix:     {to_hex(decoded.prefix) if decoded.prefix else '(none)'}")
    click.echo(f"Offset:     {decoded.offset if decoded.offset is not None else '(fixed bytes32)'}")
    click.echo(f"Value:      {to_hex(content)}")


# ── Runs ───────────────────────────────────────────────


@cli.command()
@click.argument("run_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-p", "--params", "params_path", required=True, help="Task params JSON file")
@click.pass_context
def perform(ctx: click.Context, run_file: str, params_path: str) -> None:
    """Run one tick for the run described in RUN_FILE and print the output."""
    cfg = load_config(ctx.obj["config_path"])
    _require_sender(cfg)
    params = _load_params(params_path)
    try:
        run = RunInput.from_dict(json.loads(Path(run_file).read_text()))
    except (KeyError, ValueError) as exc:
        click.echo(f"Error: invalid run file {run_file}: {exc}", err=True)
        sys.exit(1)

    async def _perform():
        rpc = EthRpcClient(cfg.rpc_url, cfg.request_timeout)
        store = SQLiteTxStore(cfg.db_path)
        await store.initialize()
        try:
            ledger = NodeTxManager(rpc, store, cfg.from_address, cfg.min_confirmations)
            return await EthTxAdapter(ledger).perform(run, params)
        finally:
            await store.close()
            await rpc.close()

    output = asyncio.run(_perform())
    click.echo(json.dumps(output.to_dict(), indent=2))
    if output.has_error:
        sys.exit(2)


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show adapter configuration."""
    cfg = load_config(ctx.obj["config_path"])
    click.echo(f"RPC URL:        {cfg.rpc_url}")
    click.echo(f"Sender:         {cfg.from_address or '(not set)'}")
    click.echo(f"Confirmations:  {cfg.min_confirmations}")
    click.echo(f"DB path:        {cfg.db_path}")
    click.echo(f"Timeout:        {cfg.request_timeout}s")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
