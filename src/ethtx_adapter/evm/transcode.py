"""Transcode JSON result values into EVM payload blobs per data format."""

from __future__ import annotations

from typing import Any, Callable

from ethtx_adapter.errors import EncodingError
from ethtx_adapter.evm.words import (
    MAX_UINT256,
    encode_dynamic_bytes,
    hex_to_hash,
    word_int,
    word_uint,
)
from ethtx_adapter.models.config import DataFormat


def _to_int(value: Any, fmt: DataFormat) -> int:
    if isinstance(value, bool):
        raise EncodingError(f"cannot encode boolean as {fmt.value}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        try:
            return int(value)
        except (ValueError, OverflowError) as exc:
            raise EncodingError(f"cannot encode {value!r} as {fmt.value}") from exc
    if isinstance(value, str):
        s = value.strip()
        try:
            if s[:2] in ("0x", "0X"):
                return int(s, 16)
            return int(s, 10)
        except ValueError as exc:
            raise EncodingError(f"cannot parse {value!r} as {fmt.value}") from exc
    raise EncodingError(f"unsupported value type {type(value).__name__} for {fmt.value}")


def transcode_bytes(value: Any) -> bytes:
    if isinstance(value, str):
        return encode_dynamic_bytes(value.encode("utf-8"))
    if isinstance(value, bool):
        return encode_dynamic_bytes(word_uint(int(value)))
    if isinstance(value, (int, float)):
        try:
            return encode_dynamic_bytes(word_int(int(value)))
        except (ValueError, OverflowError) as exc:
            raise EncodingError(str(exc)) from exc
    raise EncodingError(f"unsupported value type {type(value).__name__} for bytes")


def transcode_uint256(value: Any) -> bytes:
    n = _to_int(value, DataFormat.UINT256)
    if n < 0:
        raise EncodingError(f"{n} is negative, cannot encode as uint256")
    if n > MAX_UINT256:
        raise EncodingError(f"{n} overflows uint256")
    return encode_dynamic_bytes(word_uint(n))


def transcode_int256(value: Any) -> bytes:
    n = _to_int(value, DataFormat.INT256)
    try:
        return encode_dynamic_bytes(word_int(n))
    except ValueError as exc:
        raise EncodingError(str(exc)) from exc


def transcode_bool(value: Any) -> bytes:
    if value is None or isinstance(value, (bool, int, float, str, list, dict)):
        return encode_dynamic_bytes(word_uint(1 if value else 0))
    raise EncodingError(f"unsupported value type {type(value).__name__} for bool")


TRANSCODERS: dict[DataFormat, Callable[[Any], bytes]] = {
    DataFormat.BYTES: transcode_bytes,
    DataFormat.UINT256: transcode_uint256,
    DataFormat.INT256: transcode_int256,
    DataFormat.BOOL: transcode_bool,
}


def transcode(value: Any, fmt: DataFormat) -> bytes:
    """Encode ``value`` as the dynamic blob for ``fmt`` (length word + content)."""
    try:
        return TRANSCODERS[fmt](value)
    except KeyError:
        raise EncodingError(f"no dynamic encoding for format {fmt.value!r}") from None


def encode_fixed_word(value: Any) -> bytes:
    """Fixed 32-byte representation used when no data format is configured."""
    if isinstance(value, bool):
        raise EncodingError("cannot encode boolean as bytes32")
    if isinstance(value, int):
        try:
            return word_uint(value)
        except ValueError as exc:
            raise EncodingError(str(exc)) from exc
    if isinstance(value, str):
        try:
            return hex_to_hash(value.strip())
        except ValueError as exc:
            raise EncodingError(f"result {value!r} is not hex") from exc
    raise EncodingError(f"unsupported value type {type(value).__name__} for bytes32")
