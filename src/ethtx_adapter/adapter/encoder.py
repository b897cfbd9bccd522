"""Result encoder - turns a run result into contract call data."""

from __future__ import annotations

from typing import Any

from ethtx_adapter.evm.transcode import encode_fixed_word, transcode
from ethtx_adapter.evm.words import WORD_BYTE_LEN, word_uint
from ethtx_adapter.models.config import EthTxParams


def payload_offset(params: EthTxParams) -> bytes:
    """Offset word pointing at the dynamic value.

    The value follows the offset word itself, and the data prefix when one is
    configured, so it starts one or two words into the arguments.
    """
    words = 2 if params.data_prefix else 1
    return word_uint(WORD_BYTE_LEN * words)


def encode_result(result: Any, params: EthTxParams) -> bytes:
    """Encode the result as the call payload for the configured data format.

    Raises EncodingError when the result cannot be transcoded.
    """
    if not params.data_format.dynamic:
        return encode_fixed_word(result)
    return payload_offset(params) + transcode(result, params.data_format)


def build_call_data(result: Any, params: EthTxParams) -> bytes:
    """selector ++ data prefix ++ payload"""
    return params.function_selector + params.data_prefix + encode_result(result, params)
