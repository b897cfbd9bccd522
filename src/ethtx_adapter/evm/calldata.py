"""Split call data built by the encoder back into its parts."""

from __future__ import annotations

from dataclasses import dataclass

from ethtx_adapter.evm.words import (
    SELECTOR_BYTE_LEN,
    WORD_BYTE_LEN,
    decode_dynamic_bytes,
    read_word_uint,
)
from ethtx_adapter.models.config import DataFormat


@dataclass(frozen=True)
class DecodedCallData:
    selector: bytes
    prefix: bytes
    offset: int | None  # None for the fixed bytes32 layout
    value: bytes  # the bytes32 word, or the dynamic blob (length word + padded content)

    @property
    def content(self) -> bytes:
        """The value with the length word and padding stripped."""
        if self.offset is None:
            return self.value
        return decode_dynamic_bytes(self.value)


def decode_call_data(call_data: bytes, prefix_len: int, data_format: DataFormat) -> DecodedCallData:
    """Decode ``selector ++ prefix ++ payload``.

    ``prefix_len`` is the byte length of the configured data prefix. Raises
    ValueError when the layout does not match, including an offset word that
    disagrees with the prefix.
    """
    if len(call_data) < SELECTOR_BYTE_LEN + prefix_len:
        raise ValueError("call data shorter than selector and prefix")
    selector = call_data[:SELECTOR_BYTE_LEN]
    prefix = call_data[SELECTOR_BYTE_LEN:SELECTOR_BYTE_LEN + prefix_len]
    payload = call_data[SELECTOR_BYTE_LEN + prefix_len:]

    if not data_format.dynamic:
        if len(payload) != WORD_BYTE_LEN:
            raise ValueError(f"expected a {WORD_BYTE_LEN}-byte payload, got {len(payload)}")
        return DecodedCallData(selector=selector, prefix=prefix, offset=None, value=payload)

    offset = read_word_uint(payload)
    expected = WORD_BYTE_LEN * 2 if prefix_len else WORD_BYTE_LEN
    if offset != expected:
        raise ValueError(f"offset word is {offset}, expected {expected}")
    value = payload[WORD_BYTE_LEN:]
    decode_dynamic_bytes(value)
    return DecodedCallData(selector=selector, prefix=prefix, offset=offset, value=value)
