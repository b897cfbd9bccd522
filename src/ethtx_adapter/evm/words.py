"""EVM word helpers: 32-byte big-endian words and dynamic byte blobs."""

from __future__ import annotations

WORD_BYTE_LEN = 32
SELECTOR_BYTE_LEN = 4

MAX_UINT256 = 2**256 - 1
MAX_INT256 = 2**255 - 1
MIN_INT256 = -(2**255)


def word_uint(value: int) -> bytes:
    """Encode a non-negative integer as a 32-byte big-endian word."""
    if value < 0 or value > MAX_UINT256:
        raise ValueError(f"{value} does not fit in uint256")
    return value.to_bytes(WORD_BYTE_LEN, "big")


def word_int(value: int) -> bytes:
    """Encode a signed integer as a 32-byte two's complement word."""
    if value < MIN_INT256 or value > MAX_INT256:
        raise ValueError(f"{value} does not fit in int256")
    return value.to_bytes(WORD_BYTE_LEN, "big", signed=True)


def read_word_uint(data: bytes, offset: int = 0) -> int:
    word = data[offset:offset + WORD_BYTE_LEN]
    if len(word) != WORD_BYTE_LEN:
        raise ValueError(f"need {WORD_BYTE_LEN} bytes at offset {offset}, have {len(word)}")
    return int.from_bytes(word, "big")


def pad_to_word(length: int) -> int:
    """Round ``length`` up to the next word boundary."""
    rem = length % WORD_BYTE_LEN
    return length if rem == 0 else length + WORD_BYTE_LEN - rem


def encode_dynamic_bytes(content: bytes) -> bytes:
    """Length word followed by the content right-padded to a word boundary."""
    padded = content.ljust(pad_to_word(len(content)), b"\x00")
    return word_uint(len(content)) + padded


def decode_dynamic_bytes(blob: bytes, offset: int = 0) -> bytes:
    """Inverse of :func:`encode_dynamic_bytes` for a blob starting at ``offset``."""
    length = read_word_uint(blob, offset)
    start = offset + WORD_BYTE_LEN
    content = blob[start:start + length]
    if len(content) != length:
        raise ValueError(f"dynamic bytes declare {length} bytes, only {len(content)} present")
    return content


def hex_to_bytes(value: str) -> bytes:
    """Decode a hex string, with or without 0x prefix. Odd lengths get a leading 0."""
    s = value[2:] if value[:2] in ("0x", "0X") else value
    if len(s) % 2:
        s = "0" + s
    return bytes.fromhex(s)


def hex_to_hash(value: str) -> bytes:
    """Decode hex into a 32-byte hash: left-padded, or the last 32 bytes if longer."""
    raw = hex_to_bytes(value)
    if len(raw) > WORD_BYTE_LEN:
        raw = raw[-WORD_BYTE_LEN:]
    return raw.rjust(WORD_BYTE_LEN, b"\x00")


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()


def normalize_hash(value: str) -> str:
    """Canonical 0x-prefixed lowercase form of a 32-byte hash."""
    return to_hex(hex_to_hash(value))


def hex_quantity(value: int) -> str:
    """JSON-RPC quantity encoding (no leading zeros)."""
    return hex(value)


def parse_quantity(value: str | int | None) -> int | None:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    return int(value, 16) if value[:2] in ("0x", "0X") else int(value)
