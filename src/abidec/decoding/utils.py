"""Decoding utilities: bounds-checked ABI word access and hex input handling."""

from __future__ import annotations

from eth_utils import decode_hex, remove_0x_prefix  # type: ignore[attr-defined]

from abidec.core.errors import DecodeError

WORD = 32


def read_bytes(data: bytes, start: int, length: int) -> bytes:
    """Return a copy of `data[start:start+length]`, failing instead of truncating."""
    end = start + length
    if start < 0 or length < 0 or end > len(data):
        raise DecodeError.out_of_bounds(start, length, len(data))
    return bytes(data[start:end])


def word_at(data: bytes, start: int) -> int:
    """Read the 32-byte big-endian word at byte offset `start` as an unsigned int."""
    return int.from_bytes(read_bytes(data, start, WORD), "big")


def padded32(size: int) -> int:
    """Round `size` up to the next multiple of 32 (20 -> 32, 32 -> 32, 40 -> 64)."""
    r = size % WORD
    return size if r == 0 else size + WORD - r


def hex_to_bytes(text: str) -> bytes:
    """Decode hex text, tolerating a 0x prefix and surrounding/embedded whitespace."""
    cleaned = remove_0x_prefix("".join(text.split()))  # type: ignore[arg-type]
    if len(cleaned) % 2:
        raise DecodeError(f"odd-length hex string ({len(cleaned)} digits)")
    try:
        return decode_hex(cleaned)
    except ValueError as e:  # binascii.Error subclasses ValueError
        raise DecodeError(f"invalid hex string: {e}") from e


def as_bytes(value: bytes | bytearray | memoryview | str) -> bytes:
    """Accept raw bytes or hex text and return an immutable copy."""
    if isinstance(value, str):
        return hex_to_bytes(value)
    return bytes(value)
