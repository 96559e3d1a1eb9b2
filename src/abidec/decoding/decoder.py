"""Head/tail ABI decoder.

Values are read from a `(base, at)` position: `base` is the start of the
enclosing structure (offset words are relative to it) and `at` is the cursor
inside that structure's head. Static values live inline at `base + at`;
dynamic values are reached through a 32-byte offset word at `base + at`,
and the cursor only ever advances by that one word for them.

Every decode call returns `(value, consumed)` where `consumed` is the number
of head bytes used at the cursor.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from abidec.core.errors import DecodeError
from abidec.decoding.types import AbiType, Types, head_size, is_dynamic
from abidec.decoding.utils import WORD, padded32, read_bytes, word_at
from abidec.decoding.values import Value, Values

# ---------- sequences ----------


def _iter_sequence(data: bytes, types: Sequence[AbiType], base: int, at: int = 0) -> Iterator[tuple[Value, int]]:
    """Decode `types` one after another from the head at `base + at`."""
    cursor = at
    for typ in types:
        value, consumed = _decode(data, typ, base, cursor)
        cursor += consumed
        yield value, consumed


def _decode_sequence(data: bytes, types: Sequence[AbiType], base: int, at: int = 0) -> tuple[list[Value], int]:
    values: list[Value] = []
    total = 0
    for value, consumed in _iter_sequence(data, types, base, at):
        values.append(value)
        total += consumed
    return values, total


def _follow_offset(data: bytes, base: int, at: int) -> int:
    """Read the offset word at `base + at` and return the absolute position it points to."""
    return base + word_at(data, base + at)


def _check_array_fits(data: bytes, item: AbiType, length: int, start: int) -> None:
    # every element takes at least its head size at `start`
    needed = length * head_size(item)
    if start + needed > len(data):
        raise DecodeError(
            f"array of {length} elements needs {needed} bytes at offset {start}, buffer has {len(data)}",
            offset=start,
            needed=needed,
            available=len(data),
        )


# ---------- single value ----------


def _decode(data: bytes, typ: AbiType, base: int, at: int) -> tuple[Value, int]:
    pos = base + at
    match typ:
        case Types.Uint(bits=bits):
            return Values.Uint(word_at(data, pos), bits), WORD

        case Types.Int(bits=bits):
            return Values.Int(word_at(data, pos), bits), WORD

        case Types.Address():
            word = read_bytes(data, pos, WORD)
            return Values.Address(word[12:]), WORD

        case Types.Bool():
            return Values.Bool(word_at(data, pos) == 1), WORD

        case Types.FixedBytes(size=size):
            return Values.Bytes(read_bytes(data, pos, size)), padded32(size)

        case Types.Bytes():
            return Values.Bytes(_read_tail_bytes(data, base, at)), WORD

        case Types.String():
            raw = _read_tail_bytes(data, base, at)
            try:
                text = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(f"invalid UTF-8 in string at offset {pos}: {e.reason}", offset=pos) from e
            return Values.String(text), WORD

        case Types.FixedArray(item=item, size=size):
            if is_dynamic(item):
                start = _follow_offset(data, base, at)
                _check_array_fits(data, item, size, start)
                items, _ = _decode_sequence(data, [item] * size, start)
                return Values.Array(items), WORD
            _check_array_fits(data, item, size, pos)
            items, consumed = _decode_sequence(data, [item] * size, base, at)
            return Values.Array(items), consumed

        case Types.Array(item=item):
            start = _follow_offset(data, base, at)
            length = word_at(data, start)
            # element heads start right after the length word
            _check_array_fits(data, item, length, start + WORD)
            items, _ = _decode_sequence(data, [item] * length, start + WORD)
            return Values.Array(items), WORD

        case Types.Tuple(members=members):
            if is_dynamic(typ):
                start = _follow_offset(data, base, at)
                items, _ = _decode_sequence(data, members, start)
                return Values.Tuple(items), WORD
            items, consumed = _decode_sequence(data, members, base, at)
            return Values.Tuple(items), consumed

    raise DecodeError(f"unsupported ABI type {typ!r}")


def _read_tail_bytes(data: bytes, base: int, at: int) -> bytes:
    start = _follow_offset(data, base, at)
    length = word_at(data, start)
    return read_bytes(data, start + WORD, length)


# ---------- public API ----------


def iter_values(data: bytes, types: Sequence[AbiType]) -> Iterator[Value]:
    """Lazily decode `types` from the start of `data`, one top-level value at a time."""
    for value, _ in _iter_sequence(bytes(data), types, 0):
        yield value


def decode_values(data: bytes, types: Sequence[AbiType]) -> list[Value]:
    """Decode `len(types)` top-level values sequentially from the start of `data`.

    Raises `DecodeError` on any out-of-bounds read or invalid UTF-8.
    """
    values, _ = _decode_sequence(bytes(data), types, 0)
    return values


def decode_value(data: bytes, typ: AbiType) -> Value:
    return decode_values(data, [typ])[0]
