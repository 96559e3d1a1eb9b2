"""Decoded ABI values.

`Value` mirrors the shape of `AbiType`. Integers keep the full 256-bit word
next to the declared width; use `Values.Int.signed` / `Values.Uint.narrowed`
for the value at that width.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from eth_utils import to_checksum_address  # type: ignore[attr-defined]


class Values:
    @dataclass(frozen=True)
    class Uint:
        value: int
        bits: int

        @property
        def narrowed(self) -> int:
            return self.value & ((1 << self.bits) - 1)

    @dataclass(frozen=True)
    class Int:
        value: int
        bits: int

        @property
        def signed(self) -> int:
            """Two's-complement interpretation at the declared width."""
            v = self.value & ((1 << self.bits) - 1)
            if v >= 1 << (self.bits - 1):
                v -= 1 << self.bits
            return v

    @dataclass(frozen=True)
    class Address:
        value: bytes  # 20 bytes

        @property
        def checksum(self) -> str:
            return to_checksum_address(self.value)

    @dataclass(frozen=True)
    class Bool:
        value: bool

    @dataclass(frozen=True)
    class String:
        value: str

    @dataclass(frozen=True)
    class Bytes:
        value: bytes

    @dataclass(frozen=True)
    class Array:
        items: tuple[Value, ...]

        def __post_init__(self) -> None:
            object.__setattr__(self, "items", tuple(self.items))

    @dataclass(frozen=True)
    class Tuple:
        items: tuple[Value, ...]

        def __post_init__(self) -> None:
            object.__setattr__(self, "items", tuple(self.items))


Value = (
    Values.Uint
    | Values.Int
    | Values.Address
    | Values.Bool
    | Values.String
    | Values.Bytes
    | Values.Array
    | Values.Tuple
)


def to_python(value: Value) -> Any:
    """Convert a value tree into plain Python data for display or JSON."""
    match value:
        case Values.Uint(value=v):
            return v
        case Values.Int():
            return value.signed
        case Values.Address():
            return value.checksum
        case Values.Bool(value=b):
            return b
        case Values.String(value=s):
            return s
        case Values.Bytes(value=b):
            return "0x" + b.hex()
        case Values.Array(items=items) | Values.Tuple(items=items):
            return [to_python(item) for item in items]
    raise TypeError(f"not an ABI value: {value!r}")
