"""ABI type tree.

`AbiType` is a closed union of frozen dataclasses grouped under `Types`:

- `Uint` / `Int`: integers of a bit width (multiple of 8 in [8, 256])
- `Address`, `Bool`, `String`, `Bytes`
- `FixedBytes`: `bytes<N>` with N in [1, 32]
- `FixedArray` / `Array`: `T[N]` / `T[]`
- `Tuple`: `(T1,T2,...)`

Whether a type is dynamic is derived from the tree on every call
(`is_dynamic`), never stored.
"""

from __future__ import annotations

from dataclasses import dataclass

from abidec.core.errors import GrammarError


class Types:
    @dataclass(frozen=True)
    class Uint:
        bits: int

        def __post_init__(self) -> None:
            _check_bits(f"uint{self.bits}", self.bits)

    @dataclass(frozen=True)
    class Int:
        bits: int

        def __post_init__(self) -> None:
            _check_bits(f"int{self.bits}", self.bits)

    @dataclass(frozen=True)
    class Address:
        pass

    @dataclass(frozen=True)
    class Bool:
        pass

    @dataclass(frozen=True)
    class String:
        pass

    @dataclass(frozen=True)
    class Bytes:
        pass

    @dataclass(frozen=True)
    class FixedBytes:
        size: int

        def __post_init__(self) -> None:
            if not 1 <= self.size <= 32:
                raise GrammarError(f"bytes{self.size}", 5, "size must be in [1, 32]")

    @dataclass(frozen=True)
    class FixedArray:
        item: AbiType
        size: int

        def __post_init__(self) -> None:
            if self.size < 1:
                raise GrammarError(f"[{self.size}]", 1, "fixed array size must be positive")

    @dataclass(frozen=True)
    class Array:
        item: AbiType

    @dataclass(frozen=True)
    class Tuple:
        members: tuple[AbiType, ...]

        def __post_init__(self) -> None:
            # accept any sequence, store a tuple so the type stays hashable
            object.__setattr__(self, "members", tuple(self.members))
            if not self.members:
                raise GrammarError("()", 1, "tuple needs at least one member")


AbiType = (
    Types.Uint
    | Types.Int
    | Types.Address
    | Types.Bool
    | Types.String
    | Types.Bytes
    | Types.FixedBytes
    | Types.FixedArray
    | Types.Array
    | Types.Tuple
)


def _check_bits(text: str, bits: int) -> None:
    if bits % 8 != 0 or not 8 <= bits <= 256:
        raise GrammarError(text, len(text) - len(str(bits)), "bit width must be a multiple of 8 in [8, 256]")


def is_dynamic(typ: AbiType) -> bool:
    """Return True if values of `typ` are encoded behind an offset word."""
    match typ:
        case Types.String() | Types.Bytes() | Types.Array():
            return True
        case Types.FixedArray(item=item):
            return is_dynamic(item)
        case Types.Tuple(members=members):
            return any(is_dynamic(m) for m in members)
    return False


def render_type(typ: AbiType) -> str:
    """Canonical text of a type, as used in signatures."""
    match typ:
        case Types.Uint(bits=bits):
            return f"uint{bits}"
        case Types.Int(bits=bits):
            return f"int{bits}"
        case Types.Address():
            return "address"
        case Types.Bool():
            return "bool"
        case Types.String():
            return "string"
        case Types.Bytes():
            return "bytes"
        case Types.FixedBytes(size=size):
            return f"bytes{size}"
        case Types.FixedArray(item=item, size=size):
            return f"{render_type(item)}[{size}]"
        case Types.Array(item=item):
            return f"{render_type(item)}[]"
        case Types.Tuple(members=members):
            return "(" + ",".join(render_type(m) for m in members) + ")"
    raise TypeError(f"not an ABI type: {typ!r}")


def head_size(typ: AbiType) -> int:
    """Bytes a value of `typ` occupies in the head of its enclosing sequence."""
    if is_dynamic(typ):
        return 32
    match typ:
        case Types.FixedArray(item=item, size=size):
            return head_size(item) * size
        case Types.Tuple(members=members):
            return sum(head_size(m) for m in members)
    return 32
