"""Contract interface primitives.

Defines immutable dataclasses describing what a contract exposes:
- `Param`: one named, typed input/output (optionally `indexed` for events)
- `Function` / `Constructor` / `Event` / `Error`: ABI entries
- `DecodedParams`: ordered `(Param, Value)` pairs produced by decoding
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, overload

from abidec.decoding.signatures import signature
from abidec.decoding.types import AbiType, Types, render_type
from abidec.decoding.values import Value, to_python


class StateMutability(str, Enum):
    PAYABLE = "payable"
    NONPAYABLE = "nonpayable"
    VIEW = "view"
    PURE = "pure"


@dataclass(frozen=True)
class Param:
    """One parameter: name (possibly empty), type, and the event-only `indexed` flag."""

    name: str
    type: AbiType
    indexed: bool | None = None  # None outside events
    components: tuple[Param, ...] = ()  # member names for tuple types

    @property
    def is_indexed(self) -> bool:
        return bool(self.indexed)

    @property
    def canonical_type(self) -> str:
        return render_type(self.type)


def _types(params: Sequence[Param]) -> list[AbiType]:
    return [p.type for p in params]


@dataclass(frozen=True)
class Function:
    name: str
    inputs: tuple[Param, ...]
    outputs: tuple[Param, ...] = ()
    state_mutability: StateMutability = StateMutability.NONPAYABLE

    @property
    def signature(self) -> str:
        return signature(self.name, _types(self.inputs))

    @property
    def input_types(self) -> list[AbiType]:
        return _types(self.inputs)

    @property
    def output_types(self) -> list[AbiType]:
        return _types(self.outputs)


@dataclass(frozen=True)
class Constructor:
    inputs: tuple[Param, ...]
    state_mutability: StateMutability = StateMutability.NONPAYABLE

    @property
    def input_types(self) -> list[AbiType]:
        return _types(self.inputs)


@dataclass(frozen=True)
class Event:
    name: str
    inputs: tuple[Param, ...]
    anonymous: bool = False

    @property
    def signature(self) -> str:
        return signature(self.name, _types(self.inputs))

    @property
    def indexed_inputs(self) -> list[Param]:
        return [p for p in self.inputs if p.is_indexed]

    @property
    def data_inputs(self) -> list[Param]:
        return [p for p in self.inputs if not p.is_indexed]


@dataclass(frozen=True)
class Error:
    """A custom error (Solidity `error Name(...)`)."""

    name: str
    inputs: tuple[Param, ...]

    @property
    def signature(self) -> str:
        return signature(self.name, _types(self.inputs))

    @property
    def input_types(self) -> list[AbiType]:
        return _types(self.inputs)


def is_hashed_when_indexed(typ: AbiType) -> bool:
    """Indexed values of these types are stored in topics as their keccak256 digest."""
    return isinstance(typ, (Types.String, Types.Bytes, Types.FixedArray, Types.Array, Types.Tuple))


# ---------- decoded output ----------


@dataclass(frozen=True)
class DecodedParams(Sequence[tuple[Param, Value]]):
    """Ordered `(Param, Value)` pairs in declaration order."""

    pairs: tuple[tuple[Param, Value], ...] = field(default_factory=tuple)

    @classmethod
    def zip(cls, params: Sequence[Param], values: Sequence[Value]) -> DecodedParams:
        return cls(tuple(zip(params, values, strict=True)))

    @overload
    def __getitem__(self, index: int) -> tuple[Param, Value]: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[tuple[Param, Value]]: ...

    def __getitem__(self, index: int | slice) -> Any:
        return self.pairs[index]

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[tuple[Param, Value]]:
        return iter(self.pairs)

    def names(self) -> list[str]:
        return [p.name for p, _ in self.pairs]

    def values(self) -> list[Value]:
        return [v for _, v in self.pairs]

    def as_dict(self) -> dict[str, Value]:
        """Map names to values.

        Raises ``ValueError`` if a parameter is unnamed or a name repeats.
        """
        names = self.names()
        if any(not n for n in names):
            raise ValueError("decoded params contain unnamed entries and are not representable as a dict")
        if len(set(names)) != len(names):
            raise ValueError("decoded params contain repeated names and are not representable as a dict")
        return dict(zip(names, self.values()))

    def to_python(self) -> list[tuple[str, Any]]:
        return [(p.name, to_python(v)) for p, v in self.pairs]
