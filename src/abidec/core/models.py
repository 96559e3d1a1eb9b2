"""Core data models for batch log decoding.

This module defines:
- `LogRecord`: one raw log as returned by `eth_getLogs`, minimally normalized.
- `Column`: dynamic, append-only columnar buffer where every decoded
   parameter name becomes its own Arrow column.

Design notes
------------
- Dynamic columns are stored as strings for Arrow safety (uint256, hex, lists).
- Base columns are strongly typed and always present.
- Rows are sorted on (block_number, log_index) before write.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pyarrow as pa

from abidec.core.errors import LoadError
from abidec.decoding.specs import DecodedParams

# === Base schema (Arrow) ===

_BASE_FIELDS: list[tuple[str, pa.DataType]] = [
    ("block_number", pa.uint64()),
    ("tx_hash", pa.string()),
    ("log_index", pa.uint64()),
    ("contract", pa.string()),
    ("event", pa.string()),
    ("error", pa.string()),
]


_BASE_NAMES = frozenset(n for n, _ in _BASE_FIELDS)


def _quantity(raw: dict[str, Any], key: str) -> int:
    """Parse the required JSON-RPC quantity `raw[key]` (0x-hex string or int)."""
    value = raw.get(key)
    if value is None:
        raise LoadError(f"log record is missing {key!r}", field=key)
    try:
        if isinstance(value, str):
            return int(value, 16) if value.startswith("0x") else int(value)
        return int(value)
    except (TypeError, ValueError) as e:
        raise LoadError(f"log record has invalid {key!r}: {value!r}", field=key) from e


# === RPC record ===


@dataclass(slots=True, frozen=True)
class LogRecord:
    """Raw log as fetched from RPC, minimally normalized."""

    address: str  # lowercased 0x...
    topics: tuple[str, ...]  # lowercased 0x...
    data_hex: str  # "0x..."
    block_number: int
    tx_hash: str  # lowercased 0x...
    log_index: int

    @classmethod
    def from_rpc(cls, raw: dict[str, Any]) -> LogRecord:
        """Build from an `eth_getLogs` result object."""
        return cls(
            address=str(raw.get("address", "")).lower(),
            topics=tuple(str(t).lower() for t in raw.get("topics", [])),
            data_hex=str(raw.get("data", "0x")),
            block_number=_quantity(raw, "blockNumber"),
            tx_hash=str(raw.get("transactionHash", "")).lower(),
            log_index=_quantity(raw, "logIndex"),
        )


def _cell(value: Any) -> str:
    """Render one decoded python value as a column string."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)  # Arrow safety for big ints
    return json.dumps(value, default=str, separators=(",", ":"))


# === Dynamic column buffer ===


@dataclass(slots=True)
class Column:
    """Dynamic columnar buffer.

    - Base columns are always present and strongly typed.
    - Dynamic columns are created lazily upon first parameter name appearance.
    - All dynamic values are stored as *strings* (or None).
    """

    block_number: list[int] = field(default_factory=list)
    tx_hash: list[str] = field(default_factory=list)
    log_index: list[int] = field(default_factory=list)
    contract: list[str] = field(default_factory=list)
    event: list[str] = field(default_factory=list)
    error: list[str | None] = field(default_factory=list)

    dyn: dict[str, list[str | None]] = field(default_factory=dict)
    _rows: int = 0

    @staticmethod
    def empty() -> Column:
        return Column()

    def size(self) -> int:
        return self._rows

    def _append_base(self, log: LogRecord, event: str, error: str | None) -> None:
        """Append one row to base columns and pad existing dynamic cols."""
        self.block_number.append(log.block_number)
        self.tx_hash.append(log.tx_hash)
        self.log_index.append(log.log_index)
        self.contract.append(log.address)
        self.event.append(event)
        self.error.append(error)
        self._rows += 1
        for col in self.dyn.values():
            col.append(None)

    def _ensure_dyn_col(self, name: str) -> list[str | None]:
        """Ensure a dynamic column exists and is aligned to current row count."""
        col = self.dyn.get(name)
        if col is None:
            col = [None] * self._rows
            self.dyn[name] = col
        return col

    def append_decoded(self, log: LogRecord, event: str, params: DecodedParams) -> None:
        """Append one decoded log.

        Unnamed parameters become `arg<i>` columns; names clashing with a base
        column are prefixed with `param_`. A name already used on this row
        gets a `_<n>` suffix.
        """
        self._append_base(log, event, None)
        used: set[str] = set()
        for i, (name, value) in enumerate(params.to_python()):
            name = name or f"arg{i}"
            if name in _BASE_NAMES:
                name = f"param_{name}"
            stem, n = name, 1
            while name in used:
                name = f"{stem}_{n}"
                n += 1
            used.add(name)
            col = self._ensure_dyn_col(name)
            col[-1] = _cell(value)

    def append_failed(self, log: LogRecord, event: str, error: str) -> None:
        self._append_base(log, event, error)

    def take_indices(self, indices: list[int]) -> Column:
        """Return a new Column containing only the specified row indices."""
        out = Column()
        if not indices:
            return out

        out.block_number = [self.block_number[i] for i in indices]
        out.tx_hash = [self.tx_hash[i] for i in indices]
        out.log_index = [self.log_index[i] for i in indices]
        out.contract = [self.contract[i] for i in indices]
        out.event = [self.event[i] for i in indices]
        out.error = [self.error[i] for i in indices]

        for k, col in self.dyn.items():
            values = [col[i] for i in indices]
            # drop columns that belong only to other events
            if any(v is not None for v in values):
                out.dyn[k] = values

        out._rows = len(indices)
        return out

    def to_arrow_table(self) -> pa.Table:
        """Convert the buffer to a sorted Arrow table with deterministic schema."""
        fields = [pa.field(n, t) for n, t in _BASE_FIELDS]
        arrays: dict[str, pa.Array] = {
            "block_number": pa.array(self.block_number, type=pa.uint64()),
            "tx_hash": pa.array(self.tx_hash, type=pa.string()),
            "log_index": pa.array(self.log_index, type=pa.uint64()),
            "contract": pa.array(self.contract, type=pa.string()),
            "event": pa.array(self.event, type=pa.string()),
            "error": pa.array(self.error, type=pa.string()),
        }
        for name in sorted(self.dyn.keys()):
            fields.append(pa.field(name, pa.string()))
            arrays[name] = pa.array(self.dyn[name], type=pa.string())
        schema = pa.schema(fields)
        return pa.Table.from_pydict(arrays, schema=schema).sort_by(
            [("block_number", "ascending"), ("log_index", "ascending")]
        )
