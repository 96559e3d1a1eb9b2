"""Canonical signatures and their Keccak-256 derived identifiers."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from eth_utils import keccak

from abidec.decoding.types import AbiType, render_type

if TYPE_CHECKING:
    from abidec.decoding.specs import Error, Event, Function

SELECTOR_LENGTH = 4
TOPIC_LENGTH = 32


def signature(name: str, types: Iterable[AbiType]) -> str:
    """Return `name(type1,type2,...)` using canonical type rendering."""
    return f"{name}({','.join(render_type(t) for t in types)})"


def signature_hash(sig: str) -> bytes:
    return keccak(text=sig)


def selector(function: Function | Error) -> bytes:
    """First 4 bytes of keccak256 of the function (or custom error) signature."""
    return signature_hash(function.signature)[:SELECTOR_LENGTH]


def topic(event: Event) -> bytes:
    """Full 32-byte keccak256 of the event signature (topic0 of non-anonymous logs)."""
    return signature_hash(event.signature)


def to_hex(b: bytes) -> str:
    return "0x" + b.hex()


def error_selector(error: Error) -> bytes:
    """Selector prefixing revert data of a custom error; same rule as functions."""
    return selector(error)
