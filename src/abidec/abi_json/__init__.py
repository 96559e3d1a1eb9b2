"""Load a JSON ABI description into a `ContractInterface`.

Entries are validated with pydantic and mapped onto the immutable interface
model; type strings go through the type grammar (tuple types are rebuilt
from their `components` first).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from abidec.core.errors import GrammarError, LoadError
from abidec.decoding.grammar import parse_type
from abidec.decoding.registry import ContractInterface
from abidec.decoding.specs import Constructor, Error, Event, Function, Param, StateMutability

logger = logging.getLogger(__name__)

ENTRY_KINDS = ("constructor", "function", "event", "error", "receive", "fallback")


class AbiParam(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    type: str
    indexed: Optional[bool] = None
    internalType: Optional[str] = None
    components: Optional[list[AbiParam]] = None


AbiParam.model_rebuild()


class AbiEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    name: Optional[str] = None
    inputs: list[AbiParam] = []
    outputs: list[AbiParam] = []
    stateMutability: Optional[StateMutability] = None
    anonymous: Optional[bool] = None


AbiJson = Iterable[dict[str, Any]]
AbiSource = AbiJson | Path | str


def canonical_param_type(param: AbiParam) -> str:
    """Return the canonical type text, expanding `tuple...` from components."""
    if not param.type.startswith("tuple"):
        return param.type
    components = param.components or []
    inner = ",".join(canonical_param_type(c) for c in components)
    return f"({inner}){param.type[len('tuple'):]}"


def _to_param(raw: AbiParam, *, entry: int, event: bool = False) -> Param:
    text = canonical_param_type(raw)
    try:
        typ = parse_type(text)
    except GrammarError as e:
        raise LoadError(f"parameter {raw.name!r}: {e}", entry=entry, field="type") from e
    components = tuple(_to_param(c, entry=entry) for c in raw.components or [])
    indexed = bool(raw.indexed) if event else raw.indexed
    return Param(name=raw.name, type=typ, indexed=indexed, components=components)


def _params(raws: Sequence[AbiParam], *, entry: int, event: bool = False) -> tuple[Param, ...]:
    return tuple(_to_param(r, entry=entry, event=event) for r in raws)


def _require(value: Any, field: str, kind: str, entry: int) -> Any:
    if value is None:
        raise LoadError(f"{kind} entry is missing {field!r}", entry=entry, field=field)
    return value


def _load_json(source: AbiSource) -> list[dict[str, Any]]:
    if isinstance(source, Path):
        source = source.read_text(encoding="utf-8")
    if isinstance(source, str):
        try:
            source = json.loads(source)
        except json.JSONDecodeError as e:
            raise LoadError(f"invalid JSON: {e}") from e
    # hardhat/foundry artifacts wrap the ABI
    if isinstance(source, dict):
        if "abi" not in source:
            raise LoadError("expected a list of ABI entries or an object with an 'abi' key")
        source = source["abi"]
    return list(source)


def load_interface(source: AbiSource) -> ContractInterface:
    """Build a `ContractInterface` from a JSON ABI (text, path, or parsed list).

    Raises `LoadError` for unknown entry kinds and missing required fields.
    """
    functions: list[Function] = []
    events: list[Event] = []
    errors: list[Error] = []
    constructor: Constructor | None = None
    has_receive = False
    has_fallback = False

    for i, raw in enumerate(_load_json(source)):
        try:
            entry = AbiEntry.model_validate(raw)
        except ValidationError as e:
            raise LoadError(f"invalid ABI entry: {e}", entry=i) from e

        match entry.type:
            case "receive":
                has_receive = True
            case "fallback":
                has_fallback = True
            case "constructor":
                constructor = Constructor(
                    inputs=_params(entry.inputs, entry=i),
                    state_mutability=_require(entry.stateMutability, "stateMutability", "constructor", i),
                )
            case "function":
                functions.append(
                    Function(
                        name=_require(entry.name, "name", "function", i),
                        inputs=_params(entry.inputs, entry=i),
                        outputs=_params(entry.outputs, entry=i),
                        state_mutability=_require(entry.stateMutability, "stateMutability", "function", i),
                    )
                )
            case "event":
                events.append(
                    Event(
                        name=_require(entry.name, "name", "event", i),
                        inputs=_params(entry.inputs, entry=i, event=True),
                        anonymous=_require(entry.anonymous, "anonymous", "event", i),
                    )
                )
            case "error":
                errors.append(
                    Error(
                        name=_require(entry.name, "name", "error", i),
                        inputs=_params(entry.inputs, entry=i),
                    )
                )
            case _:
                raise LoadError(
                    f"invalid ABI entry type {entry.type!r}, expected one of {', '.join(ENTRY_KINDS)}",
                    entry=i,
                    field="type",
                )

    logger.debug("loaded ABI: %d functions, %d events, %d errors", len(functions), len(events), len(errors))
    return ContractInterface(
        functions=tuple(functions),
        events=tuple(events),
        errors=tuple(errors),
        constructor=constructor,
        has_receive=has_receive,
        has_fallback=has_fallback,
    )
