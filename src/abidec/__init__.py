from __future__ import annotations

from .abi_json import load_interface
from .core.errors import (
    AbiError,
    DecodeError,
    GrammarError,
    InsufficientData,
    InsufficientTopics,
    LoadError,
    SelectorNotFound,
    TopicNotFound,
)
from .decoding.decoder import decode_values
from .decoding.grammar import parse_type
from .decoding.registry import ContractInterface
from .decoding.specs import DecodedParams, Error, Event, Function, Param, StateMutability
from .decoding.types import Types, render_type
from .decoding.values import Values, to_python

__all__ = [
    "load_interface",
    "parse_type",
    "render_type",
    "decode_values",
    "ContractInterface",
    "DecodedParams",
    "Error",
    "Event",
    "Function",
    "Param",
    "StateMutability",
    "Types",
    "Values",
    "to_python",
    "AbiError",
    "DecodeError",
    "GrammarError",
    "InsufficientData",
    "InsufficientTopics",
    "LoadError",
    "SelectorNotFound",
    "TopicNotFound",
]
