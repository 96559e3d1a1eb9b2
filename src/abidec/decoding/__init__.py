"""ABI decoding engine.

This package provides:
- Type grammar (`parse_type`, `render_type`, `is_dynamic`) over `Types`
- Head/tail value decoder (`decode_values`) producing `Values`
- Signature hashing (`signature`, `selector`, `topic`)
- Contract interface registry dispatching call data and logs
- Event log reconstruction merging topics and data
"""

from abidec.decoding.decoder import decode_value, decode_values, iter_values
from abidec.decoding.event import decode_event_log
from abidec.decoding.grammar import parse_type, parse_types
from abidec.decoding.registry import ContractInterface, make_interface
from abidec.decoding.signatures import error_selector, selector, signature, topic
from abidec.decoding.specs import (
    Constructor,
    DecodedParams,
    Error,
    Event,
    Function,
    Param,
    StateMutability,
)
from abidec.decoding.types import AbiType, Types, is_dynamic, render_type
from abidec.decoding.values import Value, Values, to_python

__all__ = [
    "AbiType",
    "Types",
    "is_dynamic",
    "render_type",
    "parse_type",
    "parse_types",
    "Value",
    "Values",
    "to_python",
    "decode_value",
    "decode_values",
    "iter_values",
    "signature",
    "selector",
    "topic",
    "error_selector",
    "Param",
    "Function",
    "Constructor",
    "Event",
    "Error",
    "StateMutability",
    "DecodedParams",
    "decode_event_log",
    "ContractInterface",
    "make_interface",
]
