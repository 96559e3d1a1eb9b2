"""Contract interface registry.

`ContractInterface` aggregates a contract's constructor, functions, events
and custom errors and dispatches raw call data / logs / revert data to the
matching entry:

- `decode_function_input(calldata)` → selector lookup, then decode inputs
- `decode_event_log(topics, data)` → topic0 lookup (or the single anonymous
  event), then rebuild the parameter list
- `decode_error_data(data)` → selector lookup over custom errors

Lookup tables are built once in `__post_init__`; afterwards the instance is
read-only and may be shared freely between threads.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from abidec.core.errors import SelectorNotFound, TopicNotFound
from abidec.decoding.decoder import decode_values
from abidec.decoding.event import TopicLike, decode_event_log, normalize_topics
from abidec.decoding.signatures import SELECTOR_LENGTH, error_selector, selector, to_hex, topic
from abidec.decoding.specs import Constructor, DecodedParams, Error, Event, Function
from abidec.decoding.utils import as_bytes, hex_to_bytes

logger = logging.getLogger(__name__)


def _index_by_selector(entries: Iterable[Function | Error], kind: str) -> dict[bytes, Function | Error]:
    table: dict[bytes, Function | Error] = {}
    for entry in entries:
        sel = error_selector(entry) if isinstance(entry, Error) else selector(entry)
        if sel in table:
            logger.warning(
                "%s selector collision %s: keeping %s, ignoring %s",
                kind,
                to_hex(sel),
                table[sel].signature,
                entry.signature,
            )
            continue
        table[sel] = entry
    return table


@dataclass(frozen=True)
class ContractInterface:
    """Immutable view of a contract ABI with selector/topic lookup."""

    functions: tuple[Function, ...] = ()
    events: tuple[Event, ...] = ()
    errors: tuple[Error, ...] = ()
    constructor: Constructor | None = None
    has_receive: bool = False
    has_fallback: bool = False

    _functions_by_selector: Mapping[bytes, Function] = field(init=False, repr=False, compare=False)
    _events_by_topic: Mapping[bytes, Event] = field(init=False, repr=False, compare=False)
    _errors_by_selector: Mapping[bytes, Error] = field(init=False, repr=False, compare=False)
    _anonymous_events: tuple[Event, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "functions", tuple(self.functions))
        object.__setattr__(self, "events", tuple(self.events))
        object.__setattr__(self, "errors", tuple(self.errors))

        events_by_topic: dict[bytes, Event] = {}
        for event in self.events:
            if event.anonymous:
                continue
            t = topic(event)
            if t in events_by_topic:
                logger.warning("duplicate event topic %s for %s", to_hex(t), event.signature)
                continue
            events_by_topic[t] = event

        object.__setattr__(self, "_functions_by_selector", _index_by_selector(self.functions, "function"))
        object.__setattr__(self, "_errors_by_selector", _index_by_selector(self.errors, "error"))
        object.__setattr__(self, "_events_by_topic", events_by_topic)
        object.__setattr__(self, "_anonymous_events", tuple(e for e in self.events if e.anonymous))
        logger.debug(
            "built interface: %d functions, %d events (%d anonymous), %d errors",
            len(self.functions),
            len(self.events),
            len(self._anonymous_events),
            len(self.errors),
        )

    # ---------- lookup ----------

    def function_by_selector(self, sel: bytes | str) -> Function:
        sel = as_bytes(sel)
        function = self._functions_by_selector.get(sel)
        if function is None:
            logger.debug("no function for selector %s", to_hex(sel))
            raise SelectorNotFound(sel)
        return function

    def error_by_selector(self, sel: bytes | str) -> Error:
        sel = as_bytes(sel)
        error = self._errors_by_selector.get(sel)
        if error is None:
            raise SelectorNotFound(sel)
        return error

    def event_by_topic(self, topic0: bytes | str) -> Event:
        """Return the non-anonymous event whose topic is `topic0`."""
        t = as_bytes(topic0)
        event = self._events_by_topic.get(t)
        if event is None:
            raise TopicNotFound(t)
        return event

    def find_event(self, topics: Sequence[TopicLike]) -> Event:
        """Pick the event for a log: topic0 match first, else the only anonymous event.

        With several anonymous events and no topic match the log is ambiguous
        and `TopicNotFound` is raised rather than guessing.
        """
        raw = normalize_topics(topics)
        topic0 = raw[0] if raw else None
        if topic0 is not None and topic0 in self._events_by_topic:
            return self._events_by_topic[topic0]

        if len(self._anonymous_events) == 1:
            return self._anonymous_events[0]
        if len(self._anonymous_events) > 1:
            raise TopicNotFound(topic0, f"{len(self._anonymous_events)} anonymous events, cannot resolve topic")
        logger.debug("no event for topic %s", to_hex(topic0) if topic0 else "<none>")
        raise TopicNotFound(topic0)

    # ---------- decoding ----------

    def decode_function_input(self, calldata: bytes | str) -> tuple[Function, DecodedParams]:
        """Decode call data (4-byte selector + ABI-encoded inputs)."""
        data = as_bytes(calldata)
        if len(data) < SELECTOR_LENGTH:
            raise SelectorNotFound(data)
        function = self.function_by_selector(data[:SELECTOR_LENGTH])
        values = decode_values(data[SELECTOR_LENGTH:], function.input_types)
        return function, DecodedParams.zip(function.inputs, values)

    def decode_function_input_hex(self, text: str) -> tuple[Function, DecodedParams]:
        return self.decode_function_input(hex_to_bytes(text))

    def decode_function_output(self, function: Function, data: bytes | str) -> DecodedParams:
        """Decode return data of `function` (no selector prefix)."""
        values = decode_values(as_bytes(data), function.output_types)
        return DecodedParams.zip(function.outputs, values)

    def decode_constructor_args(self, data: bytes | str) -> DecodedParams:
        """Decode ABI-encoded constructor arguments (as appended to init code)."""
        if self.constructor is None:
            return DecodedParams()
        values = decode_values(as_bytes(data), self.constructor.input_types)
        return DecodedParams.zip(self.constructor.inputs, values)

    def decode_error_data(self, data: bytes | str) -> tuple[Error, DecodedParams]:
        """Decode revert data of a custom error (4-byte selector + ABI-encoded inputs)."""
        raw = as_bytes(data)
        if len(raw) < SELECTOR_LENGTH:
            raise SelectorNotFound(raw)
        error = self.error_by_selector(raw[:SELECTOR_LENGTH])
        values = decode_values(raw[SELECTOR_LENGTH:], error.input_types)
        return error, DecodedParams.zip(error.inputs, values)

    def decode_event_log(self, topics: Sequence[TopicLike], data: bytes | str) -> tuple[Event, DecodedParams]:
        """Resolve the event of a log and rebuild its ordered parameters."""
        event = self.find_event(topics)
        return event, decode_event_log(event, topics, data)


def make_interface(
    *,
    functions: Iterable[Function] = (),
    events: Iterable[Event] = (),
    errors: Iterable[Error] = (),
    constructor: Constructor | None = None,
    has_receive: bool = False,
    has_fallback: bool = False,
) -> ContractInterface:
    """Build a `ContractInterface` from already-constructed entries."""
    return ContractInterface(
        functions=tuple(functions),
        events=tuple(events),
        errors=tuple(errors),
        constructor=constructor,
        has_receive=has_receive,
        has_fallback=has_fallback,
    )
