"""Rebuild an event's parameter list from a log's topics and data.

Indexed inputs come from topics (after topic0 for non-anonymous events),
non-indexed inputs from the ABI-decoded data section. Both queues are
consumed while walking the inputs in declaration order, so the result
preserves the original parameter order whatever the indexed split.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence

from abidec.core.errors import DecodeError, InsufficientData, InsufficientTopics
from abidec.decoding.decoder import decode_value, iter_values
from abidec.decoding.signatures import TOPIC_LENGTH
from abidec.decoding.specs import DecodedParams, Event, Param, is_hashed_when_indexed
from abidec.decoding.utils import as_bytes
from abidec.decoding.values import Value, Values

TopicLike = bytes | str


def normalize_topics(topics: Sequence[TopicLike]) -> list[bytes]:
    """Convert topics (raw bytes or hex strings) into 32-byte values."""
    out: list[bytes] = []
    for i, t in enumerate(topics):
        b = as_bytes(t)
        if len(b) != TOPIC_LENGTH:
            raise DecodeError(f"topic {i} is {len(b)} bytes, expected {TOPIC_LENGTH}", needed=TOPIC_LENGTH, available=len(b))
        out.append(b)
    return out


def _decode_data_values(event: Event, data: bytes) -> deque[Value]:
    data_inputs = event.data_inputs
    values: deque[Value] = deque()
    try:
        for value in iter_values(data, [p.type for p in data_inputs]):
            values.append(value)
    except DecodeError as e:
        if e.needed is None:
            # not a short read: invalid UTF-8 and similar
            raise
        raise InsufficientData(event.name, len(data_inputs), len(values)) from e
    return values


def _decode_topic(param: Param, raw: bytes) -> Value:
    if is_hashed_when_indexed(param.type):
        # only the keccak256 digest of the original value is stored
        return Values.Bytes(raw)
    return decode_value(raw, param.type)


def decode_event_log(event: Event, topics: Sequence[TopicLike], data: bytes | str) -> DecodedParams:
    """Decode a log of `event` into ordered `(Param, Value)` pairs.

    Raises `InsufficientTopics` / `InsufficientData` when the log carries
    fewer indexed / non-indexed values than the event declares.
    """
    raw_topics = normalize_topics(topics)
    indexed_count = len(event.indexed_inputs)
    if not event.anonymous:
        if not raw_topics:
            raise InsufficientTopics(event.name, indexed_count + 1, 0)
        raw_topics = raw_topics[1:]

    topic_queue = deque(raw_topics)
    data_queue = _decode_data_values(event, as_bytes(data))

    pairs: list[tuple[Param, Value]] = []
    used_topics = 0
    for param in event.inputs:
        if param.is_indexed:
            if not topic_queue:
                raise InsufficientTopics(event.name, indexed_count, len(raw_topics))
            value = _decode_topic(param, topic_queue.popleft())
            used_topics += 1
        else:
            if not data_queue:
                raise InsufficientData(event.name, len(event.data_inputs), len(pairs) - used_topics)
            value = data_queue.popleft()
        pairs.append((param, value))

    return DecodedParams(tuple(pairs))
