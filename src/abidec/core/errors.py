"""Error taxonomy for type parsing, interface loading and decoding.

Every error keeps the context needed for a diagnostic as attributes, so
callers can branch on the kind (the class) and still report offsets,
lengths or field names without parsing messages.
"""

from __future__ import annotations


class AbiError(Exception):
    """Base class for every error raised by abidec."""


class GrammarError(AbiError, ValueError):
    """A type string does not match the ABI type grammar."""

    def __init__(self, text: str, position: int, reason: str) -> None:
        self.text = text
        self.position = position
        self.reason = reason
        super().__init__(f"invalid ABI type {text!r} at position {position}: {reason}")


class LoadError(AbiError, ValueError):
    """A contract interface description is malformed."""

    def __init__(self, reason: str, *, entry: int | None = None, field: str | None = None) -> None:
        self.reason = reason
        self.entry = entry
        self.field = field
        where = f"entry {entry}: " if entry is not None else ""
        super().__init__(f"{where}{reason}")


class DecodeError(AbiError, ValueError):
    """Bytes could not be decoded against the requested types."""

    def __init__(
        self,
        reason: str,
        *,
        offset: int | None = None,
        needed: int | None = None,
        available: int | None = None,
    ) -> None:
        self.reason = reason
        self.offset = offset
        self.needed = needed
        self.available = available
        super().__init__(reason)

    @classmethod
    def out_of_bounds(cls, offset: int, needed: int, available: int) -> DecodeError:
        return cls(
            f"read of {needed} bytes at offset {offset} exceeds buffer of {available} bytes",
            offset=offset,
            needed=needed,
            available=available,
        )


class SelectorNotFound(AbiError, LookupError):
    """No function (or error) of the interface has the given selector."""

    def __init__(self, selector: bytes) -> None:
        self.selector = selector
        super().__init__(f"no entry matches selector 0x{selector.hex()}")


class TopicNotFound(AbiError, LookupError):
    """No event of the interface matches a log."""

    def __init__(self, topic: bytes | None, reason: str = "no event matches topic") -> None:
        self.topic = topic
        self.reason = reason
        shown = f"0x{topic.hex()}" if topic is not None else "<none>"
        super().__init__(f"{reason} {shown}")


class InsufficientTopics(DecodeError):
    """A log carries fewer topics than the event's indexed inputs need."""

    def __init__(self, event: str, expected: int, actual: int) -> None:
        self.event = event
        self.expected = expected
        self.actual = actual
        super().__init__(f"event {event}: expected {expected} topics, got {actual}")


class InsufficientData(DecodeError):
    """A log's data section yields fewer values than the event's non-indexed inputs."""

    def __init__(self, event: str, expected: int, actual: int) -> None:
        self.event = event
        self.expected = expected
        self.actual = actual
        super().__init__(f"event {event}: expected {expected} data values, got {actual}")
