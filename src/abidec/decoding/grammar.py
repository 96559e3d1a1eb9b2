"""Parser for canonical ABI type strings.

Grammar, alternatives tried in this order:

    type    := base suffix*
    base    := tuple | simple
    tuple   := "(" type ("," type)* ")"
    suffix  := "[" digits? "]"
    simple  := "uint" N | "int" N | "address" | "bool" | "string" | "bytes" N?

Suffixes fold left to right, so the rightmost bracket is the outermost
constructor: `string[2][]` is an array of `string[2]`. Whitespace is not part
of the grammar and the whole input must be consumed.
"""

from __future__ import annotations

from collections.abc import Sequence

from abidec.core.errors import GrammarError
from abidec.decoding.types import AbiType, Types

_DIGITS = frozenset("0123456789")
_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyz")


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def error(self, reason: str, pos: int | None = None) -> GrammarError:
        return GrammarError(self.text, self.pos if pos is None else pos, reason)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def expect(self, ch: str) -> None:
        if self.peek() != ch:
            raise self.error(f"expected {ch!r}")
        self.pos += 1

    def take(self, charset: frozenset[str]) -> str:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in charset:
            self.pos += 1
        return self.text[start : self.pos]

    # ---------- productions ----------

    def any_type(self) -> AbiType:
        typ = self.tuple_type() if self.peek() == "(" else self.simple_type()
        while self.peek() == "[":
            typ = self.array_suffix(typ)
        return typ

    def tuple_type(self) -> AbiType:
        self.expect("(")
        members = [self.any_type()]
        while self.peek() == ",":
            self.pos += 1
            members.append(self.any_type())
        self.expect(")")
        return Types.Tuple(tuple(members))

    def array_suffix(self, item: AbiType) -> AbiType:
        self.expect("[")
        start = self.pos
        digits = self.take(_DIGITS)
        self.expect("]")
        if not digits:
            return Types.Array(item)
        size = int(digits)
        if size == 0:
            raise self.error("fixed array size must be positive", start)
        return Types.FixedArray(item, size)

    def simple_type(self) -> AbiType:
        start = self.pos
        word = self.take(_LETTERS)
        if not word:
            raise self.error("expected a type name")
        digits_at = self.pos
        digits = self.take(_DIGITS)

        if word in ("uint", "int"):
            if not digits:
                raise self.error(f"{word} needs an explicit bit width", digits_at)
            bits = int(digits)
            if bits % 8 != 0 or not 8 <= bits <= 256:
                raise self.error("bit width must be a multiple of 8 in [8, 256]", digits_at)
            return Types.Uint(bits) if word == "uint" else Types.Int(bits)

        if word == "bytes":
            if not digits:
                return Types.Bytes()
            size = int(digits)
            if not 1 <= size <= 32:
                raise self.error("bytes size must be in [1, 32]", digits_at)
            return Types.FixedBytes(size)

        if digits:
            raise self.error(f"{word} takes no size", digits_at)
        match word:
            case "address":
                return Types.Address()
            case "bool":
                return Types.Bool()
            case "string":
                return Types.String()
        raise self.error(f"unknown type {word!r}", start)


def parse_type(text: str) -> AbiType:
    """Parse a canonical ABI type string into an `AbiType`.

    Raises `GrammarError` if `text` is not exactly one well-formed type.
    """
    parser = _Parser(text)
    typ = parser.any_type()
    if parser.pos != len(text):
        raise parser.error("unexpected trailing input")
    return typ


def parse_types(texts: Sequence[str]) -> list[AbiType]:
    """Parse several type strings, failing on the first malformed one."""
    return [parse_type(t) for t in texts]
