import pytest

from abidec.core.errors import DecodeError
from abidec.decoding.decoder import decode_value, decode_values, iter_values
from abidec.decoding.grammar import parse_type
from abidec.decoding.types import Types
from abidec.decoding.values import Values, to_python
from conftest import padded, word

# f(string x, uint32 y, uint32[][2] z) called as f("abc", 5, [[1, 2], [3]])
DECODE_MANY_INPUT = bytes.fromhex(
    "0000000000000000000000000000000000000000000000000000000000000060"
    "0000000000000000000000000000000000000000000000000000000000000005"
    "00000000000000000000000000000000000000000000000000000000000000a0"
    "0000000000000000000000000000000000000000000000000000000000000003"
    "6162630000000000000000000000000000000000000000000000000000000000"
    "0000000000000000000000000000000000000000000000000000000000000040"
    "00000000000000000000000000000000000000000000000000000000000000a0"
    "0000000000000000000000000000000000000000000000000000000000000002"
    "0000000000000000000000000000000000000000000000000000000000000001"
    "0000000000000000000000000000000000000000000000000000000000000002"
    "0000000000000000000000000000000000000000000000000000000000000001"
    "0000000000000000000000000000000000000000000000000000000000000003"
)


def test_decode_uint() -> None:
    n = 1_000_000_000_000_000_001
    assert decode_values(word(n), [Types.Uint(256)]) == [Values.Uint(n, 256)]


def test_decode_int_keeps_full_word() -> None:
    minus_one = word(2**256 - 1)
    value = decode_value(minus_one, Types.Int(24))
    assert value == Values.Int(2**256 - 1, 24)
    assert value.signed == -1


def test_decode_uint_keeps_full_word() -> None:
    value = decode_value(word(0x1FF), Types.Uint(8))
    assert value.value == 0x1FF
    assert value.narrowed == 0xFF


def test_decode_address_takes_low_20_bytes() -> None:
    addr = bytes(range(1, 21))
    value = decode_value(b"\x00" * 12 + addr, Types.Address())
    assert value == Values.Address(addr)


def test_decode_bool_is_exactly_one() -> None:
    assert decode_value(word(1), Types.Bool()) == Values.Bool(True)
    assert decode_value(word(0), Types.Bool()) == Values.Bool(False)
    # only an exact 1 is true
    assert decode_value(word(2), Types.Bool()) == Values.Bool(False)


def test_decode_fixed_bytes() -> None:
    raw = bytes(range(16)) + b"\x00" * 16
    types = [Types.FixedBytes(16), Types.Uint(8)]
    assert decode_values(raw + word(7), types) == [Values.Bytes(bytes(range(16))), Values.Uint(7, 8)]


def test_decode_fixed_array_of_fixed_arrays() -> None:
    data = word(5) + word(6) + word(7) + word(8)
    assert decode_values(data, [parse_type("uint256[2][2]")]) == [
        Values.Array(
            [
                Values.Array([Values.Uint(5, 256), Values.Uint(6, 256)]),
                Values.Array([Values.Uint(7, 256), Values.Uint(8, 256)]),
            ]
        )
    ]


def test_decode_string() -> None:
    data = word(0x20) + word(3) + padded(b"abc")
    assert decode_values(data, [Types.String()]) == [Values.String("abc")]


def test_decode_empty_string() -> None:
    assert decode_values(word(0x20) + word(0), [Types.String()]) == [Values.String("")]


def test_decode_bytes() -> None:
    payload = bytes(range(40))
    data = word(0x20) + word(len(payload)) + padded(payload)
    assert decode_values(data, [Types.Bytes()]) == [Values.Bytes(payload)]


def test_decode_dynamic_array_of_static_arrays() -> None:
    data = word(0x20) + word(2) + word(5) + word(6) + word(7) + word(8)
    assert decode_values(data, [parse_type("uint256[2][]")]) == [
        Values.Array(
            [
                Values.Array([Values.Uint(5, 256), Values.Uint(6, 256)]),
                Values.Array([Values.Uint(7, 256), Values.Uint(8, 256)]),
            ]
        )
    ]


def test_decode_many_nested_dynamic_in_fixed() -> None:
    types = [Types.String(), Types.Uint(32), parse_type("uint32[][2]")]
    assert decode_values(DECODE_MANY_INPUT, types) == [
        Values.String("abc"),
        Values.Uint(5, 32),
        Values.Array(
            [
                Values.Array([Values.Uint(1, 32), Values.Uint(2, 32)]),
                Values.Array([Values.Uint(3, 32)]),
            ]
        ),
    ]


def test_decode_dynamic_array_of_strings() -> None:
    # string[] ["ab", "c"]: element offsets are relative to the word after the length
    data = (
        word(0x20)
        + word(2)
        + word(0x40)
        + word(0x80)
        + word(2)
        + padded(b"ab")
        + word(1)
        + padded(b"c")
    )
    assert decode_values(data, [parse_type("string[]")]) == [
        Values.Array([Values.String("ab"), Values.String("c")])
    ]


def test_decode_static_tuple_in_place() -> None:
    data = word(1) + word(1) + word(9)
    types = [parse_type("(uint8,bool)"), Types.Uint(16)]
    assert decode_values(data, types) == [
        Values.Tuple([Values.Uint(1, 8), Values.Bool(True)]),
        Values.Uint(9, 16),
    ]


def test_decode_dynamic_tuple_through_offset() -> None:
    # ((uint256,string), uint8) with the tuple tail after the head
    tail = word(42) + word(0x40) + word(2) + padded(b"hi")
    data = word(0x40) + word(3) + tail
    types = [parse_type("(uint256,string)"), Types.Uint(8)]
    assert decode_values(data, types) == [
        Values.Tuple([Values.Uint(42, 256), Values.String("hi")]),
        Values.Uint(3, 8),
    ]


def test_decode_dynamic_tuple_array() -> None:
    # (uint8,bytes)[] with one element
    element = word(7) + word(0x40) + word(1) + padded(b"\xff")
    data = word(0x20) + word(1) + word(0x20) + element
    [value] = decode_values(data, [parse_type("(uint8,bytes)[]")])
    assert to_python(value) == [[7, "0xff"]]


def test_iter_values_is_lazy() -> None:
    data = word(1)
    it = iter_values(data, [Types.Uint(8), Types.Uint(8)])
    assert next(it) == Values.Uint(1, 8)
    with pytest.raises(DecodeError):
        next(it)


def test_invalid_utf8_string() -> None:
    data = word(0x20) + word(2) + padded(b"\xff\xfe")
    with pytest.raises(DecodeError) as exc:
        decode_values(data, [Types.String()])
    assert exc.value.offset == 0


@pytest.mark.parametrize(
    "text",
    ["uint256", "address", "bool", "bytes32", "string", "bytes", "uint8[]", "uint8[3]", "string[2]", "(uint8,string)"],
)
def test_truncated_buffer_fails(text: str) -> None:
    typ = parse_type(text)
    with pytest.raises(DecodeError):
        decode_values(b"\x00" * 31, [typ])


def test_truncated_tail_reports_offsets() -> None:
    data = word(0x20) + word(64) + b"abc"
    with pytest.raises(DecodeError) as exc:
        decode_values(data, [Types.Bytes()])
    assert exc.value.offset == 64
    assert exc.value.needed == 64
    assert exc.value.available == len(data)


def test_offset_out_of_range() -> None:
    with pytest.raises(DecodeError):
        decode_values(word(2**255), [Types.String()])


def test_huge_array_length_rejected_early() -> None:
    with pytest.raises(DecodeError):
        decode_values(word(0x20) + word(2**64), [parse_type("uint256[]")])


def test_decode_accepts_memoryview_and_copies() -> None:
    buf = bytearray(word(0x20) + word(1) + padded(b"x"))
    [value] = decode_values(memoryview(buf), [Types.Bytes()])
    buf[64] = 0
    assert value == Values.Bytes(b"x")
