"""Unit tests for encoding/decoding."""

from __future__ import annotations

import pytest
from pydantic import Field

from rosmsg import (
    BaseMessage,
    Bool,
    DecoderConfig,
    ErrorKind,
    FixedArray,
    Float32,
    Float64,
    Int16,
    Int32,
    Int64,
    Int8,
    RosmsgError,
    UInt16,
    UInt32,
    UInt64,
    UInt8,
    decode,
    encode,
    encode_framed,
)


class Flags(BaseMessage):
    """Two fixed-width fields."""

    enabled: Bool
    level: UInt8


class SimpleRecord(BaseMessage):
    """Record mixing every basic category."""

    a: Int16
    b: Bool
    c: UInt8
    d: str
    e: list[Bool]


class Part(BaseMessage):
    """Element of ComplexRecord."""

    a: str
    b: Bool


class ComplexRecord(BaseMessage):
    """Record with a sequence of records."""

    a: list[Part]
    b: str


class ArrayRecord(BaseMessage):
    """Record holding a fixed-size array."""

    values: FixedArray(Int16, 4)  # type: ignore[valid-type]


class Percentage(BaseMessage):
    """Record with a bound tighter than its wire width."""

    value: UInt8 = Field(le=100)


SIMPLE_RECORD_BYTES = bytes(
    [2, 8, 1, 7, 6, 0, 0, 0, 65, 66, 67, 48, 49, 50, 4, 0, 0, 0, 1, 0, 0, 1]
)

COMPLEX_RECORD_FRAME = bytes(
    [
        38, 0, 0, 0,
        3, 0, 0, 0,
        3, 0, 0, 0, 65, 66, 67, 1,
        5, 0, 0, 0, 49, 33, 33, 33, 33, 1,
        4, 0, 0, 0, 50, 51, 52, 98, 0,
        3, 0, 0, 0, 69, 69, 101,
    ]
)


def simple_record() -> SimpleRecord:
    return SimpleRecord(a=2050, b=True, c=7, d="ABC012", e=[True, False, False, True])


def complex_record() -> ComplexRecord:
    return ComplexRecord(
        a=[
            Part(a="ABC", b=True),
            Part(a="1!!!!", b=True),
            Part(a="234b", b=False),
        ],
        b="EEe",
    )


class TestEncode:
    """Test encoding to bytes."""

    @pytest.mark.parametrize(
        "value,type_,expected",
        [
            (150, UInt8, [150]),
            (0xA234, UInt16, [0x34, 0xA2]),
            (0xCD012345, UInt32, [0x45, 0x23, 0x01, 0xCD]),
            (0xAB9876543210AABB, UInt64, [0xBB, 0xAA, 0x10, 0x32, 0x54, 0x76, 0x98, 0xAB]),
            (-100, Int8, [156]),
            (-30000, Int16, [0xD0, 0x8A]),
            (-2000000000, Int32, [0x00, 0x6C, 0xCA, 0x88]),
            (-9000000000000000000, Int64, [0x00, 0x00, 0x7C, 0x1D, 0xAF, 0x93, 0x19, 0x83]),
            (1005.75, Float32, [0x00, 0x70, 0x7B, 0x44]),
            (1005.75, Float64, [0x00, 0x00, 0x00, 0x00, 0x00, 0x6E, 0x8F, 0x40]),
        ],
    )
    def test_scalars(self, value: object, type_: object, expected: list[int]) -> None:
        assert encode(value, type_) == bytes(expected)

    def test_inferred_scalars(self) -> None:
        """bool and float need no explicit type."""
        assert encode(True) == b"\x01"
        assert encode(False) == b"\x00"
        assert encode(1005.75) == bytes([0x00, 0x00, 0x00, 0x00, 0x00, 0x6E, 0x8F, 0x40])

    def test_string(self) -> None:
        assert encode("") == b"\x00\x00\x00\x00"
        assert encode("Hello, World!") == b"\x0d\x00\x00\x00Hello, World!"

    def test_bytes_match_uint8_sequence(self) -> None:
        """Blobs are laid out exactly like a sequence of uint8."""
        assert encode(b"\x01\x02\x03") == b"\x03\x00\x00\x00\x01\x02\x03"
        assert encode(b"\x01\x02\x03") == encode([1, 2, 3], list[UInt8])
        assert encode(bytearray(b"\x01\x02\x03"), bytes) == encode(b"\x01\x02\x03")

    def test_record_has_no_prefix(self) -> None:
        """Records are their fields back to back."""
        assert encode(Flags(enabled=True, level=7)) == b"\x01\x07"

    def test_simple_record(self) -> None:
        assert encode(simple_record()) == SIMPLE_RECORD_BYTES

    def test_complex_record(self) -> None:
        assert encode(complex_record()) == COMPLEX_RECORD_FRAME[4:]

    def test_tuple_matches_record(self) -> None:
        value = (2050, True, 7, "ABC012", [True, False, False, True])
        type_ = tuple[Int16, Bool, UInt8, str, list[Bool]]
        assert encode(value, type_) == SIMPLE_RECORD_BYTES

    def test_empty_tuple(self) -> None:
        assert encode((), tuple[()]) == b""

    def test_sequence(self) -> None:
        assert encode([7, 1025, 33, 57], list[Int16]) == bytes(
            [4, 0, 0, 0, 7, 0, 1, 4, 33, 0, 57, 0]
        )
        assert encode([], list[Int16]) == b"\x00\x00\x00\x00"

    def test_homogeneous_tuple_is_sequence(self) -> None:
        assert encode((7, 1025), tuple[Int16, ...]) == encode([7, 1025], list[Int16])

    def test_fixed_array(self) -> None:
        assert encode([7, 1025, 33, 57], FixedArray(Int16, 4)) == bytes(
            [7, 0, 1, 4, 33, 0, 57, 0]
        )

    def test_nested_fixed_array(self) -> None:
        grid = [[1, 2], [3, 4]]
        assert encode(grid, FixedArray(FixedArray(UInt8, 2), 2)) == b"\x01\x02\x03\x04"

    def test_sequence_of_strings(self) -> None:
        assert encode(["a", "bc"], list[str]) == (
            b"\x02\x00\x00\x00" b"\x01\x00\x00\x00a" b"\x02\x00\x00\x00bc"
        )


class TestEncodeErrors:
    """Test encoding failures."""

    def test_bare_int_needs_width(self) -> None:
        with pytest.raises(RosmsgError, match="pass type_ explicitly") as exc_info:
            encode(5)
        assert exc_info.value.kind is ErrorKind.INVALID_SCHEMA

    def test_list_needs_type(self) -> None:
        with pytest.raises(RosmsgError) as exc_info:
            encode([1, 2])
        assert exc_info.value.kind is ErrorKind.INVALID_SCHEMA

    def test_generator_has_no_length(self) -> None:
        with pytest.raises(RosmsgError) as exc_info:
            encode((x for x in [1, 2]), list[Int16])
        assert exc_info.value.kind is ErrorKind.MISSING_LENGTH_ANNOTATION

    def test_out_of_range(self) -> None:
        with pytest.raises(RosmsgError) as exc_info:
            encode(300, UInt8)
        assert exc_info.value.kind is ErrorKind.INVALID_VALUE

    def test_wrong_value_type(self) -> None:
        with pytest.raises(RosmsgError, match="expected str"):
            encode(1, str)
        with pytest.raises(RosmsgError, match="expected bytes"):
            encode("abc", bytes)
        with pytest.raises(RosmsgError, match="expected Flags"):
            encode(Part(a="x", b=True), Flags)

    def test_fixed_array_wrong_length(self) -> None:
        with pytest.raises(RosmsgError, match="expected exactly 4 elements, got 3") as exc_info:
            encode([1, 2, 3], FixedArray(Int16, 4))
        assert exc_info.value.kind is ErrorKind.INVALID_VALUE

    def test_tuple_wrong_arity(self) -> None:
        with pytest.raises(RosmsgError, match="expected exactly 2 elements"):
            encode((1,), tuple[Int16, Int16])

    def test_string_is_not_a_fixed_array(self) -> None:
        with pytest.raises(RosmsgError, match="expected a sequence"):
            encode("abcd", FixedArray(UInt8, 4))

    @pytest.mark.parametrize(
        "value,type_",
        [
            ("abc", list[str]),
            (b"\x01\x02", list[UInt8]),
            (bytearray(b"\x01"), list[UInt8]),
            ({"a": "1"}, list[str]),
            ("ab", tuple[str, ...]),
        ],
    )
    def test_text_and_mappings_are_not_sequences(self, value: object, type_: object) -> None:
        with pytest.raises(RosmsgError, match="expected a sequence") as exc_info:
            encode(value, type_)
        assert exc_info.value.kind is ErrorKind.INVALID_VALUE

    def test_nested_text_is_not_a_sequence(self) -> None:
        with pytest.raises(RosmsgError) as exc_info:
            encode(["ok", "abc"], list[list[str]])
        assert exc_info.value.location() == "[0]"

    def test_error_location(self) -> None:
        """Failures report the field/element path they happened at."""
        record = SimpleRecord.model_construct(a=1, b=True, c=7, d="x", e=[True, 5])
        with pytest.raises(RosmsgError) as exc_info:
            encode(record)
        assert exc_info.value.kind is ErrorKind.INVALID_VALUE
        assert exc_info.value.location() == "e[1]"
        assert str(exc_info.value).startswith("e[1]: ")

    def test_nested_error_location(self) -> None:
        record = ComplexRecord.model_construct(
            a=[Part(a="ok", b=True), Part.model_construct(a=3, b=True)], b=""
        )
        with pytest.raises(RosmsgError) as exc_info:
            encode(record)
        assert exc_info.value.location() == "a[1].a"


class TestDecode:
    """Test decoding from enveloped bytes."""

    @pytest.mark.parametrize(
        "type_,data,expected",
        [
            (UInt8, [1, 0, 0, 0, 150], 150),
            (UInt16, [2, 0, 0, 0, 0x34, 0xA2], 0xA234),
            (UInt32, [4, 0, 0, 0, 0x45, 0x23, 0x01, 0xCD], 0xCD012345),
            (
                UInt64,
                [8, 0, 0, 0, 0xBB, 0xAA, 0x10, 0x32, 0x54, 0x76, 0x98, 0xAB],
                0xAB9876543210AABB,
            ),
            (Int8, [1, 0, 0, 0, 156], -100),
            (Int16, [2, 0, 0, 0, 0xD0, 0x8A], -30000),
            (Int32, [4, 0, 0, 0, 0x00, 0x6C, 0xCA, 0x88], -2000000000),
            (
                Int64,
                [8, 0, 0, 0, 0x00, 0x00, 0x7C, 0x1D, 0xAF, 0x93, 0x19, 0x83],
                -9000000000000000000,
            ),
            (Float32, [4, 0, 0, 0, 0x00, 0x70, 0x7B, 0x44], 1005.75),
            (Float64, [8, 0, 0, 0, 0x00, 0x00, 0x00, 0x00, 0x00, 0x6E, 0x8F, 0x40], 1005.75),
            (Bool, [1, 0, 0, 0, 1], True),
            (Bool, [1, 0, 0, 0, 0], False),
            (Bool, [1, 0, 0, 0, 2], True),
        ],
    )
    def test_scalars(self, type_: object, data: list[int], expected: object) -> None:
        assert decode(type_, bytes(data)) == expected

    def test_text_input(self) -> None:
        """str input is decoded as its UTF-8 bytes."""
        assert decode(Bool, "\x01\x00\x00\x00\x01") is True
        assert decode(str, "\x11\x00\x00\x00\x0d\x00\x00\x00Hello, World!") == "Hello, World!"

    def test_string(self, hello_world_frame: bytes) -> None:
        assert decode(str, bytes([4, 0, 0, 0, 0, 0, 0, 0])) == ""
        assert decode(str, hello_world_frame) == "Hello, World!"

    def test_bytes(self) -> None:
        assert decode(bytes, b"\x06\x00\x00\x00\x02\x00\x00\x00\xff\xfe") == b"\xff\xfe"

    def test_fixed_array(self) -> None:
        data = bytes([8, 0, 0, 0, 7, 0, 1, 4, 33, 0, 57, 0])
        assert decode(FixedArray(Int16, 4), data) == [7, 1025, 33, 57]
        assert decode(FixedArray(Int16, 4), "\x08\x00\x00\x00\x07\x00\x01\x04 \x00A\x00") == [
            7,
            1025,
            32,
            65,
        ]

    def test_array_record(self) -> None:
        data = bytes([8, 0, 0, 0, 7, 0, 1, 4, 33, 0, 57, 0])
        assert decode(ArrayRecord, data) == ArrayRecord(values=[7, 1025, 33, 57])

    def test_sequence(self) -> None:
        data = bytes([12, 0, 0, 0, 4, 0, 0, 0, 7, 0, 1, 4, 33, 0, 57, 0])
        assert decode(list[Int16], data) == [7, 1025, 33, 57]

    def test_homogeneous_tuple(self) -> None:
        """tuple[T, ...] decodes back to a tuple."""
        data = encode_framed((7, 1025), tuple[Int16, ...])
        assert decode(tuple[Int16, ...], data) == (7, 1025)
        assert decode(list[Int16], data) == [7, 1025]

    def test_tuple(self) -> None:
        data = bytes([14, 0, 0, 0, 2, 8, 1, 7, 6, 0, 0, 0, 65, 66, 67, 48, 49, 50])
        assert decode(tuple[Int16, Bool, UInt8, str], data) == (2050, True, 7, "ABC012")

    def test_simple_record(self) -> None:
        data = bytes([22, 0, 0, 0]) + SIMPLE_RECORD_BYTES
        assert decode(SimpleRecord, data) == simple_record()

    def test_complex_record(self) -> None:
        assert decode(ComplexRecord, COMPLEX_RECORD_FRAME) == complex_record()

    def test_framed_round_trip(self) -> None:
        assert encode_framed(complex_record()) == COMPLEX_RECORD_FRAME
        assert decode(SimpleRecord, encode_framed(simple_record())) == simple_record()

    def test_record_fields_validated(self) -> None:
        """Decoded records go through pydantic validation."""
        with pytest.raises(RosmsgError, match="failed to construct Percentage") as exc_info:
            decode(Percentage, b"\x01\x00\x00\x00\xc8")
        assert exc_info.value.kind is ErrorKind.INVALID_VALUE


class TestDecodeErrors:
    """Test decoding failures."""

    def test_empty_input(self) -> None:
        with pytest.raises(RosmsgError) as exc_info:
            decode(UInt8, b"")
        assert exc_info.value.kind is ErrorKind.END_OF_BUFFER

    def test_truncated_scalar(self) -> None:
        with pytest.raises(RosmsgError) as exc_info:
            decode(UInt32, bytes([4, 0, 0, 0, 1, 2]))
        assert exc_info.value.kind is ErrorKind.END_OF_BUFFER

    def test_truncated_string(self) -> None:
        with pytest.raises(RosmsgError) as exc_info:
            decode(str, bytes([6, 0, 0, 0, 10, 0, 0, 0, 65, 66]))
        assert exc_info.value.kind is ErrorKind.END_OF_BUFFER

    def test_invalid_utf8(self) -> None:
        with pytest.raises(RosmsgError) as exc_info:
            decode(str, b"\x06\x00\x00\x00\x02\x00\x00\x00\xff\xfe")
        assert exc_info.value.kind is ErrorKind.BAD_TEXT

    def test_error_location(self) -> None:
        """The second part's string runs past the end of the data."""
        with pytest.raises(RosmsgError) as exc_info:
            decode(ComplexRecord, COMPLEX_RECORD_FRAME[:22])
        assert exc_info.value.kind is ErrorKind.END_OF_BUFFER
        assert exc_info.value.location() == "a[1].a"

    def test_lenient_length(self) -> None:
        """By default the envelope length is not checked for non-map values."""
        assert decode(UInt8, bytes([2, 0, 0, 0, 1, 2])) == 1
        assert decode(UInt8, bytes([1, 0, 0, 0, 1, 9])) == 1

    def test_strict_length_mismatch(self) -> None:
        strict = DecoderConfig(strict=True)
        with pytest.raises(RosmsgError, match="envelope declared 2 bytes but 1 were decoded") as exc_info:
            decode(UInt8, bytes([2, 0, 0, 0, 1, 2]), config=strict)
        assert exc_info.value.kind is ErrorKind.UNDERFLOW

    def test_strict_trailing_bytes(self) -> None:
        strict = DecoderConfig(strict=True)
        with pytest.raises(RosmsgError, match="1 trailing bytes") as exc_info:
            decode(UInt8, bytes([1, 0, 0, 0, 1, 9]), config=strict)
        assert exc_info.value.kind is ErrorKind.UNDERFLOW

    def test_strict_exact(self) -> None:
        data = encode_framed(simple_record())
        assert decode(SimpleRecord, data, config=DecoderConfig(strict=True)) == simple_record()

    def test_max_length_envelope(self) -> None:
        config = DecoderConfig(max_length=2)
        with pytest.raises(RosmsgError) as exc_info:
            decode(str, b"\x08\x00\x00\x00\x04\x00\x00\x00abcd", config=config)
        assert exc_info.value.kind is ErrorKind.LENGTH_LIMIT

    def test_max_length_sequence_count(self) -> None:
        config = DecoderConfig(max_length=16)
        data = b"\x04\x00\x00\x00\xff\xff\xff\xff"
        with pytest.raises(RosmsgError) as exc_info:
            decode(list[UInt8], data, config=config)
        assert exc_info.value.kind is ErrorKind.LENGTH_LIMIT


class TestDecoderConfig:
    """Test DecoderConfig validation."""

    def test_defaults(self) -> None:
        config = DecoderConfig()
        assert config.strict is False
        assert config.max_length is None

    @pytest.mark.parametrize("max_length", [-1, 2**32])
    def test_invalid_max_length(self, max_length: int) -> None:
        with pytest.raises(ValueError, match="max_length"):
            DecoderConfig(max_length=max_length)
