"""Byte-level reading and writing of ROSMSG primitives.

This module provides the fixed-width scalar and length-prefixed blob
operations every other layer is built on. All multi-byte values, including
length fields, are little-endian.
"""

from __future__ import annotations

import enum
import io
import struct
from contextlib import contextmanager
from typing import BinaryIO, Iterator

from ..exceptions import ErrorKind, RosmsgError

LENGTH_FORMAT = struct.Struct("<I")
LENGTH_SIZE = LENGTH_FORMAT.size
MAX_LENGTH = 0xFFFFFFFF


class ScalarKind(enum.Enum):
    """Fixed-width scalar types, valued by their name in ROS message definitions."""

    BOOL = "bool"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"

    @property
    def codec(self) -> struct.Struct:
        return _SCALAR_CODECS[self]

    @property
    def size(self) -> int:
        """Encoded width in bytes."""
        return self.codec.size

    @property
    def is_float(self) -> bool:
        return self in (ScalarKind.FLOAT32, ScalarKind.FLOAT64)

    @property
    def type_name(self) -> str:
        return self.value


_SCALAR_CODECS = {
    ScalarKind.BOOL: struct.Struct("<B"),
    ScalarKind.INT8: struct.Struct("<b"),
    ScalarKind.INT16: struct.Struct("<h"),
    ScalarKind.INT32: struct.Struct("<i"),
    ScalarKind.INT64: struct.Struct("<q"),
    ScalarKind.UINT8: struct.Struct("<B"),
    ScalarKind.UINT16: struct.Struct("<H"),
    ScalarKind.UINT32: struct.Struct("<I"),
    ScalarKind.UINT64: struct.Struct("<Q"),
    ScalarKind.FLOAT32: struct.Struct("<f"),
    ScalarKind.FLOAT64: struct.Struct("<d"),
}


class PrimitiveWriter:
    """Writes primitives to a binary stream.

    Example:
        >>> buffer = io.BytesIO()
        >>> writer = PrimitiveWriter(buffer)
        >>> writer.write_scalar(ScalarKind.UINT32, 0xCD012345)
        >>> buffer.getvalue()
        b'E#\\x01\\xcd'
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._written = 0

    @property
    def written(self) -> int:
        """Number of bytes written through this writer."""
        return self._written

    def into_inner(self) -> BinaryIO:
        """Return the underlying stream."""
        return self._stream

    def write_raw(self, data: bytes) -> None:
        """Write bytes as they are, without any prefix.

        Raises:
            RosmsgError: IO if the stream fails
        """
        try:
            self._stream.write(data)
        except OSError as err:
            raise RosmsgError(ErrorKind.IO, f"write failed: {err}") from err
        self._written += len(data)

    def write_scalar(self, kind: ScalarKind, value: object) -> None:
        """Write a fixed-width scalar.

        Args:
            kind: Scalar type to encode as
            value: bool for BOOL, int for integer kinds, int/float for float kinds

        Raises:
            RosmsgError: INVALID_VALUE if the value has the wrong type or does
                not fit the width
        """
        if kind is ScalarKind.BOOL:
            if not isinstance(value, bool):
                raise RosmsgError(
                    ErrorKind.INVALID_VALUE, f"expected bool, got {type(value).__name__}"
                )
            value = 1 if value else 0
        elif kind.is_float:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise RosmsgError(
                    ErrorKind.INVALID_VALUE, f"expected float, got {type(value).__name__}"
                )
        elif isinstance(value, bool) or not isinstance(value, int):
            raise RosmsgError(
                ErrorKind.INVALID_VALUE, f"expected int, got {type(value).__name__}"
            )

        try:
            data = kind.codec.pack(value)
        except (struct.error, OverflowError) as err:
            raise RosmsgError(
                ErrorKind.INVALID_VALUE, f"value {value!r} does not fit {kind.type_name}"
            ) from err
        self.write_raw(data)

    def write_length(self, length: int) -> None:
        """Write a u32 length or element count."""
        if not 0 <= length <= MAX_LENGTH:
            raise RosmsgError(
                ErrorKind.INVALID_VALUE, f"length {length} does not fit in a u32 length field"
            )
        self.write_raw(LENGTH_FORMAT.pack(length))

    def write_blob(self, data: bytes) -> None:
        """Write a length-prefixed byte blob."""
        self.write_length(len(data))
        self.write_raw(data)

    def write_text(self, value: str) -> None:
        """Write text as a length-prefixed UTF-8 blob."""
        try:
            data = value.encode("utf-8")
        except UnicodeEncodeError as err:
            raise RosmsgError(ErrorKind.INVALID_VALUE, f"text is not encodable: {err}") from err
        self.write_blob(data)

    @contextmanager
    def length_prefixed(self) -> Iterator[PrimitiveWriter]:
        """Buffer everything written to the yielded writer, then flush it as one blob.

        The length of the buffered bytes is only known once the block exits,
        so it is written ahead of them at that point. Nothing reaches the
        underlying stream if the block raises.

        Example:
            >>> with writer.length_prefixed() as inner:
            ...     inner.write_text("abc=123")
        """
        buffer = io.BytesIO()
        yield PrimitiveWriter(buffer)
        self.write_blob(buffer.getvalue())


class PrimitiveReader:
    """Reads primitives from a binary stream.

    The reader counts consumed bytes so callers can check them against an
    envelope length.
    """

    def __init__(self, stream: BinaryIO, max_length: int | None = None) -> None:
        self._stream = stream
        self._consumed = 0
        self._max_length = max_length

    @property
    def consumed(self) -> int:
        """Number of bytes read through this reader."""
        return self._consumed

    def into_inner(self) -> BinaryIO:
        """Return the underlying stream."""
        return self._stream

    def read_raw(self, num_bytes: int) -> bytes:
        """Read exactly ``num_bytes`` bytes.

        Raises:
            RosmsgError: END_OF_BUFFER if the stream ends first, IO if it fails
        """
        chunks = []
        remaining = num_bytes
        while remaining:
            try:
                chunk = self._stream.read(remaining)
            except OSError as err:
                raise RosmsgError(ErrorKind.IO, f"read failed: {err}") from err
            if not chunk:
                raise RosmsgError(
                    ErrorKind.END_OF_BUFFER,
                    f"need {num_bytes} bytes, only {num_bytes - remaining} available",
                )
            chunks.append(chunk)
            remaining -= len(chunk)
        self._consumed += num_bytes
        return b"".join(chunks)

    def read_scalar(self, kind: ScalarKind) -> bool | int | float:
        """Read a fixed-width scalar. Any non-zero byte decodes as True for BOOL."""
        (value,) = kind.codec.unpack(self.read_raw(kind.size))
        if kind is ScalarKind.BOOL:
            return value != 0
        return value

    def read_length(self) -> int:
        """Read a u32 length or element count.

        Raises:
            RosmsgError: LENGTH_LIMIT if the value exceeds the configured maximum
        """
        (length,) = LENGTH_FORMAT.unpack(self.read_raw(LENGTH_SIZE))
        if self._max_length is not None and length > self._max_length:
            raise RosmsgError(
                ErrorKind.LENGTH_LIMIT,
                f"declared length {length} exceeds the limit of {self._max_length}",
            )
        return length

    def read_blob(self) -> bytes:
        """Read a length-prefixed byte blob without validating it."""
        return self.read_raw(self.read_length())

    def read_text(self) -> str:
        """Read a length-prefixed UTF-8 blob.

        Raises:
            RosmsgError: BAD_TEXT if the bytes are not valid UTF-8
        """
        return decode_utf8(self.read_blob())


def decode_utf8(data: bytes) -> str:
    """Decode UTF-8, mapping failures to BAD_TEXT."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as err:
        raise RosmsgError(ErrorKind.BAD_TEXT, f"invalid UTF-8 data: {err}") from err
