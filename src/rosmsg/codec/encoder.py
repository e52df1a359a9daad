"""ROSMSG encoder.

This module provides the Encoder that walks a compiled shape alongside a
value and writes the matching bytes, plus the encode() entry points. The
output carries no leading envelope length; see rosmsg.framing for that.
"""

from __future__ import annotations

import io
from collections.abc import Mapping
from typing import Any, BinaryIO

from structlog import get_logger

from ..exceptions import ErrorKind, RosmsgError, UnsupportedCategory
from .maps import encode_map
from .primitives import PrimitiveWriter
from .schema import (
    ArrayShape,
    BlobShape,
    MapShape,
    ScalarShape,
    SequenceShape,
    Shape,
    StructShape,
    TextShape,
    TupleShape,
    infer_type,
    shape_of,
)

logger = get_logger()


class Encoder:
    """Encodes one top-level value into a binary stream.

    An Encoder is meant for a single value: create it, call encode(), then
    take the stream back with into_inner().
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._writer = PrimitiveWriter(stream)

    @property
    def written(self) -> int:
        return self._writer.written

    def into_inner(self) -> BinaryIO:
        """Return the underlying stream."""
        return self._writer.into_inner()

    def encode(self, value: Any, shape: Shape) -> None:
        """Encode ``value`` as the top-level value of shape ``shape``.

        A string map is only accepted here, at the top level.
        """
        if isinstance(shape, MapShape):
            if not isinstance(value, Mapping):
                raise RosmsgError(
                    ErrorKind.INVALID_VALUE, f"expected a mapping, got {type(value).__name__}"
                )
            encode_map(self._writer, value)
            return
        self._encode_value(value, shape)

    def _encode_value(self, value: Any, shape: Shape) -> None:
        writer = self._writer

        if isinstance(shape, ScalarShape):
            writer.write_scalar(shape.kind, value)
            return

        if isinstance(shape, TextShape):
            if not isinstance(value, str):
                raise RosmsgError(
                    ErrorKind.INVALID_VALUE, f"expected str, got {type(value).__name__}"
                )
            writer.write_text(value)
            return

        if isinstance(shape, BlobShape):
            if not isinstance(value, (bytes, bytearray, memoryview)):
                raise RosmsgError(
                    ErrorKind.INVALID_VALUE, f"expected bytes, got {type(value).__name__}"
                )
            writer.write_blob(bytes(value))
            return

        if isinstance(shape, StructShape):
            if not isinstance(value, shape.model):
                raise RosmsgError(
                    ErrorKind.INVALID_VALUE,
                    f"expected {shape.model.__name__}, got {type(value).__name__}",
                )
            for field in shape.fields:
                self._encode_member(getattr(value, field.name), field.shape, field.name)
            return

        if isinstance(shape, TupleShape):
            self._encode_fixed(value, shape.items)
            return

        if isinstance(shape, ArrayShape):
            self._encode_fixed(value, [shape.item] * shape.length)
            return

        if isinstance(shape, SequenceShape):
            _reject_non_sequence(value)
            try:
                count = len(value)
            except TypeError as err:
                raise RosmsgError(
                    ErrorKind.MISSING_LENGTH_ANNOTATION,
                    f"the length of a {type(value).__name__} is not known up front",
                ) from err
            writer.write_length(count)
            written = 0
            for index, item in enumerate(value):
                self._encode_member(item, shape.item, index)
                written += 1
            if written != count:
                raise RosmsgError(
                    ErrorKind.INVALID_VALUE,
                    f"sequence announced {count} elements but produced {written}",
                )
            return

        if isinstance(shape, MapShape):
            raise RosmsgError.unsupported(UnsupportedCategory.NESTED_MAP)

        raise RosmsgError(ErrorKind.INVALID_SCHEMA, f"unknown shape {shape!r}")

    def _encode_fixed(self, value: Any, shapes: list[Shape] | tuple[Shape, ...]) -> None:
        _reject_non_sequence(value)
        if not hasattr(value, "__len__"):
            raise RosmsgError(
                ErrorKind.INVALID_VALUE, f"expected a sequence, got {type(value).__name__}"
            )
        if len(value) != len(shapes):
            raise RosmsgError(
                ErrorKind.INVALID_VALUE,
                f"expected exactly {len(shapes)} elements, got {len(value)}",
            )
        for index, (item, item_shape) in enumerate(zip(value, shapes)):
            self._encode_member(item, item_shape, index)

    def _encode_member(self, value: Any, shape: Shape, step: str | int) -> None:
        try:
            self._encode_value(value, shape)
        except RosmsgError as err:
            err.add_context(step)
            raise


def _reject_non_sequence(value: Any) -> None:
    # Text, blobs and mappings are iterable but never element sequences
    if isinstance(value, (str, bytes, bytearray, memoryview, Mapping)):
        raise RosmsgError(
            ErrorKind.INVALID_VALUE, f"expected a sequence, got {type(value).__name__}"
        )


def encode_to_writer(value: Any, writer: BinaryIO, type_: Any = None) -> None:
    """Encode a value into a binary stream, without an envelope length.

    Args:
        value: Value to encode
        writer: Binary stream to write to (anything with ``write(bytes)``)
        type_: Annotation describing the value; inferred for messages, str,
            bytes, bool, float and string mappings

    Raises:
        RosmsgError: INVALID_SCHEMA, UNSUPPORTED_CATEGORY, INVALID_VALUE,
            MISSING_LENGTH_ANNOTATION or IO
    """
    shape = shape_of(type_ if type_ is not None else infer_type(value))
    encoder = Encoder(writer)
    encoder.encode(value, shape)
    logger.debug("rosmsg value encoded", shape=shape.describe(), size=encoder.written)


def encode(value: Any, type_: Any = None) -> bytes:
    """Encode a value to ROSMSG bytes, without an envelope length.

    Top-level string maps already carry their own length prefix, so their
    encoding is self-framing. Every other value needs an envelope before it
    can be decoded; use rosmsg.framing.encode_framed for that.

    Args:
        value: Value to encode
        type_: Annotation describing the value (see encode_to_writer)

    Returns:
        Encoded bytes

    Examples:
        ```python
        from rosmsg import UInt32, encode

        encode("Hello, World!")      # b"\\x0d\\x00\\x00\\x00Hello, World!"
        encode(0xCD012345, UInt32)   # b"\\x45\\x23\\x01\\xcd"
        ```
    """
    buffer = io.BytesIO()
    encode_to_writer(value, buffer, type_)
    return buffer.getvalue()
