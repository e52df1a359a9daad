"""ROSMSG decoder.

This module provides the Decoder that rebuilds a value from bytes, driven by
the shape the caller expects, plus the decode() entry points. Every entry
point first reads the envelope length that precedes a transmitted value.
"""

from __future__ import annotations

import io
from collections.abc import Iterable, Iterator
from typing import Any, BinaryIO

from pydantic import ValidationError
from structlog import get_logger

from ..config import DecoderConfig
from ..exceptions import ErrorKind, RosmsgError, UnsupportedCategory
from .maps import decode_map
from .primitives import PrimitiveReader
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
    shape_of,
)

logger = get_logger()


class ElementCursor(Iterator[Any]):
    """Decodes the members of an aggregate or sequence one at a time.

    The cursor yields one value per shape in ``shapes`` and then reports
    end-of-sequence; running out of elements is never an error.
    """

    def __init__(self, decoder: Decoder, shapes: Iterable[Shape], remaining: int) -> None:
        self._decoder = decoder
        self._shapes = iter(shapes)
        self._remaining = remaining
        self._index = 0

    def __next__(self) -> Any:
        if self._remaining == 0:
            raise StopIteration
        self._remaining -= 1
        index = self._index
        self._index += 1
        return self._decoder._decode_member(next(self._shapes), index)


class Decoder:
    """Decodes one top-level value from a binary stream.

    Args:
        stream: Binary stream positioned after the envelope length
        length: The envelope length, used as the byte budget of a top-level map
        config: Decoding options
    """

    def __init__(
        self, stream: BinaryIO, length: int, config: DecoderConfig | None = None
    ) -> None:
        self.config = config or DecoderConfig()
        self.length = length
        self._reader = PrimitiveReader(stream, max_length=self.config.max_length)

    @property
    def consumed(self) -> int:
        """Bytes consumed after the envelope length."""
        return self._reader.consumed

    def into_inner(self) -> BinaryIO:
        """Return the underlying stream."""
        return self._reader.into_inner()

    def decode(self, shape: Shape) -> Any:
        """Decode the top-level value.

        Raises:
            RosmsgError: UNDERFLOW in strict mode if the value does not use
                exactly ``length`` bytes
        """
        if isinstance(shape, MapShape):
            value: Any = decode_map(self._reader, self.length)
        else:
            value = self._decode_value(shape)

        if self.config.strict and self.consumed != self.length:
            logger.warning(
                "rosmsg payload length mismatch", expected=self.length, consumed=self.consumed
            )
            raise RosmsgError(
                ErrorKind.UNDERFLOW,
                f"envelope declared {self.length} bytes but {self.consumed} were decoded",
            )
        return value

    def _decode_value(self, shape: Shape) -> Any:
        reader = self._reader

        if isinstance(shape, ScalarShape):
            return reader.read_scalar(shape.kind)

        if isinstance(shape, TextShape):
            return reader.read_text()

        if isinstance(shape, BlobShape):
            return reader.read_blob()

        if isinstance(shape, StructShape):
            fields = shape.fields
            values = {field.name: self._decode_member(field.shape, field.name) for field in fields}
            try:
                return shape.model.model_validate(values)
            except ValidationError as err:
                raise RosmsgError(
                    ErrorKind.INVALID_VALUE,
                    f"failed to construct {shape.model.__name__}: {err}",
                ) from err

        if isinstance(shape, TupleShape):
            return tuple(ElementCursor(self, shape.items, len(shape.items)))

        if isinstance(shape, ArrayShape):
            return list(ElementCursor(self, _repeat(shape.item), shape.length))

        if isinstance(shape, SequenceShape):
            count = reader.read_length()
            return shape.container(ElementCursor(self, _repeat(shape.item), count))

        if isinstance(shape, MapShape):
            raise RosmsgError.unsupported(UnsupportedCategory.NESTED_MAP)

        raise RosmsgError(ErrorKind.INVALID_SCHEMA, f"unknown shape {shape!r}")

    def _decode_member(self, shape: Shape, step: str | int) -> Any:
        try:
            return self._decode_value(shape)
        except RosmsgError as err:
            err.add_context(step)
            raise


def _repeat(shape: Shape) -> Iterator[Shape]:
    while True:
        yield shape


def decode_from_reader(
    target: Any, reader: BinaryIO, *, config: DecoderConfig | None = None
) -> Any:
    """Decode one enveloped value from a binary stream.

    Reads the leading 4-byte length, then decodes the value as ``target``.
    The stream is left positioned right after the bytes the value used.

    Args:
        target: Annotation of the expected value (message class, width alias,
            ``str``, ``list[...]``, ``dict[str, str]``, ...)
        reader: Binary stream (anything with ``read(n)``)
        config: Decoding options

    Returns:
        The decoded value

    Raises:
        RosmsgError: Any decode failure; no partial value is ever returned
    """
    config = config or DecoderConfig()
    shape = shape_of(target)
    length = PrimitiveReader(reader, max_length=config.max_length).read_length()
    logger.debug("rosmsg envelope read", shape=shape.describe(), length=length)
    return Decoder(reader, length, config).decode(shape)


def decode(
    target: Any,
    data: bytes | bytearray | memoryview | str,
    *,
    config: DecoderConfig | None = None,
) -> Any:
    """Decode one enveloped value from bytes.

    Text input is treated as its UTF-8 bytes, for call sites that receive
    header blocks as text.

    Args:
        target: Annotation of the expected value
        data: Envelope length followed by the encoded value
        config: Decoding options; in strict mode trailing bytes after the
            envelope are rejected as well

    Returns:
        The decoded value

    Raises:
        RosmsgError: Any decode failure

    Examples:
        ```python
        from rosmsg import decode

        decode(str, b"\\x11\\x00\\x00\\x00\\x0d\\x00\\x00\\x00Hello, World!")
        decode(dict[str, str], b"\\x0b\\x00\\x00\\x00\\x07\\x00\\x00\\x00abc=123")
        ```
    """
    payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    config = config or DecoderConfig()
    stream = io.BytesIO(payload)
    value = decode_from_reader(target, stream, config=config)

    trailing = len(payload) - stream.tell()
    if config.strict and trailing:
        raise RosmsgError(
            ErrorKind.UNDERFLOW, f"{trailing} trailing bytes after the envelope"
        )
    return value

