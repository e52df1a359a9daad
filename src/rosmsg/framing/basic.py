"""Envelope framing.

Every independently transmitted value is preceded by one 4-byte
little-endian length counting the bytes after it. This module adds and
removes that envelope, and reads one enveloped frame off a stream for
transports that need to split messages before decoding them.
"""

from __future__ import annotations

import io
from typing import Any, BinaryIO

from structlog import get_logger

from ..codec.encoder import Encoder, encode
from ..codec.primitives import LENGTH_FORMAT, LENGTH_SIZE, PrimitiveReader, PrimitiveWriter
from ..codec.schema import MapShape, infer_type, shape_of
from ..exceptions import ErrorKind, RosmsgError

logger = get_logger()


def encode_framed(value: Any, type_: Any = None) -> bytes:
    """Encode a value preceded by its envelope length.

    A top-level string map already carries its own length prefix, which is
    its envelope, so it is returned exactly as encode() produces it.

    Args:
        value: Value to encode
        type_: Annotation describing the value (see rosmsg.encode)

    Returns:
        Envelope length followed by the encoded value

    Example:
        >>> encode_framed([7, 1025, 33, 57], list[Int16]).hex()
        '0c000000040000000700010421003900'
    """
    shape = shape_of(type_ if type_ is not None else infer_type(value))
    if isinstance(shape, MapShape):
        return encode(value, shape)
    return frame_message(encode(value, shape))


def encode_framed_to_writer(value: Any, writer: BinaryIO, type_: Any = None) -> None:
    """Stream form of encode_framed().

    The value is buffered in memory first since its length has to be written
    ahead of it.
    """
    shape = shape_of(type_ if type_ is not None else infer_type(value))
    if isinstance(shape, MapShape):
        Encoder(writer).encode(value, shape)
        return
    primitives = PrimitiveWriter(writer)
    with primitives.length_prefixed() as inner:
        Encoder(inner.into_inner()).encode(value, shape)
    logger.debug("rosmsg frame written", shape=shape.describe(), size=primitives.written)


def frame_message(payload: bytes) -> bytes:
    """Prepend the 4-byte envelope length to an already encoded payload.

    Example:
        >>> frame_message(b"Hello")
        b'\\x05\\x00\\x00\\x00Hello'
    """
    buffer = io.BytesIO()
    PrimitiveWriter(buffer).write_blob(payload)
    return buffer.getvalue()


def unframe_message(framed: bytes, *, validate_length: bool = True) -> bytes:
    """Strip the envelope length from a frame and return the payload.

    Args:
        framed: Envelope length followed by the payload
        validate_length: If True, the payload must be exactly as long as the
            envelope says

    Raises:
        RosmsgError: END_OF_BUFFER if the frame is shorter than a length
            field, UNDERFLOW on a length mismatch

    Example:
        >>> unframe_message(frame_message(b"Hello"))
        b'Hello'
    """
    if len(framed) < LENGTH_SIZE:
        raise RosmsgError(
            ErrorKind.END_OF_BUFFER, f"frame too short for an envelope: {len(framed)} bytes"
        )
    (expected,) = LENGTH_FORMAT.unpack(framed[:LENGTH_SIZE])
    payload = framed[LENGTH_SIZE:]
    if validate_length and len(payload) != expected:
        raise RosmsgError(
            ErrorKind.UNDERFLOW,
            f"length mismatch: envelope says {expected} bytes, got {len(payload)} bytes",
        )
    return payload


def read_frame(reader: BinaryIO, *, max_length: int | None = None) -> bytes:
    """Read one complete frame off a stream and return its payload.

    Args:
        reader: Binary stream positioned at an envelope length
        max_length: Reject envelopes announcing more than this many bytes

    Raises:
        RosmsgError: END_OF_BUFFER if the stream ends mid-frame,
            LENGTH_LIMIT if the envelope is over ``max_length``
    """
    payload = PrimitiveReader(reader, max_length=max_length).read_blob()
    logger.debug("rosmsg frame read", size=len(payload))
    return payload
