"""rosmsg: ROSMSG Binary Codec

A Python library for the compact, tag-free, little-endian binary encoding
ROS peers use for message payloads and connection headers. The bytes carry no
type information, so every decode is told what shape to expect.

Key Features:
- Pydantic-based message modeling
- Fixed-width scalars, length-prefixed text and blobs, records, tuples,
  fixed-size arrays and variable-length sequences
- key=value connection header blocks
- Pure Python implementation

Quick Start:
    >>> from rosmsg import BaseMessage, Float64, decode, encode_framed
    >>>
    >>> class Point(BaseMessage):
    ...     x: Float64
    ...     y: Float64
    ...     z: Float64
    >>>
    >>> data = encode_framed(Point(x=1.0, y=2.0, z=3.0))
    >>> decode(Point, data)
    Point(x=1.0, y=2.0, z=3.0)
"""

from __future__ import annotations

__version__ = "0.2.0"

from .codec import decode, decode_from_reader, encode, encode_to_writer
from .config import DecoderConfig
from .exceptions import ErrorKind, RosmsgError, UnsupportedCategory
from .framing import (
    encode_framed,
    encode_framed_to_writer,
    frame_message,
    read_frame,
    unframe_message,
)
from .header import ConnectionHeader, decode_header, encode_header, read_header
from .models import (
    BaseMessage,
    Bool,
    Char,
    FixedArray,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from .utils import encoded_size, field_sizes, fixed_size

__all__ = [
    # Core API
    "BaseMessage",
    "encode",
    "encode_to_writer",
    "decode",
    "decode_from_reader",
    "DecoderConfig",
    # Field types
    "Bool",
    "Char",
    "FixedArray",
    "Float32",
    "Float64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    # Exceptions
    "RosmsgError",
    "ErrorKind",
    "UnsupportedCategory",
    # Framing
    "encode_framed",
    "encode_framed_to_writer",
    "frame_message",
    "unframe_message",
    "read_frame",
    # Connection headers
    "ConnectionHeader",
    "encode_header",
    "decode_header",
    "read_header",
    # Sizing
    "encoded_size",
    "field_sizes",
    "fixed_size",
    # Version
    "__version__",
]
