"""ROSMSG binary codec.

This module provides encoding and decoding of typed values to and from the
tag-free, little-endian ROSMSG wire format.
"""

from __future__ import annotations

from .decoder import Decoder, decode, decode_from_reader
from .encoder import Encoder, encode, encode_to_writer
from .primitives import PrimitiveReader, PrimitiveWriter, ScalarKind
from .schema import FieldSchema, MessageSchema, Shape, shape_of

__all__ = [
    "encode",
    "encode_to_writer",
    "decode",
    "decode_from_reader",
    "Encoder",
    "Decoder",
    "PrimitiveReader",
    "PrimitiveWriter",
    "ScalarKind",
    "MessageSchema",
    "FieldSchema",
    "Shape",
    "shape_of",
]
