"""Pydantic message modeling for rosmsg.

This module provides the BaseMessage class and the field types used to
declare ROSMSG messages.
"""

from __future__ import annotations

from .base import BaseMessage
from .fields import (
    Bool,
    Char,
    CharMarker,
    FixedArray,
    FixedLength,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Scalar,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)

__all__ = [
    "BaseMessage",
    "Bool",
    "Char",
    "CharMarker",
    "FixedArray",
    "FixedLength",
    "Float32",
    "Float64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Scalar",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
]
