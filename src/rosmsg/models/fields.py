"""Field type aliases and helpers.

This module provides ``Annotated`` aliases that fix the wire width of a
field, plus helpers for fixed-size arrays. Integer aliases also carry the
pydantic bounds of their width so out-of-range values are caught when a
message is constructed rather than when it is encoded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import Field

from ..codec.primitives import ScalarKind


@dataclass(frozen=True)
class Scalar:
    """Annotation marker selecting the wire type of a numeric field."""

    kind: ScalarKind


@dataclass(frozen=True)
class FixedLength:
    """Annotation marker turning a list into a fixed-size array of ``length`` elements."""

    length: int

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError(f"length must be >= 0, got {self.length}")


@dataclass(frozen=True)
class CharMarker:
    """Annotation marker for single-character values, which ROSMSG rejects."""


Bool = Annotated[bool, Scalar(ScalarKind.BOOL)]
Int8 = Annotated[int, Scalar(ScalarKind.INT8), Field(ge=-(2**7), le=2**7 - 1)]
Int16 = Annotated[int, Scalar(ScalarKind.INT16), Field(ge=-(2**15), le=2**15 - 1)]
Int32 = Annotated[int, Scalar(ScalarKind.INT32), Field(ge=-(2**31), le=2**31 - 1)]
Int64 = Annotated[int, Scalar(ScalarKind.INT64), Field(ge=-(2**63), le=2**63 - 1)]
UInt8 = Annotated[int, Scalar(ScalarKind.UINT8), Field(ge=0, le=2**8 - 1)]
UInt16 = Annotated[int, Scalar(ScalarKind.UINT16), Field(ge=0, le=2**16 - 1)]
UInt32 = Annotated[int, Scalar(ScalarKind.UINT32), Field(ge=0, le=2**32 - 1)]
UInt64 = Annotated[int, Scalar(ScalarKind.UINT64), Field(ge=0, le=2**64 - 1)]
Float32 = Annotated[float, Scalar(ScalarKind.FLOAT32)]
Float64 = Annotated[float, Scalar(ScalarKind.FLOAT64)]

# Declaring a field as Char is allowed; encoding or decoding it is not.
Char = Annotated[str, CharMarker()]


def FixedArray(item_type: Any, length: int) -> Any:
    """Create a fixed-size array type.

    Fixed-size arrays are encoded as their elements back to back, with no
    count on the wire. The length is also enforced by pydantic.

    Args:
        item_type: Element type (any supported annotation)
        length: Exact number of elements

    Returns:
        An ``Annotated[list[item_type], ...]`` type usable as a field annotation

    Example:
        >>> class PoseWithCovariance(BaseMessage):
        ...     pose: Pose
        ...     covariance: FixedArray(Float64, 36)
    """
    return Annotated[
        list[item_type],  # type: ignore[valid-type]
        FixedLength(length),
        Field(min_length=length, max_length=length),
    ]
