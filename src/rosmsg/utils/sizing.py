"""Message size calculation utilities.

This module provides functions to calculate the encoded size of values
without actually encoding them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from ..codec.primitives import LENGTH_SIZE
from ..codec.schema import (
    ArrayShape,
    BlobShape,
    MapShape,
    MessageSchema,
    SequenceShape,
    Shape,
    StructShape,
    TextShape,
    TupleShape,
    infer_type,
    shape_of,
)
from ..exceptions import ErrorKind, RosmsgError


def encoded_size(value: Any, type_: Any = None) -> int:
    """Calculate the size in bytes of ``encode(value, type_)``.

    The envelope length is not included; add 4 for a framed value (except
    for string maps, which carry their own prefix and are counted with it).

    Args:
        value: Value to measure
        type_: Annotation describing the value (see rosmsg.encode)

    Returns:
        Size in bytes

    Example:
        >>> class Status(BaseMessage):
        ...     vehicle_id: UInt8
        ...     name: str
        >>> encoded_size(Status(vehicle_id=42, name="auv"))
        8  # 1 byte + 4 byte length + 3 bytes
    """
    shape = shape_of(type_ if type_ is not None else infer_type(value))
    if isinstance(shape, MapShape):
        return LENGTH_SIZE + sum(
            LENGTH_SIZE + len(f"{key}={item}".encode("utf-8")) for key, item in value.items()
        )
    return _size_of(shape, value)


def fixed_size(type_: Any) -> int | None:
    """Return the encoded size of a type if it does not depend on the value.

    Example:
        >>> fixed_size(Pose)
        56
        >>> fixed_size(str) is None
        True
    """
    return shape_of(type_).fixed_size()


def field_sizes(message: BaseModel) -> dict[str, int]:
    """Get the encoded size in bytes of each field of a message.

    Example:
        >>> field_sizes(Status(vehicle_id=42, name="auv"))
        {'vehicle_id': 1, 'name': 7}
    """
    schema = MessageSchema.from_model(type(message))
    return {
        field.name: _size_of(field.shape, getattr(message, field.name)) for field in schema.fields
    }


def _size_of(shape: Shape, value: Any) -> int:
    if isinstance(shape, TupleShape):
        _check_arity(value, len(shape.items))
    elif isinstance(shape, ArrayShape):
        _check_arity(value, shape.length)

    size = shape.fixed_size()
    if size is not None:
        return size

    if isinstance(shape, TextShape):
        return LENGTH_SIZE + len(value.encode("utf-8"))
    if isinstance(shape, BlobShape):
        return LENGTH_SIZE + len(value)
    if isinstance(shape, StructShape):
        return sum(_size_of(field.shape, getattr(value, field.name)) for field in shape.fields)
    if isinstance(shape, TupleShape):
        return sum(_size_of(item_shape, item) for item_shape, item in zip(shape.items, value))
    if isinstance(shape, ArrayShape):
        return sum(_size_of(shape.item, item) for item in value)
    if isinstance(shape, SequenceShape):
        return LENGTH_SIZE + sum(_size_of(shape.item, item) for item in value)
    raise RosmsgError(ErrorKind.INVALID_SCHEMA, f"cannot size {shape.describe()} here")


def _check_arity(value: Any, expected: int) -> None:
    if len(value) != expected:
        raise RosmsgError(
            ErrorKind.INVALID_VALUE, f"expected exactly {expected} elements, got {len(value)}"
        )
