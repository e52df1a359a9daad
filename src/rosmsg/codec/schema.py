"""Schema compilation for Pydantic models and type annotations.

This module turns type annotations into a small closed set of shape
descriptions (scalar, text, blob, struct, tuple, array, sequence, map) that
the encoder and decoder walk. Every annotation the wire format cannot
represent is rejected here, before any byte is produced or consumed.
"""

from __future__ import annotations

import enum
import types
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import BaseModel

from ..exceptions import ErrorKind, RosmsgError, UnsupportedCategory
from ..models.base import BaseMessage
from ..models.fields import CharMarker, FixedLength, Scalar
from .primitives import ScalarKind


class Shape:
    """Base class of all shape descriptions."""

    def describe(self) -> str:
        """Render the shape the way it would appear in a ROS message definition."""
        raise NotImplementedError

    def fixed_size(self) -> int | None:
        """Encoded size in bytes if it does not depend on the value, else None."""
        return None


@dataclass(frozen=True)
class ScalarShape(Shape):
    kind: ScalarKind

    def describe(self) -> str:
        return self.kind.type_name

    def fixed_size(self) -> int | None:
        return self.kind.size


@dataclass(frozen=True)
class TextShape(Shape):
    def describe(self) -> str:
        return "string"


@dataclass(frozen=True)
class BlobShape(Shape):
    """Raw bytes, encoded like a sequence of uint8."""

    def describe(self) -> str:
        return "uint8[]"


@dataclass(frozen=True)
class StructShape(Shape):
    """A BaseMessage record. Fields are resolved lazily so models may refer to themselves."""

    model: type[BaseModel]

    @property
    def fields(self) -> list[FieldSchema]:
        return MessageSchema.from_model(self.model).fields

    def describe(self) -> str:
        return getattr(self.model, "rosmsg_type", None) or self.model.__name__

    def fixed_size(self) -> int | None:
        return MessageSchema.from_model(self.model).fixed_size()


@dataclass(frozen=True)
class TupleShape(Shape):
    items: tuple[Shape, ...]

    def describe(self) -> str:
        return "(" + ", ".join(item.describe() for item in self.items) + ")"

    def fixed_size(self) -> int | None:
        return _sum_fixed(self.items)


@dataclass(frozen=True)
class ArrayShape(Shape):
    """Fixed-size array: ``length`` elements, no count on the wire."""

    item: Shape
    length: int

    def describe(self) -> str:
        return f"{self.item.describe()}[{self.length}]"

    def fixed_size(self) -> int | None:
        item_size = self.item.fixed_size()
        return None if item_size is None else item_size * self.length


@dataclass(frozen=True)
class SequenceShape(Shape):
    """Variable-length sequence: u32 element count, then the elements.

    ``container`` is the type decoded values are built as, list or tuple.
    """

    item: Shape
    container: type = list

    def describe(self) -> str:
        return f"{self.item.describe()}[]"


@dataclass(frozen=True)
class MapShape(Shape):
    """String-to-string map, only valid as the whole top-level value."""

    def describe(self) -> str:
        return "map<string, string>"


def _sum_fixed(shapes: tuple[Shape, ...] | list[Shape]) -> int | None:
    total = 0
    for shape in shapes:
        size = shape.fixed_size()
        if size is None:
            return None
        total += size
    return total


@dataclass(frozen=True)
class FieldSchema:
    """Schema information for a single message field.

    Attributes:
        name: Field name
        shape: Compiled wire shape of the field
    """

    name: str
    shape: Shape


class MessageSchema:
    """Schema information for an entire message.

    This class introspects a Pydantic model and compiles every field
    annotation into a shape. Schemas are cached per model class.

    Example:
        >>> schema = MessageSchema.from_model(Pose)
        >>> [(f.name, f.shape.describe()) for f in schema.fields]
        [('position', 'Point'), ('orientation', 'Quaternion')]
    """

    _cache: dict[type[BaseModel], MessageSchema] = {}

    def __init__(self, model_class: type[BaseModel]) -> None:
        """Initialize schema from a Pydantic model.

        Args:
            model_class: Pydantic model class to introspect
        """
        self.model_class = model_class
        self.fields: list[FieldSchema] = []
        self._introspect()

    @classmethod
    def from_model(cls, model_class: type[BaseModel]) -> MessageSchema:
        """Return the (cached) schema of a Pydantic model.

        Raises:
            RosmsgError: INVALID_SCHEMA or UNSUPPORTED_CATEGORY for fields the
                wire format cannot represent
        """
        schema = cls._cache.get(model_class)
        if schema is None:
            schema = cls(model_class)
            cls._cache[model_class] = schema
        return schema

    def _introspect(self) -> None:
        """Introspect the model and populate field schemas."""
        for field_name, field_info in self.model_class.model_fields.items():
            if field_info.annotation is None:
                raise RosmsgError(
                    ErrorKind.INVALID_SCHEMA, f"Field {field_name} has no type annotation"
                )
            try:
                shape = _compile(field_info.annotation, tuple(field_info.metadata))
                _reject_nested_map(shape)
            except RosmsgError as err:
                err.add_context(field_name)
                raise
            self.fields.append(FieldSchema(name=field_name, shape=shape))

    def fixed_size(self) -> int | None:
        """Encoded size in bytes if every field is fixed-size, else None."""
        return _sum_fixed([field.shape for field in self.fields])


def shape_of(annotation: Any) -> Shape:
    """Compile a type annotation into its wire shape.

    Args:
        annotation: A BaseMessage subclass, a width alias such as ``UInt32``,
            ``str``, ``bytes``, ``list[...]``, ``tuple[...]``,
            ``FixedArray(...)`` or ``dict[str, str]``

    Returns:
        The compiled shape. Nested message types are compiled as well.

    Raises:
        RosmsgError: INVALID_SCHEMA or UNSUPPORTED_CATEGORY, for the annotation
            itself or anything nested in it
    """
    shape = annotation if isinstance(annotation, Shape) else _compile(annotation, ())
    _resolve(shape, set())
    return shape


def _resolve(shape: Shape, seen: set[type[BaseModel]]) -> None:
    # Compile every nested record up front so an unsupported field deep in
    # the tree fails before the first byte is written or read
    if isinstance(shape, StructShape):
        if shape.model in seen:
            return
        seen.add(shape.model)
        for field in shape.fields:
            try:
                _resolve(field.shape, seen)
            except RosmsgError as err:
                err.add_context(field.name)
                raise
    elif isinstance(shape, TupleShape):
        for index, item in enumerate(shape.items):
            try:
                _resolve(item, seen)
            except RosmsgError as err:
                err.add_context(index)
                raise
    elif isinstance(shape, (ArrayShape, SequenceShape)):
        _resolve(shape.item, seen)


def _reject_nested_map(shape: Shape) -> None:
    if isinstance(shape, MapShape):
        raise RosmsgError.unsupported(UnsupportedCategory.NESTED_MAP)


def _compile(annotation: Any, metadata: tuple[Any, ...]) -> Shape:
    # Unwrap Annotated layers, collecting their metadata
    while get_origin(annotation) is Annotated:
        base, *extra = get_args(annotation)
        annotation = base
        metadata = tuple(extra) + metadata

    scalar = None
    fixed_length = None
    for item in metadata:
        if isinstance(item, CharMarker):
            raise RosmsgError.unsupported(UnsupportedCategory.CHAR)
        if isinstance(item, Scalar):
            scalar = item.kind
        elif isinstance(item, FixedLength):
            fixed_length = item.length

    if scalar is not None:
        return ScalarShape(scalar)

    if annotation is Any or annotation is object:
        raise RosmsgError.unsupported(UnsupportedCategory.ANY)

    origin = get_origin(annotation)
    args = get_args(annotation)

    # Optional[T], T | None and other unions
    if origin is Union or origin is types.UnionType:
        if type(None) in args:
            raise RosmsgError.unsupported(UnsupportedCategory.OPTIONAL, repr(annotation))
        raise RosmsgError.unsupported(UnsupportedCategory.UNION, repr(annotation))

    if fixed_length is not None:
        if origin is not list or len(args) != 1:
            raise RosmsgError(
                ErrorKind.INVALID_SCHEMA,
                f"FixedLength applies to list[...] annotations, not {annotation!r}",
            )
        return ArrayShape(_compile_item(args[0]), fixed_length)

    if origin is list:
        if len(args) != 1:
            raise RosmsgError(ErrorKind.INVALID_SCHEMA, "list needs an element type, e.g. list[Int32]")
        return SequenceShape(_compile_item(args[0]))

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return SequenceShape(_compile_item(args[0]), tuple)
        if args == ((),):
            args = ()
        return TupleShape(tuple(_compile_item(arg) for arg in args))

    if origin is dict or origin is Mapping:
        if args != (str, str):
            raise RosmsgError.unsupported(UnsupportedCategory.MAP_TYPES, repr(annotation))
        return MapShape()

    if origin is not None:
        raise RosmsgError(ErrorKind.INVALID_SCHEMA, f"unsupported type {annotation!r}")

    if annotation is bool:
        return ScalarShape(ScalarKind.BOOL)
    if annotation is float:
        return ScalarShape(ScalarKind.FLOAT64)
    if annotation is int:
        raise RosmsgError(
            ErrorKind.INVALID_SCHEMA,
            "integer fields need an explicit width, e.g. Int32 or UInt8",
        )
    if annotation is str:
        return TextShape()
    if annotation in (bytes, bytearray):
        return BlobShape()
    if annotation in (list, tuple, dict):
        raise RosmsgError(
            ErrorKind.INVALID_SCHEMA, f"{annotation.__name__} needs type parameters"
        )
    if isinstance(annotation, type):
        if issubclass(annotation, enum.Enum):
            raise RosmsgError.unsupported(UnsupportedCategory.UNION, annotation.__name__)
        if issubclass(annotation, BaseModel):
            return StructShape(annotation)

    raise RosmsgError(ErrorKind.INVALID_SCHEMA, f"unsupported type {annotation!r}")


def _compile_item(annotation: Any) -> Shape:
    shape = _compile(annotation, ())
    _reject_nested_map(shape)
    return shape


def infer_type(value: Any) -> Any:
    """Pick the annotation for a value encoded without an explicit type.

    Raises:
        RosmsgError: INVALID_SCHEMA when the type is ambiguous (ints, containers)
    """
    if isinstance(value, BaseMessage):
        return type(value)
    if isinstance(value, bool):
        return bool
    if isinstance(value, float):
        return float
    if isinstance(value, str):
        return str
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes
    if isinstance(value, Mapping):
        return dict[str, str]
    raise RosmsgError(
        ErrorKind.INVALID_SCHEMA,
        f"cannot infer the wire type of {type(value).__name__}, pass type_ explicitly",
    )

