"""Error taxonomy for rosmsg.

Every failure raised by the codec is a RosmsgError. The ``kind`` attribute is
one member of the closed ErrorKind enum and is what callers should branch on;
kind-specific data (the rejected category, the field path) travels as extra
attributes on the same exception.
"""

from __future__ import annotations

import enum


class ErrorKind(enum.Enum):
    """Closed set of failure kinds."""

    END_OF_BUFFER = "end of buffer"
    UNDERFLOW = "length mismatch"
    BAD_TEXT = "bad text data"
    BAD_MAP_ENTRY = "bad map entry"
    UNSUPPORTED_CATEGORY = "unsupported category"
    MISSING_LENGTH_ANNOTATION = "missing length annotation"
    IO = "i/o failure"
    INVALID_SCHEMA = "invalid schema"
    INVALID_VALUE = "invalid value"
    LENGTH_LIMIT = "length limit exceeded"


class UnsupportedCategory(enum.Enum):
    """Structural categories the wire format cannot represent."""

    UNION = "tagged unions and enumerations are not supported in ROSMSG"
    OPTIONAL = "optional values are not supported in ROSMSG"
    CHAR = "chars are not supported in ROSMSG, use a one character string"
    ANY = "self-describing decoding is not supported, the data carries no type information"
    MAP_TYPES = "maps that can't be boiled down to dict[str, str] are not supported"
    NESTED_MAP = "maps are only supported as the whole top-level value"


class RosmsgError(Exception):
    """Exception for all rosmsg encode/decode failures.

    Attributes:
        kind: The ErrorKind tag
        category: The rejected category, only set for UNSUPPORTED_CATEGORY
        path: Field names / element indices leading to the failure, outermost first
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        *,
        category: UnsupportedCategory | None = None,
    ) -> None:
        if not message:
            message = category.value if category is not None else kind.value
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.category = category
        self.path: list[str] = []

    @classmethod
    def unsupported(cls, category: UnsupportedCategory, detail: str = "") -> RosmsgError:
        """Build an UNSUPPORTED_CATEGORY error for ``category``."""
        message = f"{category.value}: {detail}" if detail else category.value
        return cls(ErrorKind.UNSUPPORTED_CATEGORY, message, category=category)

    def add_context(self, step: str | int) -> None:
        """Record that the failure happened inside field or element ``step``."""
        self.path.insert(0, f"[{step}]" if isinstance(step, int) else step)

    def location(self) -> str:
        """Dotted path to the failing member, empty for top-level failures."""
        return ".".join(self.path).replace(".[", "[")

    def __str__(self) -> str:
        location = self.location()
        return f"{location}: {self.message}" if location else self.message

    def __repr__(self) -> str:
        return f"RosmsgError({self.kind.name}, {str(self)!r})"
