"""Base message class and rosmsg-specific Pydantic configuration.

This module provides the BaseMessage class that all rosmsg messages should inherit from.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class BaseMessage(BaseModel):
    """Base class for all rosmsg messages.

    Fields are encoded in declaration order. Use the width aliases from
    ``rosmsg.models`` for numeric fields:

    Example:
        >>> from rosmsg import BaseMessage, UInt32
        >>> class Time(BaseMessage):
        ...     secs: UInt32
        ...     nsecs: UInt32
        ...
        ...     rosmsg_type: ClassVar[str | None] = "std_msgs/Time"

    Attributes:
        rosmsg_type: ROS type name such as ``geometry_msgs/Pose`` (optional,
            shown by the CLI and usable for the ``type`` connection header)
    """

    model_config = ConfigDict(
        # Decoded floats and ints are handed over as-is
        strict=False,
        arbitrary_types_allowed=True,
        validate_assignment=True,
        # Every field is on the wire, so unknown ones are a mistake
        extra="forbid",
    )

    rosmsg_type: ClassVar[str | None] = None
