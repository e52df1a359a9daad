"""Message analysis CLI command."""

from __future__ import annotations

import importlib.util
import inspect
import sys
from pathlib import Path

from ..codec.schema import MessageSchema
from ..models.base import BaseMessage


def analyze_file(file_path: Path) -> None:
    """Print the wire layout of all BaseMessage classes in a Python file.

    Args:
        file_path: Path to Python file containing message definitions
    """
    spec = importlib.util.spec_from_file_location("user_module", file_path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Could not load module from {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules["user_module"] = module
    spec.loader.exec_module(module)

    # Only classes defined in this file, not imported ones
    message_classes = [
        obj
        for _name, obj in inspect.getmembers(module, inspect.isclass)
        if obj is not BaseMessage
        and issubclass(obj, BaseMessage)
        and obj.__module__ == "user_module"
    ]

    if not message_classes:
        print(f"No BaseMessage classes found in {file_path}")
        return

    print("|" * 7, "rosmsg: ROSMSG Binary Codec", "|" * 7)
    print(f"{len(message_classes)} message{'s' if len(message_classes) != 1 else ''} loaded.")
    print("Sizes are in bytes, excluding the 4 byte envelope.")
    print()

    for msg_class in message_classes:
        analyze_message_class(msg_class)


def analyze_message_class(msg_class: type[BaseMessage]) -> None:
    """Print the field-by-field wire layout of one message class.

    Args:
        msg_class: Message class to analyze
    """
    ros_type = getattr(msg_class, "rosmsg_type", None)
    if ros_type is not None:
        print(f"{'=' * 19} {msg_class.__name__} ({ros_type}) {'=' * 19}")
    else:
        print(f"{'=' * 19} {msg_class.__name__} {'=' * 19}")

    schema = MessageSchema.from_model(msg_class)
    total = schema.fixed_size()
    if total is not None:
        print(f"Fixed size: {total} bytes")
    else:
        print("Variable size")
    print()

    for i, field_schema in enumerate(schema.fields, 1):
        field_desc = f"{i}. {field_schema.shape.describe()} {field_schema.name}"
        size = field_schema.shape.fixed_size()
        size_desc = f"{size} bytes" if size is not None else "variable"
        dots = "." * max(1, 54 - len(field_desc) - len(size_desc))
        print(f"        {field_desc}{dots}{size_desc}")

    print()
