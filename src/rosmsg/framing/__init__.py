"""Envelope framing utilities for rosmsg.

This module provides utilities for adding and removing the 4-byte length
envelope that precedes every transmitted value.
"""

from __future__ import annotations

from .basic import (
    encode_framed,
    encode_framed_to_writer,
    frame_message,
    read_frame,
    unframe_message,
)

__all__ = [
    "encode_framed",
    "encode_framed_to_writer",
    "frame_message",
    "unframe_message",
    "read_frame",
]
