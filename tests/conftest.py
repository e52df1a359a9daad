"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

# Connection header sent by `rostopic pub /chatter std_msgs/String`
TYPICAL_HEADER = bytes(
    [
        0xB0, 0x00, 0x00, 0x00, 0x20, 0x00, 0x00, 0x00, 0x6D, 0x65, 0x73, 0x73,
        0x61, 0x67, 0x65, 0x5F, 0x64, 0x65, 0x66, 0x69, 0x6E, 0x69, 0x74, 0x69,
        0x6F, 0x6E, 0x3D, 0x73, 0x74, 0x72, 0x69, 0x6E, 0x67, 0x20, 0x64, 0x61,
        0x74, 0x61, 0x0A, 0x0A, 0x25, 0x00, 0x00, 0x00, 0x63, 0x61, 0x6C, 0x6C,
        0x65, 0x72, 0x69, 0x64, 0x3D, 0x2F, 0x72, 0x6F, 0x73, 0x74, 0x6F, 0x70,
        0x69, 0x63, 0x5F, 0x34, 0x37, 0x36, 0x37, 0x5F, 0x31, 0x33, 0x31, 0x36,
        0x39, 0x31, 0x32, 0x37, 0x34, 0x31, 0x35, 0x35, 0x37, 0x0A, 0x00, 0x00,
        0x00, 0x6C, 0x61, 0x74, 0x63, 0x68, 0x69, 0x6E, 0x67, 0x3D, 0x31, 0x27,
        0x00, 0x00, 0x00, 0x6D, 0x64, 0x35, 0x73, 0x75, 0x6D, 0x3D, 0x39, 0x39,
        0x32, 0x63, 0x65, 0x38, 0x61, 0x31, 0x36, 0x38, 0x37, 0x63, 0x65, 0x63,
        0x38, 0x63, 0x38, 0x62, 0x64, 0x38, 0x38, 0x33, 0x65, 0x63, 0x37, 0x33,
        0x63, 0x61, 0x34, 0x31, 0x64, 0x31, 0x0E, 0x00, 0x00, 0x00, 0x74, 0x6F,
        0x70, 0x69, 0x63, 0x3D, 0x2F, 0x63, 0x68, 0x61, 0x74, 0x74, 0x65, 0x72,
        0x14, 0x00, 0x00, 0x00, 0x74, 0x79, 0x70, 0x65, 0x3D, 0x73, 0x74, 0x64,
        0x5F, 0x6D, 0x73, 0x67, 0x73, 0x2F, 0x53, 0x74, 0x72, 0x69, 0x6E, 0x67,
    ]
)


@pytest.fixture
def typical_header() -> bytes:
    """Captured std_msgs/String publisher connection header."""
    return TYPICAL_HEADER


@pytest.fixture
def hello_world_frame() -> bytes:
    """Captured std_msgs/String message body carrying "Hello, World!"."""
    return b"\x11\x00\x00\x00\x0d\x00\x00\x00Hello, World!"
