"""Connection headers.

Peers open every topic or service connection by exchanging a header block:
a string map such as ``topic=/chatter``, ``type=std_msgs/String`` and
``md5sum=...``, encoded with the map codec. The block's length prefix is the
only framing it has.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import BinaryIO

from structlog import get_logger

from .codec.decoder import decode, decode_from_reader
from .codec.encoder import encode
from .config import DecoderConfig

logger = get_logger()

ConnectionHeader = dict[str, str]


def encode_header(fields: Mapping[str, str]) -> bytes:
    """Encode a connection header block, length prefix included.

    Example:
        >>> encode_header({"abc": "123"})
        b'\\x0b\\x00\\x00\\x00\\x07\\x00\\x00\\x00abc=123'
    """
    return encode(fields, ConnectionHeader)


def decode_header(data: bytes | str, *, config: DecoderConfig | None = None) -> ConnectionHeader:
    """Decode a connection header block.

    Raises:
        RosmsgError: BAD_MAP_ENTRY, BAD_TEXT or END_OF_BUFFER for malformed blocks
    """
    header: ConnectionHeader = decode(ConnectionHeader, data, config=config)
    logger.debug("rosmsg header decoded", fields=sorted(header))
    return header


def read_header(reader: BinaryIO, *, config: DecoderConfig | None = None) -> ConnectionHeader:
    """Read one connection header block off a stream."""
    header: ConnectionHeader = decode_from_reader(ConnectionHeader, reader, config=config)
    logger.debug("rosmsg header read", fields=sorted(header))
    return header
