"""String map codec.

Maps are written as a flat run of length-prefixed ``key=value`` entries with
no entry count. The only thing that tells a reader where the map ends is a
byte budget handed in from outside, normally the envelope length.
"""

from __future__ import annotations

from collections.abc import Mapping

from ..exceptions import ErrorKind, RosmsgError
from .primitives import LENGTH_SIZE, PrimitiveReader, PrimitiveWriter, decode_utf8

SEPARATOR = "="


def encode_map(writer: PrimitiveWriter, mapping: Mapping[str, str]) -> None:
    """Encode a string map as one length-prefixed block of entries.

    Args:
        writer: Writer to emit the block to
        mapping: Keys and values to encode; entry order is not significant

    Raises:
        RosmsgError: INVALID_VALUE for non-text keys/values or keys containing ``=``
    """
    with writer.length_prefixed() as entries:
        for key, value in mapping.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise RosmsgError(
                    ErrorKind.INVALID_VALUE,
                    f"map entries must be str=str, got "
                    f"{type(key).__name__}={type(value).__name__}",
                )
            # The first '=' splits the entry, so it can't appear in a key
            if SEPARATOR in key:
                raise RosmsgError(ErrorKind.INVALID_VALUE, f"map key {key!r} contains '='")
            entries.write_text(key + SEPARATOR + value)


def decode_map(reader: PrimitiveReader, budget: int) -> dict[str, str]:
    """Decode map entries until exactly ``budget`` bytes have been consumed.

    Args:
        reader: Reader positioned at the first entry
        budget: Number of bytes the entries occupy

    Returns:
        The decoded mapping. A budget of 0 gives an empty dict.

    Raises:
        RosmsgError: BAD_MAP_ENTRY if an entry overruns the budget or has no
            ``=``; END_OF_BUFFER or BAD_TEXT from the entry itself
    """
    entries: dict[str, str] = {}
    remaining = budget
    while remaining > 0:
        if remaining < LENGTH_SIZE:
            raise RosmsgError(
                ErrorKind.BAD_MAP_ENTRY,
                f"{remaining} bytes left in map, too few for an entry length",
            )
        length = reader.read_length()
        if LENGTH_SIZE + length > remaining:
            raise RosmsgError(
                ErrorKind.BAD_MAP_ENTRY,
                f"entry of {length} bytes exceeds the {remaining - LENGTH_SIZE} bytes left in map",
            )
        entry = decode_utf8(reader.read_raw(length))
        remaining -= LENGTH_SIZE + length

        key, separator, value = entry.partition(SEPARATOR)
        if not separator:
            raise RosmsgError(ErrorKind.BAD_MAP_ENTRY, f"entry {entry!r} has no '='")
        entries[key] = value
    return entries
