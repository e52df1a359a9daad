"""Configuration for decoding.

This module provides the options dataclass accepted by the decode entry
points. Encoding has no options: the byte order and layout are fixed.
"""

from __future__ import annotations

from dataclasses import dataclass

from .codec.primitives import MAX_LENGTH


@dataclass(frozen=True)
class DecoderConfig:
    """Options for decoding ROSMSG data.

    Attributes:
        strict: Require the decoded value to use exactly the number of bytes
            its envelope declares (default False). The slice and text decode
            forms additionally reject bytes after the envelope. Without it the
            envelope length is only enforced for top-level maps.

        max_length: Upper bound for any declared length or element count,
            including the envelope (default None, no bound). Useful when
            reading from untrusted peers so a corrupted length can't make the
            decoder wait for gigabytes of data.

    Examples:
        ```python
        from rosmsg import DecoderConfig, decode

        # Headers from a socket: at most 64 KiB, nothing left over
        config = DecoderConfig(strict=True, max_length=65536)
        header = decode(dict[str, str], data, config=config)
        ```
    """

    strict: bool = False
    max_length: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.max_length is not None and not 0 <= self.max_length <= MAX_LENGTH:
            raise ValueError(f"max_length must be 0-{MAX_LENGTH}, got {self.max_length}")
