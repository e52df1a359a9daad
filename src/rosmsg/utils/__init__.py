"""Utility functions for rosmsg.

This module provides size calculation without encoding.
"""

from __future__ import annotations

from .sizing import encoded_size, field_sizes, fixed_size

__all__ = [
    "encoded_size",
    "field_sizes",
    "fixed_size",
]
