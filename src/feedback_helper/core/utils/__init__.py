"""
Utils Package

Snapshot serialization for assignments.
"""

from .serialization import (
    serialize_assignment,
    deserialize_assignment,
    encode_snapshot,
    decode_snapshot,
)

__all__ = [
    "serialize_assignment",
    "deserialize_assignment",
    "encode_snapshot",
    "decode_snapshot",
]
