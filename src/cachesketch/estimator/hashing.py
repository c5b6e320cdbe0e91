"""64-bit key hashing for the cardinality estimator.

The estimator's accuracy depends entirely on hashes being close to
uniform, so we use SHA-256 truncated to 8 bytes rather than Python's
``hash()``, which is neither stable across processes nor well mixed
for small integers.

Block ranges are canonicalized with ``struct`` as two big-endian
uint64 values before hashing, so (offset, length) pairs never collide
through string formatting.
"""

from __future__ import annotations

import hashlib
import struct

from cachesketch.errors import InvalidArgumentError
from cachesketch.types import HASH_MASK, Hash64, Length, Offset

_RANGE = struct.Struct("!QQ")


def hash64(data: bytes | str) -> Hash64:
    """Hash bytes (or a UTF-8 string) to an unsigned 64-bit integer."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    digest = hashlib.sha256(data).digest()
    # First 8 bytes as a big-endian uint64
    return int.from_bytes(digest[:8], "big")


def hash_range(offset: Offset, length: Length, granularity: int = 1) -> Hash64:
    """Hash a block range after rounding its offset down to ``granularity``.

    Two ranges that start in the same granule and have the same length
    hash identically.
    """
    if granularity < 1:
        raise InvalidArgumentError(f"granularity must be positive, got {granularity}")
    if offset < 0 or length < 0:
        raise InvalidArgumentError(
            f"offset and length must be non-negative, got {offset}, {length}"
        )
    granule = offset // granularity
    if granule > HASH_MASK or length > HASH_MASK:
        raise InvalidArgumentError(
            f"granule index and length must fit in 64 bits, got {granule}, {length}"
        )
    return hash64(_RANGE.pack(granule, length))
