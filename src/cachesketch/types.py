"""Shared type aliases and constants used across the package."""
from __future__ import annotations

from typing import TypeAlias

Hash64: TypeAlias = int  # unsigned, 0 <= h < 2**64
Offset: TypeAlias = int
Length: TypeAlias = int

HASH_BITS = 64
HASH_MASK = (1 << HASH_BITS) - 1

MIN_SHARDING_BITS = 4
MAX_SHARDING_BITS = 16
