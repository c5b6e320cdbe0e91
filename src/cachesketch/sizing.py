"""Working-set size estimation for a block cache.

Feeds every (offset, length) access into a HyperLogLog estimator and
reports how many distinct granules were touched, which is how large a
cache would need to be to hold the whole working set.

Recomputing the estimate is O(num_buckets), while ingestion is O(1).
The estimator tells us when a register actually changed, so the
estimate is cached and only recomputed after a change. On a hot
workload most accesses hit already-saturated registers and the
cached value is returned for free.
"""
from __future__ import annotations

import logging

from cachesketch.errors import InvalidArgumentError
from cachesketch.estimator.hashing import hash_range
from cachesketch.estimator.hyperloglog import CardinalityEstimator
from cachesketch.types import Hash64, Length, Offset

log = logging.getLogger(__name__)


class CacheSizeEstimator:
    """Estimate distinct granules touched by a stream of block accesses.

    Parameters:
        num_sharding_bits: HyperLogLog register bits (default 8, 256 bytes,
            about 20% worst-case error).
        granularity: Bytes per cache granule (default 4096). Offsets are
            rounded down to a multiple of this before hashing.
    """

    def __init__(self, num_sharding_bits: int = 8, granularity: int = 4096) -> None:
        if granularity < 1:
            raise InvalidArgumentError(f"granularity must be positive, got {granularity}")
        self._estimator = CardinalityEstimator(num_sharding_bits)
        self._granularity = granularity
        self._cached: list[int] = self._estimator.cardinality()
        self._stale = False
        self._accesses = 0
        self._recomputations = 0

    @property
    def granularity(self) -> int:
        return self._granularity

    @property
    def accesses(self) -> int:
        return self._accesses

    @property
    def recomputations(self) -> int:
        """How many times the cached estimate was actually recomputed."""
        return self._recomputations

    @property
    def estimator(self) -> CardinalityEstimator:
        return self._estimator

    def add(self, offset: Offset, length: Length) -> bool:
        """Record one access. Returns True if the estimate may have changed."""
        return self.add_hash(hash_range(offset, length, self._granularity))

    def add_hash(self, hash_value: Hash64) -> bool:
        """Record a pre-hashed access.

        Lets a caller hash once and feed several estimators.
        """
        self._accesses += 1
        changed = self._estimator.add_hash(hash_value)
        if changed:
            self._stale = True
        return changed

    def cardinality(self) -> list[int]:
        """Distinct granules touched, recomputed only if registers changed."""
        if self._stale:
            self._cached = self._estimator.cardinality()
            self._stale = False
            self._recomputations += 1
            log.debug(
                "recomputed cardinality %d after %d accesses",
                self._cached[0], self._accesses,
            )
        return list(self._cached)

    def estimated_bytes(self) -> int:
        """Estimated cache size needed to hold every touched granule."""
        return self.cardinality()[0] * self._granularity

    def memory_bytes(self) -> int:
        return self._estimator.memory_bytes()
