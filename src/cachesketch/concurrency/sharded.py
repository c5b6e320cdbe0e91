"""Per-thread sharded ingestion with lossless merge on read.

Instead of one lock around one estimator, each ingesting thread is
pinned to one of N shards, each shard being its own estimator and
lock. Threads only contend when they share a shard. Reading merges
all shards by elementwise register maximum, which yields exactly the
estimate a single estimator would give for the combined stream, so
sharding costs memory (N x 2^b bytes) but no accuracy.

Threads are assigned to shards round-robin on first use, so N threads
with N shards never share a lock.
"""
from __future__ import annotations

import itertools
import logging
import threading
from contextlib import ExitStack

from cachesketch.errors import InvalidArgumentError
from cachesketch.estimator.hyperloglog import (
    CardinalityEstimator,
    merged_counters,
    merged_estimate,
)
from cachesketch.types import Hash64

log = logging.getLogger(__name__)


class ShardedEstimator:
    """Thread-sharded CardinalityEstimator.

    Args:
        num_sharding_bits: Register bits for every shard.
        num_shards: Number of independent shards (default 8, power of 2).
    """

    def __init__(self, num_sharding_bits: int, num_shards: int = 8) -> None:
        if num_shards <= 0 or (num_shards & (num_shards - 1)) != 0:
            raise InvalidArgumentError("num_shards must be a positive power of 2")
        self._num_shards = num_shards
        self._mask = num_shards - 1
        self._shards = [
            CardinalityEstimator(num_sharding_bits) for _ in range(num_shards)
        ]
        self._locks = [threading.Lock() for _ in range(num_shards)]
        self._local = threading.local()
        self._next_shard = itertools.count()
        self._assign_lock = threading.Lock()

    @property
    def num_shards(self) -> int:
        return self._num_shards

    @property
    def num_sharding_bits(self) -> int:
        return self._shards[0].num_sharding_bits

    def _shard_index(self) -> int:
        idx = getattr(self._local, "shard", None)
        if idx is None:
            with self._assign_lock:
                idx = next(self._next_shard) & self._mask
            self._local.shard = idx
            log.debug(
                "thread %d pinned to shard %d", threading.get_ident(), idx,
            )
        return idx

    def add_hash(self, hash_value: Hash64) -> bool:
        """Add to the calling thread's shard.

        True means that shard changed; the merged estimate may or may
        not have moved.
        """
        idx = self._shard_index()
        with self._locks[idx]:
            return self._shards[idx].add_hash(hash_value)

    def cardinality(self) -> list[int]:
        """Merged estimate across all shards.

        Holds every shard lock (in index order) while merging, so the
        result reflects one consistent cut of all shards.
        """
        with ExitStack() as stack:
            for lock in self._locks:
                stack.enter_context(lock)
            return [merged_estimate(self._shards)]

    def snapshot(self) -> tuple[int, ...]:
        """Merged registers across all shards."""
        with ExitStack() as stack:
            for lock in self._locks:
                stack.enter_context(lock)
            return tuple(merged_counters(self._shards))

    def shard_cardinalities(self) -> list[int]:
        """Per-shard estimates, useful to check load spread."""
        result = []
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                result.append(shard.cardinality()[0])
        return result
