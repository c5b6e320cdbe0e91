"""Coarse-lock wrapper around a single CardinalityEstimator.

One threading.Lock guards every call. Simple and exact with respect
to the estimator's own semantics, but every ingesting thread
serializes on the same lock. ShardedEstimator is the alternative when
ingestion is contended.
"""
from __future__ import annotations

import threading

from cachesketch.estimator.hyperloglog import CardinalityEstimator
from cachesketch.types import Hash64


class LockedEstimator:
    """CardinalityEstimator whose operations are mutually exclusive."""

    def __init__(self, num_sharding_bits: int) -> None:
        self._estimator = CardinalityEstimator(num_sharding_bits)
        self._lock = threading.Lock()

    def add_hash(self, hash_value: Hash64) -> bool:
        with self._lock:
            return self._estimator.add_hash(hash_value)

    def cardinality(self) -> list[int]:
        with self._lock:
            return self._estimator.cardinality()

    def snapshot(self) -> tuple[int, ...]:
        """Consistent copy of the registers."""
        with self._lock:
            return self._estimator.counters

    @property
    def num_sharding_bits(self) -> int:
        return self._estimator.num_sharding_bits
