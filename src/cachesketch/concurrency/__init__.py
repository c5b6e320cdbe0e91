"""Thread-safe ingestion into cardinality estimators.

Two levels of concurrency control:
  - LockedEstimator: one estimator, one lock
  - ShardedEstimator: per-thread shards merged on read
"""
from cachesketch.concurrency.locked import LockedEstimator
from cachesketch.concurrency.sharded import ShardedEstimator

__all__ = [
    "LockedEstimator",
    "ShardedEstimator",
]
