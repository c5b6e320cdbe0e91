"""HyperLogLog cardinality estimation.

Public API:
    CardinalityEstimator: single-interval HyperLogLog over 64-bit hashes
    merged_estimate: cardinality of the union of several estimators
    merged_counters: the elementwise-max registers behind merged_estimate
    hash64 / hash_range: stable 64-bit hashing for keys and block ranges
"""

from cachesketch.estimator.hashing import hash64, hash_range
from cachesketch.estimator.hyperloglog import (
    CardinalityEstimator,
    merged_counters,
    merged_estimate,
)

__all__ = [
    "CardinalityEstimator",
    "hash64",
    "hash_range",
    "merged_counters",
    "merged_estimate",
]
