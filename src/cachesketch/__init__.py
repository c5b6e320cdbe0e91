"""cachesketch: HyperLogLog cardinality estimation for cache sizing."""

from cachesketch.errors import InvalidArgumentError
from cachesketch.estimator import (
    CardinalityEstimator,
    hash64,
    hash_range,
    merged_counters,
    merged_estimate,
)
from cachesketch.sizing import CacheSizeEstimator

__all__ = [
    "CacheSizeEstimator",
    "CardinalityEstimator",
    "InvalidArgumentError",
    "hash64",
    "hash_range",
    "merged_counters",
    "merged_estimate",
]
