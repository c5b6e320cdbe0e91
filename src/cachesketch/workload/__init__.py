"""Synthetic workload generators for exercising the estimator.

Public API:
    ZipfianGenerator: popular-first skewed integers over a range
    LatestGenerator: skew toward the newest item in a growing keyspace
"""
from cachesketch.workload.latest import LatestGenerator
from cachesketch.workload.zipf import ZipfianGenerator

__all__ = [
    "LatestGenerator",
    "ZipfianGenerator",
]
