"""Benchmark: HyperLogLog error across many independent trials.

Slow. Runs the full 1,000-trial check at num_sharding_bits=8 and
prints the observed error distribution.
"""
from __future__ import annotations

import random
import statistics

import pytest

from cachesketch.estimator.hyperloglog import CardinalityEstimator, merged_estimate


SEED = 42


@pytest.mark.benchmark
class TestAccuracyTrials:
    def test_b8_10k_distinct_1000_trials(self):
        """At least 95% of trials land within 3 x 1.04 / sqrt(256) of truth."""
        n = 10_000
        trials = 1_000
        bound = 3 * 1.04 / 16
        errors = []
        within = 0
        for trial in range(trials):
            rng = random.Random(SEED + trial)
            est = CardinalityEstimator(8)
            for _ in range(n):
                est.add_hash(rng.getrandbits(64))
            rel = (est.cardinality()[0] - n) / n
            errors.append(rel)
            if abs(rel) <= bound:
                within += 1

        print(f"\n  b=8, n={n:,}, trials={trials}")
        print(f"  Mean error:   {statistics.mean(errors) * 100:+.2f}%")
        print(f"  Stdev error:  {statistics.pstdev(errors) * 100:.2f}%")
        print(f"  Within 3e:    {within}/{trials}")

        assert within >= 0.95 * trials

    def test_sharded_merge_matches_single(self):
        """Splitting a stream across 16 estimators loses nothing on merge."""
        rng = random.Random(SEED)
        hashes = [rng.getrandbits(64) for _ in range(200_000)]
        single = CardinalityEstimator(12)
        shards = [CardinalityEstimator(12) for _ in range(16)]
        for i, h in enumerate(hashes):
            single.add_hash(h)
            shards[i % 16].add_hash(h)

        assert merged_estimate(shards) == single.cardinality()[0]
        error = abs(single.cardinality()[0] - 200_000) / 200_000
        print(f"\n  b=12, n=200,000, error={error * 100:.2f}%")
        assert error < 0.049
