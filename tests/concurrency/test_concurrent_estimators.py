"""Tests for LockedEstimator and ShardedEstimator.

Covers: concurrent ingestion matches single-threaded ingestion exactly,
shard assignment, and invalid construction.
"""
from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, wait

import pytest

from cachesketch.concurrency.locked import LockedEstimator
from cachesketch.concurrency.sharded import ShardedEstimator
from cachesketch.errors import InvalidArgumentError
from cachesketch.estimator.hyperloglog import CardinalityEstimator


N_THREADS = 8
PER_THREAD = 2000


def _thread_hashes(make_hashes) -> list[list[int]]:
    return [make_hashes(PER_THREAD, seed=100 + t) for t in range(N_THREADS)]


def _reference(bits: int, batches: list[list[int]]) -> CardinalityEstimator:
    est = CardinalityEstimator(bits)
    for batch in batches:
        for h in batch:
            est.add_hash(h)
    return est


def _ingest(target, batches: list[list[int]]) -> None:
    def writer(batch):
        for h in batch:
            target.add_hash(h)

    with ThreadPoolExecutor(max_workers=N_THREADS) as pool:
        futs = [pool.submit(writer, b) for b in batches]
        wait(futs)
        for f in futs:
            f.result()


class TestLockedEstimator:
    def test_concurrent_matches_sequential(self, make_hashes):
        batches = _thread_hashes(make_hashes)
        locked = LockedEstimator(10)
        _ingest(locked, batches)
        ref = _reference(10, batches)
        assert locked.snapshot() == ref.counters
        assert locked.cardinality() == ref.cardinality()

    def test_add_hash_reports_change(self):
        locked = LockedEstimator(4)
        assert locked.add_hash(1 << 63) is True
        assert locked.add_hash(1 << 63) is False
        assert locked.num_sharding_bits == 4

    def test_invalid_bits(self):
        with pytest.raises(InvalidArgumentError):
            LockedEstimator(2)


class TestShardedEstimator:
    def test_concurrent_matches_sequential(self, make_hashes):
        batches = _thread_hashes(make_hashes)
        sharded = ShardedEstimator(10, num_shards=8)
        _ingest(sharded, batches)
        ref = _reference(10, batches)
        assert sharded.snapshot() == ref.counters
        assert sharded.cardinality() == ref.cardinality()

    def test_threads_spread_across_shards(self, make_hashes):
        sharded = ShardedEstimator(8, num_shards=4)
        barrier = threading.Barrier(4)

        def writer(seed):
            barrier.wait()
            for h in make_hashes(500, seed=seed):
                sharded.add_hash(h)

        threads = [threading.Thread(target=writer, args=(s,)) for s in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        per_shard = sharded.shard_cardinalities()
        assert len(per_shard) == 4
        assert all(c > 0 for c in per_shard)

    def test_single_thread_uses_one_shard(self, make_hashes):
        sharded = ShardedEstimator(8, num_shards=4)
        for h in make_hashes(300, seed=1):
            sharded.add_hash(h)
        assert sum(1 for c in sharded.shard_cardinalities() if c > 0) == 1

    def test_empty(self):
        sharded = ShardedEstimator(6)
        assert sharded.cardinality() == [0]
        assert sharded.num_shards == 8
        assert sharded.num_sharding_bits == 6

    @pytest.mark.parametrize("shards", [0, 3, 6, -2])
    def test_invalid_shard_count(self, shards):
        with pytest.raises(InvalidArgumentError):
            ShardedEstimator(8, num_shards=shards)

    def test_invalid_bits(self):
        with pytest.raises(InvalidArgumentError):
            ShardedEstimator(20)
