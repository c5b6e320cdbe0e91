"""Tests for CacheSizeEstimator."""
from __future__ import annotations

import pytest

from cachesketch.errors import InvalidArgumentError
from cachesketch.estimator.hashing import hash_range
from cachesketch.sizing import CacheSizeEstimator


class TestCacheSizeEstimator:
    def test_empty(self):
        sizer = CacheSizeEstimator()
        assert sizer.cardinality() == [0]
        assert sizer.estimated_bytes() == 0
        assert sizer.memory_bytes() == 256
        assert sizer.granularity == 4096

    def test_same_granule_counts_once(self):
        sizer = CacheSizeEstimator(granularity=4096)
        assert sizer.add(0, 4096) is True
        assert sizer.add(100, 4096) is False
        assert sizer.cardinality() == [1]
        assert sizer.accesses == 2

    def test_estimated_bytes(self):
        sizer = CacheSizeEstimator(num_sharding_bits=12, granularity=4096)
        for block in range(100):
            sizer.add(block * 4096, 4096)
        est = sizer.cardinality()[0]
        assert 95 <= est <= 105
        assert sizer.estimated_bytes() == est * 4096

    def test_recomputes_only_after_change(self):
        sizer = CacheSizeEstimator(granularity=1)
        sizer.add(1, 1)
        sizer.cardinality()
        sizer.cardinality()
        assert sizer.recomputations == 1

        # Repeat access does not touch registers
        assert sizer.add(1, 1) is False
        sizer.cardinality()
        assert sizer.recomputations == 1

    def test_hot_workload_mostly_cached(self):
        sizer = CacheSizeEstimator(granularity=1)
        for _ in range(50):
            for block in range(20):
                sizer.add(block, 1)
                sizer.cardinality()
        assert sizer.accesses == 1000
        assert sizer.recomputations <= 20

    def test_add_hash_passthrough(self):
        sizer = CacheSizeEstimator(granularity=4096)
        h = hash_range(8192, 4096, 4096)
        assert sizer.add_hash(h) is True
        assert sizer.add(8192, 4096) is False

    def test_returned_list_is_a_copy(self):
        sizer = CacheSizeEstimator()
        sizer.add(0, 1)
        first = sizer.cardinality()
        first[0] = -5
        assert sizer.cardinality()[0] >= 0

    @pytest.mark.parametrize("granularity", [0, -1])
    def test_invalid_granularity(self, granularity):
        with pytest.raises(InvalidArgumentError):
            CacheSizeEstimator(granularity=granularity)

    def test_invalid_bits(self):
        with pytest.raises(InvalidArgumentError):
            CacheSizeEstimator(num_sharding_bits=17)
