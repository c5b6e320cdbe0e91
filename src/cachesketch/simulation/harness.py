"""Simulation harness: estimated vs exact working-set size.

Generates block accesses from one of the workload generators, feeds
them to a CacheSizeEstimator and to an exact set() side by side, and
returns both answers with timing. The CLI ``simulate`` command and the
accuracy tests are built on this.
"""
from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Iterator

from cachesketch.errors import InvalidArgumentError
from cachesketch.sizing import CacheSizeEstimator
from cachesketch.workload.latest import LatestGenerator
from cachesketch.workload.zipf import ZipfianGenerator

WORKLOADS = ("uniform", "zipfian", "latest")


@dataclass(slots=True)
class SimulationResult:
    """Outcome of one simulated access stream."""
    workload: str
    num_sharding_bits: int
    granularity: int
    total_requests: int
    exact_cardinality: int
    estimated_cardinality: int
    recomputations: int
    memory_bytes: int
    elapsed_ms: float

    @property
    def error_pct(self) -> float:
        if self.exact_cardinality == 0:
            return 0.0
        return (
            abs(self.estimated_cardinality - self.exact_cardinality)
            / self.exact_cardinality * 100
        )


def _blocks(workload: str, num_items: int, seed: int) -> Iterator[int]:
    if workload == "uniform":
        rng = random.Random(seed)
        while True:
            yield rng.randrange(num_items)
    elif workload == "zipfian":
        yield from ZipfianGenerator(0, num_items - 1, seed=seed)
    elif workload == "latest":
        yield from LatestGenerator(num_items, seed=seed)
    else:
        raise InvalidArgumentError(
            f"unknown workload {workload!r}, expected one of {WORKLOADS}"
        )


def run_simulation(
    num_sharding_bits: int = 8,
    num_items: int = 100_000,
    total_requests: int = 50_000,
    workload: str = "uniform",
    granularity: int = 4096,
    seed: int = 42,
) -> SimulationResult:
    """Stream ``total_requests`` block reads drawn from ``num_items`` blocks.

    Each access reads one granule at ``block * granularity``.
    """
    if workload not in WORKLOADS:
        raise InvalidArgumentError(
            f"unknown workload {workload!r}, expected one of {WORKLOADS}"
        )
    if num_items < 1:
        raise InvalidArgumentError(f"num_items must be >= 1, got {num_items}")

    sizer = CacheSizeEstimator(num_sharding_bits, granularity=granularity)
    exact: set[int] = set()
    blocks = _blocks(workload, num_items, seed)

    start = time.perf_counter()
    for _ in range(total_requests):
        block = next(blocks)
        sizer.add(block * granularity, granularity)
        exact.add(block)
    estimate = sizer.cardinality()[0]
    elapsed = (time.perf_counter() - start) * 1000

    return SimulationResult(
        workload=workload,
        num_sharding_bits=num_sharding_bits,
        granularity=granularity,
        total_requests=total_requests,
        exact_cardinality=len(exact),
        estimated_cardinality=estimate,
        recomputations=sizer.recomputations,
        memory_bytes=sizer.memory_bytes(),
        elapsed_ms=elapsed,
    )
