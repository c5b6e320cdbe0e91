"""Report formatting for simulation results and sizing tables."""
from __future__ import annotations

import math

from cachesketch.simulation.harness import SimulationResult
from cachesketch.types import MAX_SHARDING_BITS, MIN_SHARDING_BITS


def format_report(result: SimulationResult, label: str = "Simulation") -> str:
    """Format a SimulationResult as a readable report string."""
    lines = [
        f"=== {label} ({result.workload}) ===",
        f"Requests:          {result.total_requests:,}",
        f"Sharding bits:     {result.num_sharding_bits}",
        f"Exact distinct:    {result.exact_cardinality:,}",
        f"Estimated:         {result.estimated_cardinality:,}",
        f"Error:             {result.error_pct:.2f}%",
        f"Estimated cache:   "
        f"{result.estimated_cardinality * result.granularity / (1 << 20):,.1f} MiB",
        f"Estimator memory:  {result.memory_bytes:,} bytes",
        f"Recomputations:    {result.recomputations:,}",
        f"Elapsed:           {result.elapsed_ms:.1f} ms",
    ]
    return "\n".join(lines)


def format_error_table() -> str:
    """Memory vs 3-sigma error for every supported sharding-bit count."""
    lines = [
        f"{'num_sharding_bits':>17} {'memory (bytes)':>15} {'3e (%)':>8}",
        "-" * 42,
    ]
    for bits in range(MIN_SHARDING_BITS, MAX_SHARDING_BITS + 1):
        buckets = 1 << bits
        three_e = 3 * 1.04 / math.sqrt(buckets) * 100
        lines.append(f"{bits:>17} {buckets:>15,} {three_e:>8.1f}")
    return "\n".join(lines)
