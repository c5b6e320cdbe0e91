"""Estimated-vs-exact simulations over synthetic block workloads."""
from cachesketch.simulation.harness import SimulationResult, run_simulation
from cachesketch.simulation.report import format_error_table, format_report

__all__ = [
    "SimulationResult",
    "format_error_table",
    "format_report",
    "run_simulation",
]
