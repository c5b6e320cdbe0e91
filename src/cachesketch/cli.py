"""cachesketch CLI entry point.

Usage: cachesketch [--log-level LEVEL] [command]
"""
import argparse
import logging
import sys

from cachesketch.simulation.harness import WORKLOADS
from cachesketch.types import MAX_SHARDING_BITS, MIN_SHARDING_BITS


def _add_simulate_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser(
        "simulate",
        help="Compare estimated and exact working-set size on a synthetic workload.",
    )
    p.add_argument(
        "--bits", type=int, default=8,
        help=f"num_sharding_bits, {MIN_SHARDING_BITS}..{MAX_SHARDING_BITS} (default: 8)",
    )
    p.add_argument(
        "--items", type=int, default=100_000,
        help="Number of distinct blocks in the keyspace (default: 100000)",
    )
    p.add_argument(
        "--requests", type=int, default=50_000,
        help="Total block accesses to generate (default: 50000)",
    )
    p.add_argument(
        "--workload", choices=WORKLOADS, default="uniform",
        help="Access distribution (default: uniform)",
    )
    p.add_argument(
        "--granularity", type=int, default=4096,
        help="Bytes per cache granule (default: 4096)",
    )
    p.add_argument(
        "--seed", type=int, default=42,
        help="RNG seed for reproducible runs (default: 42)",
    )


def _run_simulate(args: argparse.Namespace) -> int:
    from cachesketch.errors import InvalidArgumentError
    from cachesketch.simulation.harness import run_simulation
    from cachesketch.simulation.report import format_report

    try:
        result = run_simulation(
            num_sharding_bits=args.bits,
            num_items=args.items,
            total_requests=args.requests,
            workload=args.workload,
            granularity=args.granularity,
            seed=args.seed,
        )
    except InvalidArgumentError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    print(format_report(result))
    return 0


def _run_error_table() -> int:
    from cachesketch.simulation.report import format_error_table

    print(format_error_table())
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="cachesketch",
        description="Estimate cache working-set size with HyperLogLog.",
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command")

    _add_simulate_parser(subparsers)
    subparsers.add_parser(
        "error-table",
        help="Print memory vs expected error for each num_sharding_bits.",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "simulate":
        sys.exit(_run_simulate(args))
    if args.command == "error-table":
        sys.exit(_run_error_table())


if __name__ == "__main__":
    main()
