"""
Command-line interface for chunked QNN witness sweeps.

Usage:
    # Epoch sweep of the four preset states (Bell, Flat, C, P)
    qnn-witness -c 1000 -e 4 -o run.csv

    # Partially entangled states for a list of gamma values
    qnn-witness -g "0.25,0.5,0.3+0.4i" -o gamma.csv

    # Precision sweep: counts 50, 100, ..., 2000, averaged over 4 epochs
    qnn-witness -w -c 2000 --count-step 50 --average -o precision.csv

    # Validation only
    qnn-witness --validate-only
"""

import argparse
import sys
from typing import List, Optional

from .config import (
    DEFAULT_COUNT,
    DEFAULT_COUNT_STEP,
    DEFAULT_EPOCHS,
    DEFAULT_FINAL_TIME,
    DEFAULT_TIME_CHUNKS,
)
from .errors import QNNWitnessError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qnn-witness",
        description="Measure entanglement witnesses of a chunked two-qubit QNN",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    # Sweep options
    parser.add_argument(
        "-c", "--count",
        type=int,
        default=DEFAULT_COUNT,
        help=f"Number of measurements for each witness (default: {DEFAULT_COUNT})",
    )
    parser.add_argument(
        "-e", "--epochs",
        type=int,
        default=DEFAULT_EPOCHS,
        help=f"Number of epochs to measure targets (default: {DEFAULT_EPOCHS})",
    )
    parser.add_argument(
        "-t", "--timechunks",
        type=int,
        default=DEFAULT_TIME_CHUNKS,
        help=f"Number of time chunks per epoch (default: {DEFAULT_TIME_CHUNKS})",
    )
    parser.add_argument(
        "-f", "--timef",
        type=float,
        default=0.0,
        help=f"Final time T_f (default: 1.580/(8π) = {DEFAULT_FINAL_TIME:.6f})",
    )
    parser.add_argument(
        "-g", "--gamma",
        type=str,
        default=None,
        help="Comma-delimited list of real or complex gamma values in the unit circle",
    )
    parser.add_argument(
        "-w", "--witness",
        action="store_true",
        help="Run the precision (witness) sweep over increasing counts",
    )
    parser.add_argument(
        "--count-step",
        type=int,
        default=DEFAULT_COUNT_STEP,
        help=f"Count increment of the precision sweep (default: {DEFAULT_COUNT_STEP})",
    )
    parser.add_argument(
        "--average",
        action="store_true",
        help="Average precision-sweep witnesses over the epochs",
    )
    parser.add_argument(
        "-s", "--signed",
        action="store_true",
        help="Emit signed witness values",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the Aer simulator",
    )

    # Output options
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output CSV file (auto-generated if not specified)",
    )
    parser.add_argument(
        "-v", "--verbose",
        dest="verbose",
        action="store_true",
        default=True,
        help="Echo every row to the console (default)",
    )
    parser.add_argument(
        "-q", "--quiet",
        dest="verbose",
        action="store_false",
        help="Suppress row echo",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a summary of the whole output file after the sweep",
    )
    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="Save a witness plot of the output file to this path",
    )

    # Validation
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Run validation checks only, no sweep",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.validate_only:
        from .validation import run_validation
        print("Running validation checks...")
        results = run_validation(verbose=True, full=True)
        total_failed = sum(r.failed for r in results.values())
        return 1 if total_failed > 0 else 0

    # Import here to avoid slow qiskit imports for --help
    from .harness import SweepConfig, SweepHarness
    from .simulation import AerWitnessMeasurement
    from .states import StateCatalog, parse_gamma_list
    from .trace import plot_trace, print_trace_summary, read_trace

    try:
        config_kwargs = dict(
            time_chunks=args.timechunks,
            count=args.count,
            epochs=args.epochs,
            count_step=args.count_step,
            signed=args.signed,
            verbose=args.verbose,
            average=args.average,
            progress=args.progress,
        )
        if args.output:
            config_kwargs["output"] = args.output
        if args.timef > 1e-12:
            config_kwargs["evolution_time"] = args.timef
        config = SweepConfig(**config_kwargs)

        catalog = StateCatalog.default()
        if args.gamma:
            gammas = parse_gamma_list(args.gamma)
            if args.verbose:
                for token, gamma in zip(args.gamma.split(","), gammas):
                    print(f"Gamma : {token.strip()} = {gamma}")
            catalog.derive_partially_entangled(gammas)

        harness = SweepHarness(config, catalog, AerWitnessMeasurement(seed=args.seed))
        harness.run(witness=args.witness)

        if args.summary or args.plot:
            trace = read_trace(config.output)
            if args.summary:
                print_trace_summary(trace)
            if args.plot:
                print(f"\nPlot saved to: {plot_trace(trace, args.plot)}")

    except (QNNWitnessError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\n✓ Sweep complete. Results saved to: {config.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
