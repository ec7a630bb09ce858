"""Command-line interface: ``streamcount run`` and ``streamcount extract``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from streamcount.experiment import (
    ExperimentConfig,
    plot_confidence,
    run_experiment,
    write_csv,
    write_text_report,
)
from streamcount.logging_config import configure_from_env, enable_console_logging
from streamcount.tools import extract_column

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="streamcount",
        description="CVM distinct-count estimator experiments",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level (default: from STREAMCOUNT_LOGGING, else INFO)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Sweep estimator capacities over a token file")
    run.add_argument("input", type=Path, help="Whitespace-separated token file")
    run.add_argument("--initial-capacity", type=int, default=100, metavar="N")
    run.add_argument("--increment", type=int, default=100, metavar="N")
    run.add_argument(
        "--sweep-count",
        type=int,
        default=20,
        metavar="N",
        help="Number of capacities tested (default: 20)",
    )
    run.add_argument("--trials", type=int, default=100, metavar="N", help="Trials per capacity")
    run.add_argument(
        "--true-distinct",
        type=int,
        default=None,
        metavar="N",
        help="Known distinct count (default: computed from the input)",
    )
    run.add_argument(
        "--error-threshold",
        type=float,
        default=0.05,
        help="Relative error counted as accurate (default: 0.05)",
    )
    run.add_argument("--seed", type=int, default=None, help="Base seed for reproducible sweeps")
    run.add_argument(
        "--output",
        type=Path,
        default=Path("output.txt"),
        help="Plain-text report path (default: output.txt)",
    )
    run.add_argument("--csv", type=Path, default=None, help="Also write per-trial CSV here")
    run.add_argument("--plot", type=Path, default=None, help="Also write a PNG chart here")

    extract = sub.add_parser("extract", help="Extract one CSV column into a token file")
    extract.add_argument("input", type=Path, help="CSV file with a header row")
    extract.add_argument("output", type=Path, help="Text file, one value per line")
    extract.add_argument(
        "--column",
        default="0",
        help="Column name or zero-based index (default: 0)",
    )
    return parser


def _cmd_run(args: argparse.Namespace) -> int:
    config = ExperimentConfig(
        input_path=args.input,
        initial_capacity=args.initial_capacity,
        increment=args.increment,
        sweep_count=args.sweep_count,
        trials=args.trials,
        true_distinct=args.true_distinct,
        error_threshold=args.error_threshold,
        seed=args.seed,
    )
    result = run_experiment(config)
    write_text_report(result, args.output)
    if args.csv is not None:
        write_csv(result, args.csv)
    if args.plot is not None:
        plot_confidence(result, args.plot)
    return EXIT_OK


def _cmd_extract(args: argparse.Namespace) -> int:
    column: int | str = int(args.column) if args.column.isdigit() else args.column
    count = extract_column(args.input, args.output, column=column)
    print(f"Successfully extracted {count} values to {args.output}")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.log_level is not None:
        enable_console_logging(level=args.log_level)
    else:
        configure_from_env()

    handlers = {"run": _cmd_run, "extract": _cmd_extract}
    try:
        return handlers[args.command](args)
    except OSError as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_IO_ERROR
    except (ValueError, KeyError) as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR


if __name__ == "__main__":
    sys.exit(main())
