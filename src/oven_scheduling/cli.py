"""Command line entry point: run the greedy scheduler on a JSON instance."""

from __future__ import annotations

import argparse
import logging
import sys

from oven_scheduling.config import DEFAULT_CONFIG, GreedyConfig
from oven_scheduling.debug import show_schedule
from oven_scheduling.greedy import run_simple_greedy
from oven_scheduling.loaders import dump_output_json, load_instance_json
from oven_scheduling.satisfiability import check_satisfiability
from oven_scheduling.types import InvalidInstanceError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oven-schedule",
        description="Greedy batch scheduling of jobs on ovens with shifts.",
    )
    parser.add_argument("instance", help="Instance file (JSON)")
    parser.add_argument("-o", "--output", help="Write the solution to this JSON file")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Run the basic satisfiability check (schedule every job on its own)",
    )
    parser.add_argument(
        "--check-file", help="Write the satisfiability report to this file"
    )
    parser.add_argument(
        "--show", action="store_true", help="Print an ASCII view of the schedule"
    )
    parser.add_argument(
        "--time-step",
        type=int,
        default=DEFAULT_CONFIG.time_step,
        help="Seconds per simulated step (default: %(default)s)",
    )
    parser.add_argument(
        "--max-time-window",
        type=int,
        default=DEFAULT_CONFIG.max_time_window,
        help="Batch filler look-ahead in steps (default: %(default)s)",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="-v info, -vv debug"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        config = GreedyConfig(
            time_step=args.time_step, max_time_window=args.max_time_window
        )
        instance = load_instance_json(args.instance)
    except (InvalidInstanceError, OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.check or args.check_file:
        report = check_satisfiability(instance, args.check_file, config=config)
        print(report.to_text())

    output = run_simple_greedy(instance, config)
    unscheduled = output.unscheduled_jobs(instance)
    print(
        f"{instance.name}: {len(output.assignments)}/{len(instance.jobs)} jobs "
        f"scheduled in {len(output.batches)} batches"
    )
    if unscheduled:
        print(f"unscheduled jobs: {', '.join(str(j.id) for j in unscheduled)}")

    if args.show:
        show_schedule(instance, output)

    if args.output:
        dump_output_json(output, instance, args.output)
        logger.info("solution written to %s", args.output)

    return 1 if unscheduled else 0


if __name__ == "__main__":
    sys.exit(main())
