"""vecbuf command-line entry point."""

from __future__ import annotations

import argparse
import sys

from .harness import CHECKS, PROBES, run_checks
from .runtime.config import FatalMode, VectorConfig, set_config
from .runtime.errors import ConfigError, FatalError
from .runtime.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vecbuf",
        description="vecbuf - contiguous growable arrays of fixed-size elements",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warning", "error", "critical"],
        help="Log level (default: VECBUF_LOG_LEVEL or warning)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Force JSON log output (default: auto-detect)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    check = commands.add_parser("check", help="Run the built-in self-checks")
    check.add_argument(
        "names",
        nargs="*",
        metavar="NAME",
        help=f"Checks to run: {', '.join(CHECKS)} (default: all)",
    )

    probe = commands.add_parser(
        "probe",
        help="Commit a contract violation to observe the fatal path",
    )
    probe.add_argument("case", choices=sorted(PROBES))
    probe.add_argument(
        "--raise",
        dest="raise_errors",
        action="store_true",
        help="Raise instead of aborting the process",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the vecbuf CLI."""
    args = build_parser().parse_args(argv)

    try:
        config = VectorConfig.from_env()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.log_level:
        config.log_level = args.log_level.upper()
    if args.json_logs:
        config.json_logs = True
    configure_logging(config)

    if args.command == "check":
        unknown = [name for name in args.names if name not in CHECKS]
        if unknown:
            print(f"Error: unknown check(s): {', '.join(unknown)}", file=sys.stderr)
            return 2
        results = run_checks(args.names or None)
        for name, failure in results:
            if failure is None:
                print(f"ok {name}")
            else:
                print(f"FAIL {name}: {failure}")
                return 1
        return 0

    mode = FatalMode.RAISE if args.raise_errors else FatalMode.ABORT
    set_config(config.with_fatal_mode(mode))
    try:
        PROBES[args.case]()
    except FatalError as e:
        print(f"fatal: {e}", file=sys.stderr)
        return 3
    print(f"probe '{args.case}' did not trip the fatal path", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
