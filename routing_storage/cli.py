"""Command-line interface for routing-storage."""

import argparse
import logging
import sys

from routing_storage.api import inspect
from routing_storage.version import VERSION


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def cmd_inspect(args: argparse.Namespace) -> int:
    """Execute inspect command."""
    setup_logging(args.verbose)

    try:
        report = inspect(args.base)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Inspection failed")
        return 1

    if report.warnings:
        print(f"Warnings ({len(report.warnings)}):")
        for warning in report.warnings:
            print(f"  - {warning}")

    fingerprint_failed = any(w.startswith("Fingerprint") for w in report.warnings)
    if report.valid and not (args.strict and fingerprint_failed):
        print("\nInspection successful!")
        print(f"Stats: {report.stats}")
        return 0

    if report.errors:
        print(f"\nInspection failed with {len(report.errors)} errors:")
        for error in report.errors:
            print(f"  - {error}")
    else:
        print("\nInspection failed: fingerprint does not match this build")
    return 1


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="routing-storage",
        description="Inspect prepared routing datasets",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    inspect_parser = subparsers.add_parser("inspect", help="Report dataset counts and fingerprint")
    inspect_parser.add_argument(
        "--base", required=True, help="Base path of the dataset (e.g. map.osrm)"
    )
    inspect_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when the fingerprint does not match this build",
    )
    inspect_parser.set_defaults(func=cmd_inspect)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
