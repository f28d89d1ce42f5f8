#!/usr/bin/env python3
"""
Command-line interface for dupsweep.

Usage:
    dupsweep ~/Downloads                      # Report duplicates (dry run)
    dupsweep -r ~/Pictures --dry-run          # Show what would be deleted
    dupsweep -d -k newest ~/Documents         # Delete, keep newest copy
    dupsweep -i -r -m 10M ~/Videos            # Confirm each deletion
    dupsweep -a secure -o report.csv ~/Data   # SHA-256, CSV report

Exit codes:
    0 - Success (including no duplicates, and per-file failures)
    1 - General error
    2 - Invalid argument
    130 - Interrupted
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

import structlog

from dupsweep import __version__
from dupsweep.audit_log import AuditLog
from dupsweep.config.logging import configure_logging
from dupsweep.config.settings import DedupSettings, load_settings, resolve_config_path
from dupsweep.engine import run_dedup
from dupsweep.exceptions import ConfigurationError
from dupsweep.hasher import parse_algorithm
from dupsweep.models import DuplicateSet, ExecutionMode, FileRecord, ScanConfig
from dupsweep.report_generator import ReportGenerator
from dupsweep.retention import parse_policy
from dupsweep.scanner import validate_root
from dupsweep.sizes import format_size, parse_size

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

DEFAULT_KEEP = "first"
DEFAULT_MIN_SIZE = "1"
DEFAULT_ALGORITHM = "fast"


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dupsweep",
        description="Find duplicate files by content and remove the extra copies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Keep policies:
  first     Keep the first file found (fastest)
  newest    Keep the most recently modified file
  oldest    Keep the oldest file
  smallest  Keep the smallest file
  largest   Keep the largest file

Without --delete or --interactive nothing is deleted (dry run).
        """,
    )
    parser.add_argument("directory", nargs="?", default=".", help="Directory to scan (default: .)")
    parser.add_argument("-r", "--recursive", action="store_true", default=None, help="Search subdirectories")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-d", "--delete", action="store_true", help="Delete duplicates without asking")
    mode.add_argument("-i", "--interactive", action="store_true", help="Ask before each deletion")
    mode.add_argument("--dry-run", action="store_true", help="Only show what would be deleted (default)")

    parser.add_argument("-k", "--keep", metavar="POLICY", help="Which copy to keep (default: first)")
    parser.add_argument("-m", "--min-size", metavar="SIZE", help="Minimum file size, e.g. 1K, 10M (default: 1)")
    parser.add_argument("-a", "--algorithm", metavar="ALGO", help="fast (MD5) or secure (SHA-256), default: fast")
    parser.add_argument("-o", "--output", metavar="FILE", help="Also write the report to FILE (.csv for CSV)")
    parser.add_argument("-l", "--log", metavar="FILE", help="Append deletions and failures to FILE")
    parser.add_argument("-w", "--workers", type=_positive_int, metavar="N", help="Concurrent digest workers")
    parser.add_argument("-c", "--config", metavar="FILE", help="YAML settings file (or $DUPSWEEP_CONFIG)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only print the summary")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _first(*values):
    for value in values:
        if value is not None:
            return value
    return None


def build_scan_config(args: argparse.Namespace, settings: DedupSettings) -> ScanConfig:
    """Merge CLI flags over settings-file values over defaults."""
    root_path = validate_root(args.directory)
    min_size = parse_size(_first(args.min_size, settings.min_size, DEFAULT_MIN_SIZE))
    algorithm = parse_algorithm(_first(args.algorithm, settings.algorithm, DEFAULT_ALGORITHM))

    values = dict(
        root_path=root_path,
        recursive=bool(_first(args.recursive, settings.recursive, False)),
        min_file_size=min_size,
        algorithm=algorithm,
    )
    workers = _first(args.workers, settings.max_workers)
    if workers is not None:
        values["max_workers"] = workers
    if settings.chunk_size is not None:
        values["chunk_size"] = settings.chunk_size
    return ScanConfig(**values)


def select_mode(args: argparse.Namespace) -> ExecutionMode:
    if args.delete:
        return ExecutionMode.automatic
    if args.interactive:
        return ExecutionMode.interactive
    return ExecutionMode.dry_run


def prompt_confirm(record: FileRecord) -> bool:
    """Ask on stdin whether to delete one file. Anything but y/yes declines."""
    try:
        reply = input(f"Delete {record.path} [{format_size(record.size_bytes)}]? (y/N): ")
    except EOFError:
        print()
        return False
    return reply.strip().lower() in ("y", "yes")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(level="DEBUG" if args.verbose else None)

    try:
        config_path = resolve_config_path(args.config)
        settings = load_settings(config_path) if config_path else DedupSettings()
        config = build_scan_config(args, settings)
        policy = parse_policy(_first(args.keep, settings.keep, DEFAULT_KEEP))
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    mode = select_mode(args)
    output = _first(args.output, settings.output)
    log = _first(args.log, settings.log)
    audit_log = AuditLog(log) if log else None
    reporter = ReportGenerator()

    def print_set(duplicate_set: DuplicateSet) -> None:
        if not args.quiet:
            print(reporter.render_set(duplicate_set) + "\n", flush=True)

    if not args.quiet:
        print(f"Scanning directory: {config.root_path}", file=sys.stderr)
        print(
            f"Recursive: {config.recursive}, Min size: {config.min_file_size} bytes, "
            f"Keep: {policy.value}, Mode: {mode.value}",
            file=sys.stderr,
        )

    try:
        run = run_dedup(
            config,
            policy=policy,
            mode=mode,
            confirm=prompt_confirm if mode == ExecutionMode.interactive else None,
            audit_log=audit_log,
            on_set=print_set,
        )
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.error("dedup_run_failed", error=str(e), exc_info=True)
        print(f"\nError: {e}", file=sys.stderr)
        return EXIT_ERROR

    if not run.sets and not args.quiet:
        print("No duplicate files found.\n")
    print(reporter.render_summary(run.stats))

    if output:
        try:
            reporter.write_report(run, output)
        except OSError as e:
            print(f"Error: cannot write report {output}: {e.strerror or e}", file=sys.stderr)
            return EXIT_ERROR
        if not args.quiet:
            print(f"\nReport written to {Path(output)}", file=sys.stderr)

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
