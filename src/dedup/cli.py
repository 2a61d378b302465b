#!/usr/bin/env python3
"""
dedup CLI — find duplicate files in one or more directory trees.
Reports duplicate groups by default; optionally replaces duplicates by symlinks,
removes them or moves them to the system trash.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from dedup.core.models import DedupAction, DeduplicationParams, DuplicateGroup, ResolutionReport, DeduplicationStats
from dedup.commands import DeduplicationCommand
from dedup.utils.convert_utils import ConvertUtils
from dedup.aliases import (
    HASH_ALIASES, HASH_CHOICES, HASH_HELP_TEXT, ACTION_HELP_TEXT, EPILOG_TEXT
)

logger = logging.getLogger("dedup")


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{value}'")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: '{value}'")
    return number


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dedup",
            description="Find duplicate files in a directory structure",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "paths",
            nargs="+",
            metavar="PATH",
            help="Directories to search"
        )

        # Filtering options
        parser.add_argument(
            "--min-size", "-m",
            default="0",
            type=str,
            metavar='SIZE',
            help="Minimum size of files to search (e.g., 100, 500K, 1MB). Default: 0"
        )
        parser.add_argument(
            "--max-depth", "-d",
            default=None,
            type=positive_int,
            metavar='N',
            help="Do not search files beyond this depth.\n"
                 "Files in the specified paths are considered depth 1."
        )
        parser.add_argument(
            "--hash",
            choices=HASH_CHOICES,
            default="sha256",
            type=str,
            help=HASH_HELP_TEXT
        )

        # Actions
        mode = parser.add_mutually_exclusive_group()
        mode.add_argument(
            "--symlink", "-s",
            dest="action",
            action="store_const",
            const=DedupAction.SYMLINK,
            help=ACTION_HELP_TEXT[DedupAction.SYMLINK]
        )
        mode.add_argument(
            "--remove",
            dest="action",
            action="store_const",
            const=DedupAction.REMOVE,
            help=ACTION_HELP_TEXT[DedupAction.REMOVE]
        )
        mode.add_argument(
            "--trash",
            dest="action",
            action="store_const",
            const=DedupAction.TRASH,
            help=ACTION_HELP_TEXT[DedupAction.TRASH]
        )
        parser.set_defaults(action=DedupAction.REPORT)

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress the duplicate listing, print only the summary and warnings"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Print file names and sizes of the found duplicates, and statistics"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before any file is touched."""
        if args.quiet and args.verbose:
            self.error_exit("--quiet and --verbose cannot be used together")

        for path in args.paths:
            if not os.path.lexists(path):
                self.error_exit(f"Path not found: {path}")

        try:
            ConvertUtils.human_to_bytes(args.min_size)
        except ValueError as e:
            self.error_exit(f"Invalid size format: {e}")

    def create_params(self, args: argparse.Namespace) -> DeduplicationParams:
        """Create DeduplicationParams from CLI arguments."""
        try:
            return DeduplicationParams.from_human_readable(
                roots=[os.path.abspath(p) for p in args.paths],
                min_size_str=args.min_size,
                max_depth=args.max_depth,
                action=args.action,
                algorithm=HASH_ALIASES[args.hash],
                verbose=args.verbose,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def run_deduplication(self, command: DeduplicationCommand, params: DeduplicationParams):
        """Scan and match. Root validation errors end the run with exit code 1."""
        try:
            groups, stats = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
            )
        except RuntimeError as e:
            self.error_exit(str(e))

        if self.verbose:
            sys.stderr.write("\n")
            print(stats.print_summary())
        return groups, stats

    def print_group(self, idx: int, group: DuplicateGroup, report: ResolutionReport) -> None:
        """Per-group output: full listing in report mode, action lines in verbose mutating mode."""
        if self.quiet:
            return
        if report.action is DedupAction.REPORT:
            size_str = ConvertUtils.bytes_to_human(group.size)
            print(f"\n📁 Group {idx} | Size: {size_str} | Files: {len(group.files)}")
            for line in report.lines:
                print(f"   {line}")
        elif self.verbose:
            for line in report.lines:
                print(line)

    @staticmethod
    def format_summary(stats: DeduplicationStats, report: ResolutionReport) -> str:
        saved = ConvertUtils.bytes_to_human(report.bytes_saved)
        summary = f"Processed {stats.files_processed} files. "
        if report.action is DedupAction.SYMLINK:
            summary += f"Created {report.actions_performed} symlinks, saving {saved}."
        elif report.action is DedupAction.REMOVE:
            summary += f"Removed {report.actions_performed} files, saving {saved}."
        elif report.action is DedupAction.TRASH:
            summary += f"Moved {report.actions_performed} files to trash, saving {saved}."
        else:
            summary += f"Found {report.actions_performed} duplicates. Removing them would save {saved}."

        skipped = stats.read_errors + len(report.failures)
        if skipped:
            summary += f" Skipped {skipped} files due to errors."
        return summary

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        logger.setLevel(logging.INFO if self.verbose else logging.WARNING)

        self.validate_args(args)
        params = self.create_params(args)

        if self.verbose:
            print(f"Searching {', '.join(params.roots)} (action: {params.action.display_name})")

        command = DeduplicationCommand()
        groups, stats = self.run_deduplication(command, params)
        report = command.resolve(groups, params, group_callback=self.print_group)

        if not groups and not self.quiet:
            print("No duplicate groups found.")
        if stats.scan_errors:
            self.warning(f"{stats.scan_errors} path(s) could not be read while scanning")
        if report.failures:
            self.warning(f"{len(report.failures)} duplicate(s) could not be processed")

        print(self.format_summary(stats, report))

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
