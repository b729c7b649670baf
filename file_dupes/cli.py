"""
Scans a directory tree and prints every group of files with identical
contents.

Usage: file-dupes [options] <root>
"""

import sys
from argparse import ArgumentParser
from pathlib import Path
from typing import Optional, TextIO

from file_dupes.config import COLOR_CHOICES, ON_ERROR_CHOICES, build_config
from file_dupes.errors import TraversalError, UsageError
from file_dupes.file_index import FileIndex
from file_dupes.logger import Logger
from file_dupes.report import Spinner, write_report
from file_dupes.scanner import Scanner

arg_parser = ArgumentParser(
                                prog="file-dupes",
                                description="Finds files with identical contents below a directory."
                           )
arg_parser.add_argument("root", help="Directory to scan.")
arg_parser.add_argument("--on-error", choices=ON_ERROR_CHOICES, default=None,
                        help="Abort on the first unreadable entry (default), or skip it and warn.")
arg_parser.add_argument("--workers", type=int, default=None,
                        help="Number of threads hashing files. Defaults to 1.")
arg_parser.add_argument("--color", choices=COLOR_CHOICES, default=None,
                        help="Shade alternating groups. 'auto' only does so on a terminal.")
arg_parser.add_argument("--log-file", type=Path, default=None,
                        help="Also write a log to this file. It must not exist yet.")
arg_parser.add_argument("--config", type=Path, default=None,
                        help="JSON file with default settings.")
arg_parser.add_argument("--verbose", action="store_true", default=None,
                        help="Print progress messages to stderr.")

def main(argv: Optional[list[str]]=None) -> int:
    """Runs the tool. Returns the exit status."""
    args = arg_parser.parse_args(argv)

    try:
        config = build_config(args.config,
                              on_error=args.on_error,
                              workers=args.workers,
                              color=args.color,
                              log_file=args.log_file,
                              verbose=args.verbose)
        log = Logger(log_file=config["log_file"], verbose=config["verbose"])
    except (UsageError, OSError) as err:
        arg_parser.print_usage(sys.stderr)
        print(f"ERROR: {err}", file=sys.stderr)
        return 2

    spinner = Spinner(sys.stderr, enabled=_is_terminal(sys.stderr))
    with log:
        scanner = Scanner(args.root,
                          on_error=config["on_error"],
                          workers=config["workers"],
                          logger=log,
                          progress=spinner)

        with FileIndex() as index:
            try:
                summary = scanner.scan_into(index)
            except TraversalError as err:
                spinner.clear()
                log.error(f"Scan aborted. {err}")
                return 1
            spinner.clear()

            write_report(index.duplicate_groups(),
                         sys.stdout,
                         color=use_color(config["color"], sys.stdout),
                         logger=log)

        if summary.files_skipped:
            log.warn(f"{summary.files_skipped} entries were skipped. The report covers the rest of the tree.")
    return 0

def use_color(color: str, stream: TextIO) -> bool:
    """Resolves a `--color` setting against the stream the report goes to."""
    if color == "always":
        return True
    if color == "never":
        return False
    return _is_terminal(stream)

def _is_terminal(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())

def run() -> None:
    """Console script entry point."""
    sys.exit(main())
