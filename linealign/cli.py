"""
Command line entry point for LineAlign.

This module handles:
- Command line argument parsing
- Logging configuration
- Settings loading and overrides
- Reading input files
- Printing hunks, regions and alignment plans
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Optional, List, TextIO

from linealign import __version__
from linealign.core.engine import three_way_pass, two_way_pass
from linealign.core.errors import InputError, LineAlignError
from linealign.core.diff.line_differ import DiffAlgorithm, WhitespaceMode
from linealign.core.models import AlignmentPlan, DiffPass, MergePass
from linealign.services.file_io import FileIOService
from linealign.services.settings import ApplicationSettings, SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "linealign"
APP_VERSION = __version__


# =============================================================================
# Enums
# =============================================================================

class RunMode(Enum):
    """What the command compares."""
    TWO_WAY = auto()
    MERGE = auto()


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    paths: list[str] = field(default_factory=list)
    mode: RunMode = RunMode.TWO_WAY
    algorithm: Optional[DiffAlgorithm] = None
    ignore_case: Optional[bool] = None
    whitespace_mode: Optional[WhitespaceMode] = None
    config_file: Optional[str] = None
    log_level: str = "WARNING"
    log_file: Optional[str] = None


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""

    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True, stream: Optional[TextIO] = None):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        stream = stream or sys.stderr
        self.use_colors = use_colors and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure application logging.

    Console output goes to stderr so it never mixes with the printed plan.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True, stream=sys.stderr))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(
            log_file,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    # Reduce noise from third-party libraries
    logging.getLogger('chardet').setLevel(logging.WARNING)

    return root_logger


# =============================================================================
# Command Line Parsing
# =============================================================================

def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Line diff and three-way merge alignment planner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s old.txt new.txt                   Compare two files
  %(prog)s -m base.txt theirs.txt ours.txt   Three-way merge regions
  %(prog)s --algorithm patience a.py b.py    Use patience diff
        """
    )

    parser.add_argument(
        'paths',
        nargs='*',
        help='OLD NEW, or BASE THEIRS OURS with --merge'
    )
    parser.add_argument(
        '-m', '--merge',
        action='store_true',
        help='Three-way merge mode'
    )

    # Comparison options
    parser.add_argument(
        '--algorithm',
        choices=[a.name.lower() for a in DiffAlgorithm],
        default=None,
        help='Diff algorithm'
    )
    parser.add_argument(
        '--ignore-case',
        action='store_true',
        default=None,
        help='Compare lines case-insensitively'
    )
    parser.add_argument(
        '--whitespace',
        choices=[w.name.lower() for w in WhitespaceMode],
        default=None,
        help='Whitespace handling'
    )

    # Configuration
    parser.add_argument(
        '-c', '--config',
        help='Settings file path'
    )

    # Logging
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='WARNING',
        help='Log level'
    )
    parser.add_argument(
        '--log-file',
        help='Also write the log to this file'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {APP_VERSION}'
    )

    parsed = parser.parse_args(args)

    expected = 3 if parsed.merge else 2
    if len(parsed.paths) != expected:
        usage = "BASE THEIRS OURS" if parsed.merge else "OLD NEW"
        parser.error(f"expected {usage}, got {len(parsed.paths)} path(s)")

    result = CommandLineArgs()
    result.paths = list(parsed.paths)
    result.mode = RunMode.MERGE if parsed.merge else RunMode.TWO_WAY
    result.config_file = parsed.config
    result.ignore_case = parsed.ignore_case
    result.log_file = parsed.log_file

    if parsed.algorithm:
        result.algorithm = DiffAlgorithm[parsed.algorithm.upper()]
    if parsed.whitespace:
        result.whitespace_mode = WhitespaceMode[parsed.whitespace.upper()]

    result.log_level = 'DEBUG' if parsed.verbose else parsed.log_level

    return result


# =============================================================================
# Settings
# =============================================================================

def load_settings(args: CommandLineArgs) -> ApplicationSettings:
    """Load settings from disk and apply command line overrides."""
    manager = SettingsManager(Path(args.config_file) if args.config_file else None)
    settings = manager.load()
    logging.debug(f"Loaded settings from {manager.settings_path}")

    if args.algorithm is not None:
        settings.diff.algorithm = args.algorithm
    if args.ignore_case is not None:
        settings.diff.ignore_case = args.ignore_case
    if args.whitespace_mode is not None:
        settings.diff.whitespace_mode = args.whitespace_mode

    return settings


def read_lines(path: str, service: FileIOService) -> list[str]:
    """
    Read a file as rows.

    Raises:
        InputError: The file is missing, unreadable or binary
    """
    result = service.read_file(path)
    if not result.success or result.document is None:
        raise InputError(result.error or f"Could not read {path}", {"path": path})
    return result.document.lines


# =============================================================================
# Output
# =============================================================================

def format_plan(plan: AlignmentPlan, show_highlights: bool = True) -> list[str]:
    """Render padding (and optionally highlight) instructions."""
    lines = [f"padding: {len(plan.padding)}"]
    for p in plan.padding:
        origin = f" ({p.highlight_color_class.name.lower()})" if p.highlight_color_class else ""
        lines.append(f"  {p.target.name.lower()} @{p.insertion_row} +{p.line_count}{origin}")

    if show_highlights:
        lines.append(f"highlights: {len(plan.highlights)}")
        for h in plan.highlights:
            lines.append(f"  {h.space.name.lower()} {h.rows} {h.kind.name.lower()}")

    return lines


def format_two_way(diff_pass: DiffPass, show_highlights: bool = True) -> list[str]:
    """Render a two-way pass as plain text."""
    lines = [f"hunks: {len(diff_pass.hunks)}"]
    for hunk in diff_pass.hunks:
        lines.append(f"  {hunk.kind.name.lower()} old={hunk.base_rows} new={hunk.source_rows}")
        lines.extend(f"    + {text}" for text in hunk.lines)
    lines.extend(format_plan(diff_pass.plan, show_highlights))
    return lines


def format_merge(merge_pass: MergePass, show_highlights: bool = True) -> list[str]:
    """Render a three-way pass as plain text."""
    lines = []
    for label, hunks in (("theirs", merge_pass.theirs_hunks), ("ours", merge_pass.ours_hunks)):
        lines.append(f"{label} hunks: {len(hunks)}")
        for hunk in hunks:
            lines.append(f"  {hunk.kind.name.lower()} base={hunk.base_rows} {label}={hunk.source_rows}")

    lines.append(f"regions: {len(merge_pass.regions)} ({merge_pass.conflict_count} conflicting)")
    for region in merge_pass.regions:
        theirs = ",".join(str(r) for r in region.theirs_ranges) or "-"
        ours = ",".join(str(r) for r in region.ours_ranges) or "-"
        marker = " conflict" if region.is_conflict else ""
        lines.append(f"  base={region.base_rows} theirs={theirs} ours={ours}{marker}")

    lines.extend(format_plan(merge_pass.plan, show_highlights))
    return lines


# =============================================================================
# Main Function
# =============================================================================

def run(args: CommandLineArgs, out: Optional[TextIO] = None) -> int:
    """
    Execute one comparison and print the result.

    Returns:
        Exit code (0 for success)
    """
    out = out or sys.stdout
    settings = load_settings(args)
    options = settings.diff.to_options()
    service = FileIOService()

    texts = [read_lines(path, service) for path in args.paths]
    show_highlights = settings.alignment.emit_highlights
    clamp = settings.alignment.clamp_highlights

    if args.mode == RunMode.MERGE:
        base, theirs, ours = texts
        merge_pass = three_way_pass(base, theirs, ours, options, clamp)
        output = format_merge(merge_pass, show_highlights)
    else:
        old, new = texts
        diff_pass = two_way_pass(old, new, options, clamp)
        output = format_two_way(diff_pass, show_highlights)

    for line in output:
        print(line, file=out)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Application main entry point.

    Returns:
        Exit code (0 for success, 1 on error)
    """
    args = parse_arguments(argv)

    logger = setup_logging(args.log_level, Path(args.log_file) if args.log_file else None)
    logger.info(f"Starting {APP_NAME} v{APP_VERSION}")

    try:
        return run(args)
    except LineAlignError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

