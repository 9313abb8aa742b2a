"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
photo scanner command-line interface.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from ..utils.exporters import EXPORT_FORMATS


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Tunables default to None so that values from the user config file and
    environment apply unless a flag is given.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='photosweep',
        description='Scan a photo library for monochrome and duplicate/similar photos',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s ~/Pictures
      Scan a photo folder and print a report

  %(prog)s ~/Pictures --only similar --export dupes.csv --export-format csv
      Export only photos that matched an earlier photo

  %(prog)s ~/Pictures --workers 8 --batch-size 50
      Gentler scan for slow disks

Press Ctrl-C during a scan to stop it; photos analyzed so far are reported.
        """
    )

    parser.add_argument(
        'directory',
        type=Path,
        help='Photo library directory to scan'
    )

    parser.add_argument(
        '-r', '--no-recursive',
        action='store_true',
        help='Do not scan subdirectories'
    )

    # Tunables
    parser.add_argument(
        '-b', '--batch-size',
        type=int,
        default=None,
        help='Photos analyzed per batch. Default: 100'
    )

    parser.add_argument(
        '-w', '--workers',
        type=int,
        default=None,
        help='Concurrent signature extractions. Default: 25'
    )

    parser.add_argument(
        '-s', '--similarity-threshold',
        type=float,
        default=None,
        help='Minimum fingerprint similarity (0-1) for a match. Default: 0.87'
    )

    parser.add_argument(
        '-m', '--monochrome-threshold',
        type=float,
        default=None,
        help='Minimum color uniformity (0-1) for a monochrome photo. Default: 0.92'
    )

    parser.add_argument(
        '--max-assets',
        type=int,
        default=None,
        help='Maximum number of photos to scan. Default: 100000'
    )

    # Output
    parser.add_argument(
        '--only',
        choices=['all', 'monochrome', 'similar'],
        default='all',
        help='Which results to report and export. Default: all'
    )

    parser.add_argument(
        '--export',
        type=Path,
        default=None,
        help='Export results to file'
    )

    parser.add_argument(
        '--export-format',
        choices=list(EXPORT_FORMATS),
        default='txt',
        help='Export format. Default: txt'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bar'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose (debug) logging'
    )

    return parser


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments (sys.argv[1:] when argv is None)."""
    return create_parser().parse_args(argv)


__all__ = ['create_parser', 'parse_arguments']
