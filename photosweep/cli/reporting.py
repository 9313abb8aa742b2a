"""
Report formatting and display for the CLI interface.

Prints scan statistics and the interesting results of a scan in a
human-readable format.
"""

from __future__ import annotations

from ..models import PhotoType, ScanResult, ScanStats
from ..utils.formatters import format_number, format_percent


def _print_section_header(title: str) -> None:
    """Print a section header with divider lines."""
    print("\n" + "-" * 70)
    print(title)
    print("-" * 70)


def _print_monochrome(results: list[ScanResult]) -> None:
    if not results:
        return

    _print_section_header(f"MONOCHROME PHOTOS ({len(results)})")
    for result in results:
        print(f"  {result.photo.uri}")
        print(f"         {result.photo.resolution} | color {result.dominant_color} | "
              f"uniformity {format_percent(result.dominant_percent)}")


def _print_similar(results: list[ScanResult]) -> None:
    if not results:
        return

    _print_section_header(f"DUPLICATE / SIMILAR PHOTOS ({len(results)})")
    for i, result in enumerate(results, 1):
        print(f"\nMatch {i} (similarity {format_percent(result.similarity_score)}):")
        print(f"  [PHOTO] {result.photo.uri}")
        for match in result.similar_photos:
            print(f"  [MATCH] {match.uri}")


def print_scan_report(
    stats: ScanStats,
    results: list[ScanResult],
    status: str,
    message: str = '',
) -> None:
    """
    Print a report of a finished scan.

    Args:
        stats: Scan statistics
        results: Results to list (already filtered by the caller)
        status: Final scan status
        message: Summary message of the scan
    """
    print("\n" + "=" * 70)
    print("PHOTO SCAN REPORT")
    print("=" * 70)

    if status == 'cancelled':
        print("\n(scan was cancelled; partial results)")

    print(f"\nPhotos analyzed:   {format_number(stats.total_processed)}")
    print(f"Monochrome:        {format_number(stats.monochrome_count)}")
    print(f"Duplicates:        {format_number(stats.duplicates_found)}")
    print(f"Similar:           {format_number(stats.similar_photos_found)}")

    _print_monochrome([r for r in results if r.photo_type == PhotoType.MONOCHROME])
    _print_similar([r for r in results if r.has_similar])

    print("\n" + "=" * 70)
    if message:
        print(message)
        print("=" * 70)


__all__ = ['print_scan_report']
