"""
Export functionality for PhotoSweep.

Provides functions to export scan results to TXT, CSV and JSON files.
"""

from __future__ import annotations

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import TextIO

from ..models import PhotoType, ScanResult, ScanStats

EXPORT_FORMATS = ('txt', 'csv', 'json')


def _export_txt(results: list[ScanResult], stats: ScanStats, file_handle: TextIO) -> None:
    """Export scan results to TXT format."""
    file_handle.write("PHOTO SCAN REPORT\n")
    file_handle.write("=" * 70 + "\n\n")
    file_handle.write(f"Photos analyzed:  {stats.total_processed:,}\n")
    file_handle.write(f"Monochrome:       {stats.monochrome_count:,}\n")
    file_handle.write(f"Duplicates:       {stats.duplicates_found:,}\n")
    file_handle.write(f"Similar:          {stats.similar_photos_found:,}\n")

    monochrome = [r for r in results if r.photo_type == PhotoType.MONOCHROME]
    similar = [r for r in results if r.has_similar]

    file_handle.write("\n\nMONOCHROME PHOTOS\n")
    file_handle.write("-" * 70 + "\n")
    for result in monochrome:
        file_handle.write(
            f"  {result.photo.uri}  {result.dominant_color}  "
            f"uniformity={result.dominant_percent:.3f}\n"
        )

    file_handle.write("\n\nSIMILAR PHOTOS\n")
    file_handle.write("-" * 70 + "\n")
    for i, result in enumerate(similar, 1):
        file_handle.write(f"\nGroup {i} (similarity {result.similarity_score:.3f}):\n")
        file_handle.write(f"  [PHOTO] {result.photo.uri}\n")
        for match in result.similar_photos:
            file_handle.write(f"  [MATCH] {match.uri}\n")


def _export_csv(results: list[ScanResult], file_handle: TextIO) -> None:
    """
    Export scan results to CSV format.

    One row per result photo and per matched photo. Columns: result_id,
    role, id, uri, type, dominant_color, dominant_percent, similarity_score
    """
    writer = csv.writer(file_handle)
    writer.writerow([
        'result_id', 'role', 'id', 'uri', 'type',
        'dominant_color', 'dominant_percent', 'similarity_score',
    ])

    for i, result in enumerate(results, 1):
        writer.writerow([
            i, 'photo', result.photo.id, result.photo.uri, result.photo_type.value,
            result.dominant_color or '',
            f"{result.dominant_percent:.4f}" if result.dominant_percent is not None else '',
            f"{result.similarity_score:.4f}" if result.similarity_score is not None else '',
        ])
        for match in result.similar_photos or []:
            writer.writerow([i, 'match', match.id, match.uri, '', '', '', ''])


def _export_json(results: list[ScanResult], stats: ScanStats, file_handle: TextIO) -> None:
    """Export scan results and statistics to JSON format."""
    json.dump(
        {
            'exported_at': datetime.now().isoformat(),
            'stats': stats.to_dict(),
            'results': [r.to_dict() for r in results],
        },
        file_handle,
        indent=2,
    )


def export_results(
    results: list[ScanResult],
    stats: ScanStats,
    output_path: Path,
    export_format: str = 'txt',
) -> None:
    """
    Export scan results to a file.

    Args:
        results: Interesting results of a scan
        stats: Statistics of the same scan
        output_path: Path to output file
        export_format: 'txt', 'csv' or 'json'. Default: 'txt'

    Raises:
        ValueError: If export_format is not supported
        OSError: If file cannot be written
    """
    if export_format not in EXPORT_FORMATS:
        raise ValueError(
            f"Unsupported export format: {export_format}. Use one of {', '.join(EXPORT_FORMATS)}."
        )

    with open(output_path, 'w', encoding='utf-8', newline='') as f:
        if export_format == 'txt':
            _export_txt(results, stats, f)
        elif export_format == 'csv':
            _export_csv(results, f)
        else:
            _export_json(results, stats, f)


__all__ = ['export_results', 'EXPORT_FORMATS']
