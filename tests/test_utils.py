"""
Unit tests for formatting, export and report utilities.
"""

import csv
import json

import pytest
from photosweep.cli.reporting import print_scan_report
from photosweep.models import AssetRef, ColorSignature, PhotoType, ScanResult, ScanStats, SimilarityMatch
from photosweep.utils import export_results, format_number, format_percent, format_time_estimate


@pytest.fixture
def scan_output():
    """Two results (one monochrome, one similar) and matching stats."""
    mono_photo = AssetRef(id='m', uri='/lib/black.jpg', width=10, height=10)
    photo = AssetRef(id='b', uri='/lib/copy.jpg')
    original = AssetRef(id='a', uri='/lib/original.jpg')

    results = [
        ScanResult.create(mono_photo, ColorSignature(PhotoType.MONOCHROME, '#613420', 0.97)),
        ScanResult.create(
            photo,
            ColorSignature(PhotoType.NORMAL, '#8c4a2e', 0.59),
            SimilarityMatch(matches=[original], highest_similarity=1.0, is_duplicate=True),
        ),
    ]
    stats = ScanStats(total_processed=1234, monochrome_count=1, duplicates_found=1)
    return results, stats


class TestFormatters:
    """Test formatting helpers."""

    def test_format_number(self):
        assert format_number(1234567) == '1,234,567'
        assert format_number(0) == '0'

    def test_format_percent(self):
        assert format_percent(0.87) == '87.0%'
        assert format_percent(1.0, decimals=0) == '100%'

    @pytest.mark.parametrize("seconds,expected", [
        (45, '45s'),
        (150, '2m 30s'),
        (3665, '1h 1m'),
    ])
    def test_format_time_estimate(self, seconds, expected):
        assert format_time_estimate(seconds) == expected


class TestExportResults:
    """Test export_results in every format."""

    def test_txt(self, scan_output, temp_dir):
        results, stats = scan_output
        path = temp_dir / "report.txt"

        export_results(results, stats, path, 'txt')

        text = path.read_text(encoding='utf-8')
        assert 'PHOTO SCAN REPORT' in text
        assert '1,234' in text
        assert '/lib/black.jpg' in text
        assert '[PHOTO] /lib/copy.jpg' in text
        assert '[MATCH] /lib/original.jpg' in text

    def test_csv(self, scan_output, temp_dir):
        results, stats = scan_output
        path = temp_dir / "report.csv"

        export_results(results, stats, path, 'csv')

        with open(path, newline='', encoding='utf-8') as f:
            rows = list(csv.DictReader(f))
        assert [(r['result_id'], r['role'], r['id']) for r in rows] == [
            ('1', 'photo', 'm'),
            ('2', 'photo', 'b'),
            ('2', 'match', 'a'),
        ]
        assert rows[0]['type'] == 'monochrome'
        assert rows[0]['similarity_score'] == ''
        assert rows[1]['similarity_score'] == '1.0000'

    def test_json(self, scan_output, temp_dir):
        results, stats = scan_output
        path = temp_dir / "report.json"

        export_results(results, stats, path, 'json')

        data = json.loads(path.read_text(encoding='utf-8'))
        assert data['stats']['total_processed'] == 1234
        restored = [ScanResult.from_dict(r) for r in data['results']]
        assert restored == results

    def test_unsupported_format(self, scan_output, temp_dir):
        results, stats = scan_output
        with pytest.raises(ValueError):
            export_results(results, stats, temp_dir / "report.xml", 'xml')


class TestPrintScanReport:
    """Test the console report."""

    def test_report_sections(self, scan_output, capsys):
        results, stats = scan_output

        print_scan_report(stats, results, 'complete', 'Analyzed 1,234 photos')

        out = capsys.readouterr().out
        assert 'PHOTO SCAN REPORT' in out
        assert 'MONOCHROME PHOTOS (1)' in out
        assert 'DUPLICATE / SIMILAR PHOTOS (1)' in out
        assert '[MATCH] /lib/original.jpg' in out
        assert 'Analyzed 1,234 photos' in out
        assert 'cancelled' not in out

    def test_cancelled_note(self, capsys):
        print_scan_report(ScanStats(), [], 'cancelled')
        assert 'scan was cancelled' in capsys.readouterr().out
