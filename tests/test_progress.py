"""
Unit tests for the two-phase progress manager.
"""

import pytest
from photosweep.models import ScanStats
from photosweep.progress import ProgressManager


@pytest.fixture
def manager():
    pm = ProgressManager()
    pm.initialize()
    return pm


class TestLoadingPhase:
    """Test progress while the library is enumerated."""

    def test_initial_state(self, manager):
        assert manager.is_loading
        assert manager.total_asset_estimate == 1000
        assert manager.total_batches == 34
        assert manager.calculate_progress() == 0.0

    def test_fraction_of_estimate(self, manager):
        manager.update_loading_progress(500)
        assert manager.calculate_progress() == 0.25

    def test_explicit_estimate(self, manager):
        manager.update_loading_progress(100, 2000)
        assert manager.total_asset_estimate == 2000
        assert manager.total_batches == 67
        assert manager.calculate_progress() == pytest.approx(0.025)

    def test_estimate_grows_past_eighty_percent(self, manager):
        manager.update_loading_progress(900)
        assert manager.total_asset_estimate == 1125
        assert manager.total_batches == 38
        assert manager.calculate_progress() == pytest.approx(0.4)

    def test_estimate_kept_at_eighty_percent(self, manager):
        manager.update_loading_progress(800)
        assert manager.total_asset_estimate == 1000

    def test_monotonic_and_capped(self, manager):
        previous = 0.0
        for loaded in range(0, 20_000, 37):
            manager.update_loading_progress(loaded)
            progress = manager.calculate_progress()
            assert progress >= previous
            assert progress <= 0.5
            previous = progress

    def test_stats_projection_reports_loaded_count(self, manager):
        manager.update_loading_progress(321)
        projected = manager.project_stats(ScanStats(total_processed=0, monochrome_count=2))
        assert projected.total_processed == 321
        assert projected.monochrome_count == 2

    def test_initialize_resets(self, manager):
        manager.update_loading_progress(900)
        manager.start_processing_phase(900, 100)
        manager.initialize()
        assert manager.is_loading
        assert manager.loaded_asset_count == 0
        assert manager.calculate_progress() == 0.0


class TestProcessingPhase:
    """Test progress while batches are analyzed."""

    def test_starts_at_half(self, manager):
        manager.update_loading_progress(250)
        manager.start_processing_phase(250, 100)
        assert manager.is_processing
        assert manager.total_batches == 3
        assert manager.calculate_progress() == 0.5

    def test_batch_fraction(self, manager):
        manager.start_processing_phase(400, 100)
        manager.update_processing_progress(1)
        assert manager.calculate_progress() == pytest.approx(0.625)
        manager.update_processing_progress(4)
        assert manager.calculate_progress() == 1.0

    def test_monotonic_and_bounded(self, manager):
        manager.start_processing_phase(1234, 100)
        previous = manager.calculate_progress()
        for batch in range(1, manager.total_batches + 3):
            manager.update_processing_progress(batch)
            progress = manager.calculate_progress()
            assert 0.5 <= progress <= 1.0
            assert progress >= previous
            previous = progress

    def test_never_below_loading(self, manager):
        manager.update_loading_progress(10_000, 10_000)
        loading = manager.calculate_progress()
        manager.start_processing_phase(10_000, 100)
        assert manager.calculate_progress() >= loading

    def test_stats_projection_unchanged(self, manager):
        manager.start_processing_phase(100, 10)
        stats = ScanStats(total_processed=40)
        projected = manager.project_stats(stats)
        assert projected == stats
        assert projected is not stats


class TestUiUpdate:
    """Test progress snapshots."""

    def test_snapshot_fields(self, manager):
        manager.start_processing_phase(200, 100)
        manager.update_processing_progress(1)
        update = manager.get_ui_update(ScanStats(total_processed=100))
        assert update['phase'] == 'processing'
        assert update['progress'] == 0.75
        assert update['current_batch'] == 1
        assert update['total_batches'] == 2
        assert update['stats'].total_processed == 100

    def test_progress_info(self, manager):
        info = manager.get_progress_info()
        assert info['is_loading']
        assert not info['is_processing']
        assert info['loaded_asset_count'] == 0
