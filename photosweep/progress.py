"""
Two-phase progress tracking for PhotoSweep scans.

A scan first enumerates the library (loading, total unknown) and then
analyzes the collected photos in batches (processing, total known). The
ProgressManager maps both onto one value in [0, 1]: loading fills
[0, 0.5] and processing fills [0.5, 1], so a value above 0.5 means
processing has begun.
"""

from __future__ import annotations

import dataclasses
import math
from typing import Optional

from .config import (
    DEFAULT_ASSET_ESTIMATE,
    ESTIMATE_GROWTH_FACTOR,
    ESTIMATE_GROWTH_TRIGGER,
    LOADING_BATCH_ESTIMATE,
    LOADING_PHASE_MAX_PROGRESS,
    PROCESSING_PHASE_MIN_PROGRESS,
)
from .models import ScanStats


class ProgressManager:
    """
    State machine for scan progress.

    Phases: 'loading' (initial) and 'processing'. Completion is tracked by
    the orchestrator, not here.
    """

    def __init__(self):
        self.total_asset_estimate = DEFAULT_ASSET_ESTIMATE
        self.loaded_asset_count = 0
        self.current_batch = 0
        self.total_batches = 1
        self.phase = 'loading'
        self._loading_floor = 0.0

    def initialize(self, initial_estimate: int = DEFAULT_ASSET_ESTIMATE) -> None:
        """Reset to the start of the loading phase."""
        self.total_asset_estimate = initial_estimate
        self.loaded_asset_count = 0
        self.current_batch = 0
        self.total_batches = math.ceil(initial_estimate / LOADING_BATCH_ESTIMATE)
        self.phase = 'loading'
        self._loading_floor = 0.0

    def _loading_fraction(self) -> float:
        if self.total_asset_estimate <= 0:
            return 1.0 if self.loaded_asset_count > 0 else 0.0
        return min(1.0, self.loaded_asset_count / self.total_asset_estimate)

    def update_loading_progress(self, loaded_assets: int, new_estimate: Optional[int] = None) -> None:
        """
        Record the number of assets enumerated so far.

        Args:
            loaded_assets: Assets enumerated so far
            new_estimate: Replacement estimate of the library size, if known
        """
        self.loaded_asset_count = loaded_assets

        if new_estimate:
            self.total_asset_estimate = new_estimate
            self.total_batches = math.ceil(new_estimate / LOADING_BATCH_ESTIMATE)

        # Keep the loading bar from filling up on libraries larger than guessed
        if self.loaded_asset_count > self.total_asset_estimate * ESTIMATE_GROWTH_TRIGGER:
            self.total_asset_estimate = math.ceil(self.loaded_asset_count * ESTIMATE_GROWTH_FACTOR)
            self.total_batches = math.ceil(self.total_asset_estimate / LOADING_BATCH_ESTIMATE)

        # Growing the estimate lowers the ratio slightly; never report less than before
        self._loading_floor = max(self._loading_floor, self._loading_fraction())

    def start_processing_phase(self, total_assets: int, batch_size: int) -> None:
        """Switch to the processing phase with a known number of batches."""
        self.phase = 'processing'
        self.total_asset_estimate = total_assets
        self.total_batches = math.ceil(total_assets / batch_size)
        self.current_batch = 0

    def update_processing_progress(self, current_batch: int) -> None:
        self.current_batch = current_batch

    def calculate_progress(self) -> float:
        """Overall progress in [0, 1]."""
        if self.phase == 'loading':
            loading_percent = max(self._loading_floor, self._loading_fraction())
            return loading_percent * LOADING_PHASE_MAX_PROGRESS

        if self.total_batches <= 0:
            processing_percent = 1.0
        else:
            processing_percent = min(1.0, self.current_batch / self.total_batches)
        return PROCESSING_PHASE_MIN_PROGRESS + (1 - PROCESSING_PHASE_MIN_PROGRESS) * processing_percent

    @property
    def is_loading(self) -> bool:
        return self.phase == 'loading'

    @property
    def is_processing(self) -> bool:
        return self.phase == 'processing'

    def get_progress_info(self) -> dict:
        return {
            'phase': self.phase,
            'progress': self.calculate_progress(),
            'current_batch': self.current_batch,
            'total_batches': self.total_batches,
            'loaded_asset_count': self.loaded_asset_count,
            'total_asset_estimate': self.total_asset_estimate,
            'is_loading': self.is_loading,
            'is_processing': self.is_processing,
        }

    def project_stats(self, stats: ScanStats) -> ScanStats:
        """
        Stats as shown to the user.

        While loading, total_processed reports photos found so far instead
        of photos analyzed.
        """
        if self.is_loading:
            return dataclasses.replace(stats, total_processed=self.loaded_asset_count)
        return dataclasses.replace(stats)

    def get_ui_update(self, stats: ScanStats) -> dict:
        """Progress snapshot passed to progress callbacks."""
        return {
            'phase': self.phase,
            'progress': self.calculate_progress(),
            'current_batch': self.current_batch,
            'total_batches': self.total_batches,
            'stats': self.project_stats(stats),
        }


__all__ = ['ProgressManager']
