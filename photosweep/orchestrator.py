"""
Scan orchestration for PhotoSweep.

Provides the ScanOrchestrator class that drives a complete scan: permission
check, paginated enumeration of the photo library, sequential batch
processing and progress reporting. It owns the scan state, the signature
caches and the cancellation token shared by the scanner components.
"""

from __future__ import annotations

import asyncio
import logging
import math
from datetime import datetime
from typing import Awaitable, Callable, Optional

from .config import INITIAL_ESTIMATE_FACTOR, PAGE_YIELD_EVERY, ScanSettings
from .models import AssetRef, PhotoType, ScanResult
from .progress import ProgressManager
from .scanner import BatchProcessor, SignatureExtractor, read_file_base64, sha256_hex
from .sources import AssetSource, ImageTransformer
from .state import CancellationToken, ScanCaches, ScanState
from .utils import formatters

# Module logger
_logger = logging.getLogger(__name__)


class ScanOrchestrator:
    """
    Orchestrates photo library scans.

    One orchestrator can run many scans in sequence; signature caches
    persist between them (trimmed at each start), everything else is reset.
    """

    def __init__(
        self,
        source: AssetSource,
        transformer: ImageTransformer,
        settings: Optional[ScanSettings] = None,
        progress_callback: Optional[Callable[[dict], None]] = None,
        reader: Callable[[str], Awaitable[str]] = read_file_base64,
        digest: Callable[[str], str] = sha256_hex,
    ):
        """
        Initialize the scan orchestrator.

        Args:
            source: Photo library to scan
            transformer: Resize/encode primitive used for signatures
            settings: Scan tunables (defaults from config)
            progress_callback: Optional callback(update) receiving
                ProgressManager.get_ui_update() snapshots
            reader: Byte reader used for fingerprints
            digest: Digest used for fingerprints
        """
        self.source = source
        self.settings = settings or ScanSettings()
        self.progress_callback = progress_callback or (lambda update: None)

        self.state = ScanState()
        self.caches = ScanCaches()
        self.token = CancellationToken()
        self.progress = ProgressManager()

        self.extractor = SignatureExtractor(
            transformer, self.caches, self.settings, reader=reader, digest=digest,
        )
        self.batch_processor = BatchProcessor(
            source, self.extractor, self.caches, self.token, self.settings,
        )
        self.processed_count = 0

    @property
    def cancelled(self) -> bool:
        return self.token.cancel_requested

    def cancel_scan(self) -> None:
        """Request cooperative cancellation of the running scan."""
        if self.state.is_scanning:
            self.token.request_cancel()
            self.state.status = 'cancelled'
            self.state.message = 'Scan cancelled by user'
            _logger.info("Scan cancellation requested")

    def get_filtered_results(self, photo_type: Optional[PhotoType] = None) -> list[ScanResult]:
        """Results of the last scan, optionally restricted to one classification."""
        if photo_type is None:
            return list(self.state.results)
        return [r for r in self.state.results if r.photo_type == photo_type]

    def get_similar_photos(self) -> list[ScanResult]:
        """Results that matched at least one earlier photo."""
        return [r for r in self.state.results if r.has_similar]

    def _reset_scan(self) -> None:
        self.state.reset()
        self.caches.reset_for_scan()
        self.progress.initialize()
        self.token.reset()
        self.processed_count = 0

    def _emit_progress(self) -> None:
        update = self.progress.get_ui_update(self.state.stats)
        self.state.progress = update['progress']
        self.state.current_batch = update['current_batch']
        self.state.total_batches = update['total_batches']
        self.progress_callback(update)

    def _fail(self, message: str) -> None:
        self.token.request_cancel()
        self.state.status = 'error'
        self.state.error = message
        self.state.message = message

    async def start_scan(self) -> ScanState:
        """
        Execute a complete scan.

        Scan-fatal problems (permission denied, enumeration failure) are
        reported through state.status == 'error' and state.error rather
        than raised.

        Returns:
            The orchestrator's ScanState
        """
        if self.state.is_scanning:
            _logger.warning("A scan is already running")
            return self.state

        self._reset_scan()
        self.state.started_at = datetime.now()

        try:
            granted = await self.source.request_permission()
        except Exception as e:
            _logger.error(f"Permission request failed: {e}")
            granted = False

        if not granted:
            self._fail('Photo library permission denied')
            _logger.error("Cannot scan: photo library permission denied")
            return self.state

        self.state.is_scanning = True
        self.state.status = 'loading'
        self.state.message = 'Loading photos...'

        try:
            self._emit_progress()
            await asyncio.sleep(self.settings.scan_start_delay)

            # Phase 1: Enumerate the library
            assets = await self._load_assets()
            if assets is None:
                return self.state

            # Phase 2: Analyze in batches
            await self._process_batches(assets)
        finally:
            self.state.is_scanning = False
            self.state.finished_at = datetime.now()

        return self.state

    async def _load_assets(self) -> Optional[list[AssetRef]]:
        """
        Phase 1: Page through the library.

        Returns:
            Enumerated assets (newest first), or None if the scan stops here
        """
        max_assets = self.settings.max_media_assets
        assets: list[AssetRef] = []
        seen: set[str] = set()

        def add_page(page_assets: list[AssetRef]) -> int:
            added = 0
            for asset in page_assets:
                if asset.id not in seen:
                    seen.add(asset.id)
                    assets.append(asset)
                    added += 1
            return added

        try:
            first = await self.source.list_assets(self.settings.initial_page_size)
            add_page(first.assets)
            has_next = first.has_next_page
            cursor = first.next_cursor
            page_count = 1

            estimate = None
            if has_next and first.assets:
                estimate = len(first.assets) * INITIAL_ESTIMATE_FACTOR
            self.progress.update_loading_progress(len(assets), estimate)
            self.state.loaded_assets = len(assets)
            self._emit_progress()

            while has_next and len(assets) < max_assets and not self.cancelled:
                page = await self.source.list_assets(self.settings.media_page_size, cursor)
                if not page.assets or add_page(page.assets) == 0:
                    break

                has_next = page.has_next_page
                cursor = page.next_cursor
                page_count += 1

                self.progress.update_loading_progress(len(assets))
                self.state.loaded_assets = len(assets)

                if page_count % PAGE_YIELD_EVERY == 0 or len(assets) % 1000 == 0:
                    self._emit_progress()
                    await asyncio.sleep(self.settings.page_yield_delay)

        except Exception as e:
            _logger.exception(f"Failed to enumerate photo library: {e}")
            self._fail('Failed to load photos from the library')
            return None

        if len(assets) > max_assets:
            assets = assets[:max_assets]
        self.state.loaded_assets = len(assets)

        if self.cancelled:
            self.state.status = 'cancelled'
            _logger.info(f"Scan cancelled during loading ({len(assets):,} photos found)")
            return None

        if not assets:
            self.state.status = 'complete'
            self.state.message = 'No photos found on device'
            self.state.progress = 1.0
            _logger.info("No photos found")
            return None

        _logger.info(f"Found {formatters.format_number(len(assets))} photos")
        return assets

    async def _process_batches(self, assets: list[AssetRef]) -> None:
        """Phase 2: Run batches strictly one after another."""
        batch_size = self.settings.batch_size

        try:
            total_batches = math.ceil(len(assets) / batch_size)

            self.progress.start_processing_phase(len(assets), batch_size)
            self.state.status = 'processing'
            self.state.message = f'Analyzing {formatters.format_number(len(assets))} photos...'
            self._emit_progress()

            for index in range(total_batches):
                if self.cancelled:
                    break

                self.progress.update_processing_progress(index + 1)
                self._emit_progress()
                if self.cancelled:
                    break

                start = index * batch_size
                batch = assets[start:start + batch_size]

                results, stats = await self.batch_processor.process_batch(
                    batch, self.state.stats, self.processed_count,
                )
                self.processed_count += len(batch)

                if not self.cancelled:
                    self.state.stats = stats
                    self.state.results.extend(results)

                await asyncio.sleep(self.settings.batch_yield_delay)

        except Exception as e:
            _logger.exception(f"Scan error: {e}")
            self._fail('Error during scan')
            return

        if self.cancelled:
            self.state.status = 'cancelled'
            self.state.message = (
                f'Scan cancelled (analyzed {formatters.format_number(self.state.stats.total_processed)} photos)'
            )
            _logger.info(self.state.message)
            return

        self._finalize()

    def _finalize(self) -> None:
        """Mark the scan complete and build the summary message."""
        stats = self.state.stats
        self.state.status = 'complete'
        self.state.progress = 1.0

        elapsed_str = formatters.format_time_estimate(self.state.elapsed_seconds)
        self.state.message = (
            f'Analyzed {formatters.format_number(self.processed_count)} photos: '
            f'{formatters.format_number(stats.monochrome_count)} monochrome, '
            f'{formatters.format_number(stats.similar_total)} similar '
            f'({formatters.format_number(stats.duplicates_found)} duplicates) '
            f'• Completed in {elapsed_str}'
        )
        _logger.info(self.state.message)
        self.progress_callback({
            'phase': 'complete',
            'progress': 1.0,
            'current_batch': self.state.current_batch,
            'total_batches': self.state.total_batches,
            'stats': stats,
        })


__all__ = ['ScanOrchestrator']
