"""
Batch processing module for the scanner package.

Runs one batch of photos through signature extraction and then similarity
search, and folds the outcome into the scan statistics. Only interesting
photos (monochrome, or similar to an earlier photo) become ScanResults;
every analyzed photo is still counted.
"""

from __future__ import annotations

import dataclasses
from functools import partial
from typing import TYPE_CHECKING, Optional

from ..config import ScanSettings
from ..models import AssetRef, PhotoSignature, ScanResult, ScanStats, SimilarityMatch
from ..state import CancellationToken, ScanCaches
from .dependencies import _logger
from .parallel import run_bounded
from .signatures import SignatureExtractor
from .similarity import find_similar_photos

if TYPE_CHECKING:
    from ..sources import AssetSource


class BatchProcessor:
    """
    Processes batches of photos against shared caches.

    The caches, the processed-pair set and the cancellation token are owned
    by the orchestrator and passed in by reference.
    """

    def __init__(
        self,
        source: AssetSource,
        extractor: SignatureExtractor,
        caches: ScanCaches,
        token: CancellationToken,
        settings: Optional[ScanSettings] = None,
    ):
        self.source = source
        self.extractor = extractor
        self.caches = caches
        self.token = token
        self.settings = settings or ScanSettings()

    async def resolve_asset(self, asset: AssetRef) -> AssetRef:
        """Full metadata for a listed asset, or the listed asset if lookup fails."""
        try:
            return await self.source.get_asset_info(asset.id)
        except Exception as e:
            _logger.debug(f"Using listed metadata for {asset.id}: {e}")
            return asset

    async def analyze_photo(self, asset: AssetRef) -> Optional[PhotoSignature]:
        """Extract signatures for one photo; None if the scan was cancelled."""
        if self.token.cancel_requested:
            return None

        photo = await self.resolve_asset(asset)
        return await self.extractor.extract(photo)

    async def search_similar(
        self,
        signature: PhotoSignature,
    ) -> Optional[tuple[PhotoSignature, SimilarityMatch]]:
        """Search recent fingerprints for matches; None if cancelled mid-flight."""
        if self.token.cancel_requested:
            return None

        match = await find_similar_photos(
            signature.photo.id,
            signature.fingerprint,
            self.caches.fingerprints,
            self.caches.processed_pairs,
            self.source.get_asset_info,
            window_size=self.settings.similarity_window,
            similar_threshold=self.settings.similarity_threshold,
            duplicate_threshold=self.settings.duplicate_threshold,
        )

        if self.token.cancel_requested:
            return None
        return signature, match

    async def process_batch(
        self,
        assets: list[AssetRef],
        current_stats: ScanStats,
        processed_count: int,
    ) -> tuple[list[ScanResult], ScanStats]:
        """
        Analyze a batch and search it for similar photos.

        Args:
            assets: Photos in this batch, in library order
            current_stats: Statistics accumulated before this batch
            processed_count: Number of photos handled by earlier batches

        Returns:
            Tuple of (interesting results, updated statistics). On an
            unexpected failure: ([], current_stats).
        """
        try:
            _logger.debug(f"Processing batch of {len(assets)} photos")

            analysis_tasks = [partial(self.analyze_photo, asset) for asset in assets]
            analysis_results = await run_bounded(
                analysis_tasks,
                self.settings.max_parallel_operations,
                self.token,
                label='Photo analysis',
            )
            signatures = [sig for sig in analysis_results if sig is not None]

            # Batch order decides which member of a matching pair reports it
            for sig in signatures:
                self.caches.fingerprints.touch(sig.photo.id)
                self.caches.colors.touch(sig.photo.id)

            stats = dataclasses.replace(current_stats)
            stats.total_processed = processed_count + len(signatures)
            stats.monochrome_count += sum(1 for sig in signatures if sig.color.is_monochrome)

            similarity_tasks = [partial(self.search_similar, sig) for sig in signatures]
            similarity_results = await run_bounded(
                similarity_tasks,
                self.settings.similarity_parallelism,
                self.token,
                label='Similarity search',
            )

            batch_results: list[ScanResult] = []
            for item in similarity_results:
                if item is None:
                    continue
                signature, match = item

                if match.is_duplicate:
                    stats.duplicates_found += 1
                elif match.matches:
                    stats.similar_photos_found += 1

                if signature.color.is_monochrome or match.matches:
                    batch_results.append(ScanResult.create(signature.photo, signature.color, match))

            _logger.debug(f"Batch complete: {len(batch_results)} interesting results")
            return batch_results, stats

        except Exception as e:
            _logger.exception(f"Batch processing failed: {e}")
            return [], current_stats


__all__ = ['BatchProcessor']
