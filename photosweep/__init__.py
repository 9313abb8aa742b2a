"""
PhotoSweep
==========
A photo library scanner that finds monochrome photos and duplicate or
visually similar photos.

Features:
- Compact per-photo signatures: 16x16 PNG fingerprint + color uniformity
- Incremental similarity search over a sliding window of recent photos
- Bounded concurrency with cooperative cancellation
- Two-phase progress reporting (loading, processing)
- Signature caches reused across scans
- CLI with TXT/CSV/JSON export
"""

__version__ = "1.0.0"
__author__ = "PhotoSweep contributors"

from .models import (
    AssetPage,
    AssetRef,
    ColorSignature,
    PhotoSignature,
    PhotoType,
    ScanResult,
    ScanStats,
    SimilarityMatch,
)
from .config import ScanSettings, IMAGE_EXTENSIONS
from .state import CancellationToken, RecencyCache, ScanCaches, ScanState
from .progress import ProgressManager
from .sources import (
    AssetSource,
    DirectoryAssetSource,
    ImageTransformer,
    PillowImageTransformer,
    ResizeResult,
)
from .scanner import (
    BatchProcessor,
    SignatureExtractor,
    calculate_similarity,
    find_similar_photos,
    run_bounded,
)
from .orchestrator import ScanOrchestrator
from .user_config import get_user_config

__all__ = [
    "AssetPage",
    "AssetRef",
    "ColorSignature",
    "PhotoSignature",
    "PhotoType",
    "ScanResult",
    "ScanStats",
    "SimilarityMatch",
    "ScanSettings",
    "IMAGE_EXTENSIONS",
    "CancellationToken",
    "RecencyCache",
    "ScanCaches",
    "ScanState",
    "ProgressManager",
    "AssetSource",
    "DirectoryAssetSource",
    "ImageTransformer",
    "PillowImageTransformer",
    "ResizeResult",
    "BatchProcessor",
    "SignatureExtractor",
    "calculate_similarity",
    "find_similar_photos",
    "run_bounded",
    "ScanOrchestrator",
    "get_user_config",
]
