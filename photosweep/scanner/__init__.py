"""
Scanner package for PhotoSweep.

Provides signature extraction, similarity search and batch processing for
photo library scans.

Public API:
- list_photo_files: Newest-first listing of a photo directory
- sha256_hex / read_file_base64: Digest and byte reader primitives
- SignatureExtractor: Cache-first fingerprint + color signature extraction
- analyze_base64_sample: Color uniformity statistics of an encoded image
- calculate_similarity: Compare two fingerprints
- find_similar_photos: Incremental search over recent fingerprints
- run_bounded: Bounded concurrency executor with cooperative cancellation
- BatchProcessor: Process one batch of photos end to end
- has_heif_support: Check if HEIC/HEIF support is available
"""

from __future__ import annotations

from .file_discovery import PhotoFile, list_photo_files, supported_extensions
from .hashing import sha256_hex, read_file_base64
from .signatures import (
    SignatureExtractor,
    analyze_base64_sample,
    analyze_colors,
    calculate_fingerprint,
    classify_uniformity,
    default_color_signature,
)
from .similarity import (
    calculate_similarity,
    classify_similarity,
    find_similar_photos,
    is_duplicate,
    is_similar,
    pair_key,
)
from .parallel import run_bounded
from .batch import BatchProcessor

from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


__all__ = [
    # File discovery
    'PhotoFile',
    'list_photo_files',
    'supported_extensions',
    # Primitives
    'sha256_hex',
    'read_file_base64',
    # Signatures
    'SignatureExtractor',
    'analyze_base64_sample',
    'analyze_colors',
    'calculate_fingerprint',
    'classify_uniformity',
    'default_color_signature',
    # Similarity
    'calculate_similarity',
    'classify_similarity',
    'find_similar_photos',
    'is_duplicate',
    'is_similar',
    'pair_key',
    # Execution
    'run_bounded',
    'BatchProcessor',
    # Feature detection
    'has_heif_support',
]
