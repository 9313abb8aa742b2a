"""
Configuration constants for PhotoSweep.

This module contains all configurable settings including:
- Supported image extensions for the directory-backed photo library
- Signature extraction sizes and classification thresholds
- Batching, parallelism and enumeration limits
- Progress split between the loading and processing phases
"""

import math
import os
from dataclasses import dataclass

# Image extensions treated as photos by the directory asset source
IMAGE_EXTENSIONS = {
    '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp', '.tiff', '.tif',
    '.heic', '.heif', '.avif',
    '.pbm', '.pgm', '.ppm', '.pnm',
    '.tga', '.ico',
}

# Signature extraction
# Side of the square thumbnail that is digested into the fingerprint
HASH_SIZE = 16
# Side of the square thumbnail sampled for the color signature
COLOR_ANALYSIS_SIZE = 32
# Maximum number of characters sampled from the encoded thumbnail
COLOR_SAMPLE_SIZE = 1000
# Sample variance is divided by this and clamped to [0, 1]
COLOR_VARIANCE_NORMALIZER = 2000

# Fallback color signature used when a transform fails
DEFAULT_DOMINANT_COLOR = '#777777'
DEFAULT_DOMINANT_PERCENT = 0.5

# Classification thresholds
MONOCHROME_THRESHOLD = 0.92   # uniformity >= this -> monochrome
SIMILARITY_THRESHOLD = 0.87   # similarity >= this -> similar
DUPLICATE_THRESHOLD = 0.98    # similarity > this -> duplicate

# Number of most recent fingerprints a new photo is compared against
SIMILARITY_WINDOW = 300

# Batch processing
BATCH_SIZE = 100
MAX_PARALLEL_OPERATIONS = 25

# Enumeration
INITIAL_PAGE_SIZE = 100
MEDIA_PAGE_SIZE = 200
MAX_MEDIA_ASSETS = 100_000
# Initial estimate multiplier applied to the first page length
INITIAL_ESTIMATE_FACTOR = 20
DEFAULT_ASSET_ESTIMATE = 1000

# Progress
LOADING_PHASE_MAX_PROGRESS = 0.5
PROCESSING_PHASE_MIN_PROGRESS = 0.5
# Estimated assets per batch while the real total is still unknown
LOADING_BATCH_ESTIMATE = 30
# Grow the estimate once this fraction of it has been loaded
ESTIMATE_GROWTH_TRIGGER = 0.8
ESTIMATE_GROWTH_FACTOR = 1.25

# Cache trimming applied at the start of every scan
CACHE_TRIM_THRESHOLD = 1000
CACHE_TRIM_KEEP = 500

# Cooperative yields (seconds)
SCAN_START_DELAY = 0.5
BATCH_YIELD_DELAY = 0.05
PAGE_YIELD_DELAY = 0.1
PAGE_YIELD_EVERY = 5

# User configuration location
CONFIG_DIR = os.path.join(os.path.expanduser('~'), '.photosweep')


@dataclass
class ScanSettings:
    """
    Tunables for one scan, defaulting to the module constants.

    Built by UserConfig.to_settings() so file/env overrides apply.
    """
    hash_size: int = HASH_SIZE
    color_analysis_size: int = COLOR_ANALYSIS_SIZE
    monochrome_threshold: float = MONOCHROME_THRESHOLD
    similarity_threshold: float = SIMILARITY_THRESHOLD
    duplicate_threshold: float = DUPLICATE_THRESHOLD
    similarity_window: int = SIMILARITY_WINDOW
    batch_size: int = BATCH_SIZE
    max_parallel_operations: int = MAX_PARALLEL_OPERATIONS
    initial_page_size: int = INITIAL_PAGE_SIZE
    media_page_size: int = MEDIA_PAGE_SIZE
    max_media_assets: int = MAX_MEDIA_ASSETS
    scan_start_delay: float = SCAN_START_DELAY
    batch_yield_delay: float = BATCH_YIELD_DELAY
    page_yield_delay: float = PAGE_YIELD_DELAY

    @property
    def similarity_parallelism(self) -> int:
        """Worker count for similarity search: half the extraction width, at least 2."""
        return max(2, math.ceil(self.max_parallel_operations / 2))
