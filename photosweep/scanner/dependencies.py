"""
Third-party imports for the scanner package.

Pillow is required. pillow-heif adds HEIC/HEIF decoding (the default format
of phone cameras) and tqdm drives the CLI progress bar; both are optional
and their absence only narrows what the tool can do.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Optional

# Module-level logger shared by the scanner modules
_logger = logging.getLogger(__name__)

try:
    from PIL import Image
except ImportError:
    raise ImportError(
        "Pillow is required to read photos.\n"
        "Install with: pip install Pillow"
    )

# Largest photo decoded before Pillow raises DecompressionBombError
MAX_PHOTO_PIXELS = 500_000_000


def _register_heif() -> bool:
    """Register the HEIC/HEIF opener with Pillow; False if unavailable."""
    try:
        from pillow_heif import register_heif_opener
    except ImportError:
        _logger.warning(
            "pillow-heif not installed - HEIC/HEIF photos will be skipped. "
            "Install with: pip install pillow-heif"
        )
        return False

    register_heif_opener()
    _logger.debug("HEIC/HEIF support enabled via pillow-heif")
    return True


def _configure_pillow() -> None:
    # Panoramas and camera RAW previews exceed Pillow's ~89MP default;
    # only small thumbnails are ever produced from them
    Image.MAX_IMAGE_PIXELS = MAX_PHOTO_PIXELS
    warnings.filterwarnings("ignore", category=Image.DecompressionBombWarning)


HAS_HEIF_SUPPORT = _register_heif()
_configure_pillow()

try:
    from tqdm import tqdm as _tqdm
    HAS_TQDM = True
except ImportError:
    _tqdm = None
    HAS_TQDM = False


def create_progress_bar(total: int, desc: str, **kwargs: Any) -> Optional[Any]:
    """
    Create a tqdm progress bar.

    Returns:
        tqdm instance, or None when tqdm is not installed
    """
    if _tqdm is None:
        return None
    return _tqdm(total=total, desc=desc, **kwargs)


__all__ = [
    'Image',
    'HAS_HEIF_SUPPORT',
    'HAS_TQDM',
    'MAX_PHOTO_PIXELS',
    'create_progress_bar',
    '_logger',
]
