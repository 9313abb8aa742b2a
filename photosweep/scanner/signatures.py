"""
Signature extraction module for the scanner package.

Turns a photo into two independent signatures:

- a fingerprint: SHA-256 of a 16x16 PNG thumbnail. This is a content
  digest, not a perceptual hash; a single changed byte in the thumbnail
  yields an unrelated fingerprint, so only pixel-identical thumbnails
  compare as duplicates.
- a color signature: a uniformity score derived from byte statistics of a
  base64 encoded 32x32 PNG thumbnail, plus a synthesized display color.

Both are cached per asset id, so extracting the same photo twice only runs
the image transforms once.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

import numpy as np

from ..config import (
    COLOR_SAMPLE_SIZE,
    COLOR_VARIANCE_NORMALIZER,
    DEFAULT_DOMINANT_COLOR,
    DEFAULT_DOMINANT_PERCENT,
    ScanSettings,
)
from ..models import AssetRef, ColorSignature, PhotoSignature, PhotoType
from ..state import ScanCaches
from .dependencies import _logger
from .hashing import read_file_base64, sha256_hex

if TYPE_CHECKING:
    from ..sources import ImageTransformer


def default_color_signature() -> ColorSignature:
    """Signature reported when color analysis fails."""
    return ColorSignature(
        photo_type=PhotoType.NORMAL,
        dominant_color=DEFAULT_DOMINANT_COLOR,
        dominant_percent=DEFAULT_DOMINANT_PERCENT,
    )


def classify_uniformity(uniformity: float, threshold: float) -> PhotoType:
    """Monochrome if uniformity reaches the threshold (inclusive)."""
    return PhotoType.MONOCHROME if uniformity >= threshold else PhotoType.NORMAL


def analyze_base64_sample(
    payload: str,
    sample_size: int = COLOR_SAMPLE_SIZE,
    normalizer: float = COLOR_VARIANCE_NORMALIZER,
) -> tuple[str, float]:
    """
    Derive a display color and a uniformity score from an encoded image.

    Up to sample_size characters are taken at a fixed stride spanning the
    whole payload. Their mean drives the synthesized color; their variance,
    scaled by normalizer and clamped to [0, 1], is subtracted from 1 to give
    the uniformity.

    Args:
        payload: Base64 text of an encoded image
        sample_size: Maximum number of sampled characters
        normalizer: Variance mapped to a uniformity of 0

    Returns:
        Tuple of ('#rrggbb' color, uniformity in [0, 1])

    Raises:
        ValueError: If payload is empty or not ASCII
    """
    if not payload:
        raise ValueError("Cannot analyze an empty payload")

    count = min(len(payload), sample_size)
    step = max(1, len(payload) // count)

    codes = np.frombuffer(payload.encode('ascii'), dtype=np.uint8)
    sample = codes[::step][:count].astype(np.float64)

    mean = float(sample.mean())
    variance = float(sample.var())

    normalized_variance = min(1.0, variance / normalizer)
    uniformity = 1.0 - normalized_variance

    r = min(255, max(0, int((mean * 1.5) % 256)))
    g = min(255, max(0, int((mean * 0.8) % 256)))
    b = min(255, max(0, int((mean * 0.5) % 256)))

    return f"#{r:02x}{g:02x}{b:02x}", uniformity


async def calculate_fingerprint(
    uri: str,
    transformer: ImageTransformer,
    size: int,
    reader: Callable[[str], Awaitable[str]] = read_file_base64,
    digest: Callable[[str], str] = sha256_hex,
) -> str:
    """
    Fingerprint a photo: digest of its size x size PNG thumbnail.

    Returns:
        64-character hex fingerprint, or empty string on error
    """
    try:
        resized = await transformer.resize(uri, size, size)
        encoded = await reader(resized.uri)
        return digest(encoded)
    except Exception as e:
        _logger.warning(f"Fingerprint calculation failed for {uri}: {e}")
        return ""


async def analyze_colors(
    uri: str,
    transformer: ImageTransformer,
    size: int,
    monochrome_threshold: float,
) -> ColorSignature:
    """
    Compute the color signature of a photo.

    Returns:
        ColorSignature, or the default NORMAL signature on error
    """
    try:
        resized = await transformer.resize(uri, size, size, base64=True)
        if not resized.base64:
            raise ValueError("Image conversion returned no base64 payload")

        dominant_color, uniformity = analyze_base64_sample(resized.base64)
        return ColorSignature(
            photo_type=classify_uniformity(uniformity, monochrome_threshold),
            dominant_color=dominant_color,
            dominant_percent=uniformity,
        )
    except Exception as e:
        _logger.warning(f"Color analysis failed for {uri}: {e}")
        return default_color_signature()


class SignatureExtractor:
    """
    Cache-first extraction of (fingerprint, color signature) pairs.

    Results are stored in the shared ScanCaches keyed by asset id; a cached
    value is returned without invoking the transformer again.
    """

    def __init__(
        self,
        transformer: ImageTransformer,
        caches: ScanCaches,
        settings: Optional[ScanSettings] = None,
        reader: Callable[[str], Awaitable[str]] = read_file_base64,
        digest: Callable[[str], str] = sha256_hex,
    ):
        self.transformer = transformer
        self.caches = caches
        self.settings = settings or ScanSettings()
        self.reader = reader
        self.digest = digest

    async def extract(self, asset: AssetRef) -> PhotoSignature:
        """Return the fingerprint and color signature of a photo."""
        color, fingerprint = await asyncio.gather(
            self._color_signature(asset),
            self._fingerprint(asset),
        )
        return PhotoSignature(photo=asset, fingerprint=fingerprint, color=color)

    async def _fingerprint(self, asset: AssetRef) -> str:
        cached = self.caches.fingerprints.get(asset.id)
        if cached is not None:
            return cached

        fingerprint = await calculate_fingerprint(
            asset.uri,
            self.transformer,
            self.settings.hash_size,
            reader=self.reader,
            digest=self.digest,
        )
        self.caches.fingerprints.put(asset.id, fingerprint)
        return fingerprint

    async def _color_signature(self, asset: AssetRef) -> ColorSignature:
        cached = self.caches.colors.get(asset.id)
        if cached is not None:
            return cached

        color = await analyze_colors(
            asset.uri,
            self.transformer,
            self.settings.color_analysis_size,
            self.settings.monochrome_threshold,
        )
        self.caches.colors.put(asset.id, color)
        return color


__all__ = [
    'SignatureExtractor',
    'analyze_base64_sample',
    'analyze_colors',
    'calculate_fingerprint',
    'classify_uniformity',
    'default_color_signature',
]
