"""
External collaborators used by the scanning core.

The core only depends on the AssetSource and ImageTransformer protocols.
This module also provides the concrete implementations used by the CLI:

- DirectoryAssetSource: a photo library backed by a directory tree
- PillowImageTransformer: square thumbnails encoded as PNG with Pillow
"""

from __future__ import annotations

import asyncio
import base64
import dataclasses
import hashlib
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from .models import AssetPage, AssetRef
from .scanner.dependencies import Image
from .scanner.file_discovery import list_photo_files

logger = logging.getLogger(__name__)


class AssetSource(Protocol):
    """Paginated access to the photos of a library."""

    async def request_permission(self) -> bool:
        ...

    async def list_assets(self, page_size: int, cursor: Optional[str] = None) -> AssetPage:
        ...

    async def get_asset_info(self, asset_id: str) -> AssetRef:
        ...


@dataclass
class ResizeResult:
    """Location of a resized image, plus its base64 payload if requested."""
    uri: str
    base64: Optional[str] = None


class ImageTransformer(Protocol):
    """Resize-and-encode primitive."""

    async def resize(
        self,
        uri: str,
        width: int,
        height: int,
        base64: bool = False,
    ) -> ResizeResult:
        ...


def _read_dimensions(path: str) -> tuple[int, int]:
    """Read image size from the header without decoding pixels."""
    with Image.open(path) as img:
        return img.size


class DirectoryAssetSource:
    """
    Photo library backed by a directory of image files.

    Asset ids are absolute file paths. Assets are ordered by modification
    time, newest first, like a device library sorted by creation time.
    The directory is walked once, on the first listing request.
    """

    def __init__(self, root: str | Path, recursive: bool = True):
        self.root = Path(root)
        self.recursive = recursive
        self._listing: Optional[list[AssetRef]] = None
        self._by_id: dict[str, AssetRef] = {}

    async def request_permission(self) -> bool:
        return await asyncio.to_thread(self._check_access)

    def _check_access(self) -> bool:
        return self.root.is_dir() and os.access(self.root, os.R_OK | os.X_OK)

    def _build_listing(self) -> list[AssetRef]:
        assets = [
            AssetRef(id=photo.path, uri=photo.path, created_at=photo.modified)
            for photo in list_photo_files(self.root, recursive=self.recursive)
        ]
        logger.debug(f"Indexed {len(assets):,} photos under {self.root}")
        return assets

    async def _ensure_listing(self) -> list[AssetRef]:
        if self._listing is None:
            self._listing = await asyncio.to_thread(self._build_listing)
            self._by_id = {asset.id: asset for asset in self._listing}
        return self._listing

    async def list_assets(self, page_size: int, cursor: Optional[str] = None) -> AssetPage:
        """
        Return one page of assets.

        Args:
            page_size: Maximum number of assets in the page
            cursor: next_cursor of the previous page, None for the first page

        Raises:
            ValueError: If page_size is not positive or cursor is malformed
        """
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")

        listing = await self._ensure_listing()
        start = int(cursor) if cursor else 0
        end = start + page_size
        has_next = end < len(listing)

        return AssetPage(
            assets=listing[start:end],
            has_next_page=has_next,
            next_cursor=str(end) if has_next else None,
        )

    async def get_asset_info(self, asset_id: str) -> AssetRef:
        """
        Return the full reference for an asset, including its dimensions.

        Raises:
            KeyError: If the asset is not part of this library
            OSError: If the image header cannot be read
        """
        await self._ensure_listing()
        asset = self._by_id[asset_id]
        width, height = await asyncio.to_thread(_read_dimensions, asset.uri)
        return dataclasses.replace(asset, width=width, height=height)


class PillowImageTransformer:
    """
    Produces square PNG thumbnails with Pillow.

    Thumbnails are written to a work directory; one file per source and
    size, so repeated scans overwrite rather than accumulate files. Use as a
    context manager (or call close()) to remove a self-created work directory.
    """

    def __init__(self, work_dir: Optional[str | Path] = None):
        self._owns_dir = work_dir is None
        if work_dir is None:
            self.work_dir = Path(tempfile.mkdtemp(prefix='photosweep-'))
        else:
            self.work_dir = Path(work_dir)
            self.work_dir.mkdir(parents=True, exist_ok=True)

    def __enter__(self) -> 'PillowImageTransformer':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_dir:
            shutil.rmtree(self.work_dir, ignore_errors=True)

    async def resize(
        self,
        uri: str,
        width: int,
        height: int,
        base64: bool = False,
    ) -> ResizeResult:
        return await asyncio.to_thread(self._resize_sync, uri, width, height, base64)

    def _resize_sync(self, uri: str, width: int, height: int, with_base64: bool) -> ResizeResult:
        with Image.open(uri) as img:
            img.load()
            if img.mode not in ('RGB', 'RGBA'):
                has_alpha = img.mode in ('LA', 'PA') or 'transparency' in img.info
                img = img.convert('RGBA' if has_alpha else 'RGB')
            resized = img.resize((width, height), Image.Resampling.BILINEAR)

        out_name = f"{hashlib.sha1(uri.encode('utf-8')).hexdigest()}_{width}x{height}.png"
        out_path = self.work_dir / out_name
        resized.save(out_path, format='PNG')

        payload = None
        if with_base64:
            payload = base64.b64encode(out_path.read_bytes()).decode('ascii')

        return ResizeResult(uri=str(out_path), base64=payload)


__all__ = [
    'AssetSource',
    'ImageTransformer',
    'ResizeResult',
    'DirectoryAssetSource',
    'PillowImageTransformer',
]
