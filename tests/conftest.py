"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from PIL import Image

from photosweep.config import ScanSettings
from photosweep.models import AssetPage, AssetRef
from photosweep.sources import ResizeResult

# Encoded-image stand-ins: one char repeated reads as perfectly uniform,
# alternating extremes read as highly varied
UNIFORM_PAYLOAD = 'A' * 200
VARIED_PAYLOAD = 'Az' * 100


def make_assets(count: int, prefix: str = 'photo') -> list[AssetRef]:
    """Assets newest first, like a library listing."""
    base = datetime(2024, 1, 1, 12, 0, 0)
    return [
        AssetRef(
            id=f"{prefix}-{i}",
            uri=f"file:///library/{prefix}-{i}.jpg",
            created_at=base - timedelta(minutes=i),
        )
        for i in range(count)
    ]


class FakeAssetSource:
    """In-memory photo library with offset cursors."""

    def __init__(
        self,
        assets: list[AssetRef],
        permission: bool = True,
        fail_listing: bool = False,
        fail_info_ids: Optional[set] = None,
    ):
        self.assets = list(assets)
        self.permission = permission
        self.fail_listing = fail_listing
        self.fail_info_ids = fail_info_ids or set()
        self.list_calls = 0
        self.info_calls = 0

    async def request_permission(self) -> bool:
        return self.permission

    async def list_assets(self, page_size: int, cursor: Optional[str] = None) -> AssetPage:
        self.list_calls += 1
        if self.fail_listing:
            raise RuntimeError("library unavailable")

        start = int(cursor) if cursor else 0
        end = start + page_size
        has_next = end < len(self.assets)
        return AssetPage(
            assets=self.assets[start:end],
            has_next_page=has_next,
            next_cursor=str(end) if has_next else None,
        )

    async def get_asset_info(self, asset_id: str) -> AssetRef:
        self.info_calls += 1
        if asset_id in self.fail_info_ids:
            raise KeyError(asset_id)
        for asset in self.assets:
            if asset.id == asset_id:
                return asset
        raise KeyError(asset_id)


class FakeTransformer:
    """
    Resize primitive returning canned payloads.

    contents maps a source uri to the text the fingerprint reader sees;
    colors maps a source uri to the base64 payload of the color thumbnail.
    """

    def __init__(
        self,
        contents: Optional[dict] = None,
        colors: Optional[dict] = None,
        fail_uris: Optional[set] = None,
    ):
        self.contents = contents or {}
        self.colors = colors or {}
        self.fail_uris = fail_uris or set()
        self.calls: list[tuple[str, int, int, bool]] = []

    async def resize(self, uri: str, width: int, height: int, base64: bool = False) -> ResizeResult:
        self.calls.append((uri, width, height, base64))
        if uri in self.fail_uris:
            raise RuntimeError(f"cannot decode {uri}")
        payload = self.colors.get(uri, VARIED_PAYLOAD) if base64 else None
        return ResizeResult(uri=f"{uri}@{width}x{height}", base64=payload)

    async def read(self, uri: str) -> str:
        """Byte reader counterpart: content of the source behind a thumbnail uri."""
        source_uri = uri.rsplit('@', 1)[0]
        return self.contents.get(source_uri, source_uri)

    def uris_called(self) -> set:
        return {call[0] for call in self.calls}


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def sample_images(temp_dir):
    """
    Create a set of sample images for testing.

    Returns:
        dict with paths to:
        - red1.png, red2.png (pixel-identical)
        - gradient.png (many distinct colors)
        - gray.png (grayscale mode image)
        - corrupted.jpg (not an image, image extension)
        - notes.txt (not an image)
    """
    images = {}

    img1 = Image.new('RGB', (100, 100), color='red')
    path1 = temp_dir / "red1.png"
    img1.save(path1, 'PNG')
    images['red1'] = str(path1)

    path2 = temp_dir / "red2.png"
    img1.save(path2, 'PNG')
    images['red2'] = str(path2)

    gradient = Image.new('RGB', (64, 48))
    gradient.putdata([((x * 4) % 256, (y * 5) % 256, (x * y) % 256) for y in range(48) for x in range(64)])
    path3 = temp_dir / "gradient.png"
    gradient.save(path3, 'PNG')
    images['gradient'] = str(path3)

    gray = Image.new('L', (40, 30), color=128)
    path4 = temp_dir / "gray.png"
    gray.save(path4, 'PNG')
    images['gray'] = str(path4)

    path5 = temp_dir / "corrupted.jpg"
    path5.write_text("not an image")
    images['corrupted'] = str(path5)

    path6 = temp_dir / "notes.txt"
    path6.write_text("not an image")
    images['notes'] = str(path6)

    return images


@pytest.fixture
def fast_settings():
    """Settings without cooperative sleeps."""
    return ScanSettings(scan_start_delay=0, batch_yield_delay=0, page_yield_delay=0)
