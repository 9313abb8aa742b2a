"""
File discovery module for the scanner package.

Builds the listing of a directory-backed photo library: every decodable
photo file under a root, with its modification time, newest first.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Iterator, NamedTuple

from ..config import IMAGE_EXTENSIONS
from .dependencies import HAS_HEIF_SUPPORT, _logger

HEIF_EXTENSIONS = {'.heic', '.heif'}


class PhotoFile(NamedTuple):
    """A photo file found in the library."""
    path: str
    modified: datetime


def supported_extensions() -> set[str]:
    """Photo extensions Pillow can open in this environment."""
    if HAS_HEIF_SUPPORT:
        return set(IMAGE_EXTENSIONS)
    return IMAGE_EXTENSIONS - HEIF_EXTENSIONS


def _is_hidden(name: str) -> bool:
    # Covers .thumbnails caches and AppleDouble '._IMG_0001.JPG' sidecars
    return name.startswith('.')


def _walk(root: Path, recursive: bool) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root, onerror=lambda e: _logger.debug(f"Skipping: {e}")):
        if recursive:
            dirnames[:] = sorted(d for d in dirnames if not _is_hidden(d))
        else:
            dirnames[:] = []
        for name in filenames:
            if not _is_hidden(name):
                yield Path(dirpath) / name


def list_photo_files(root_path: str | Path, recursive: bool = True) -> list[PhotoFile]:
    """
    List the photos of a directory library, newest first.

    Args:
        root_path: Library root directory
        recursive: If True, include subdirectories

    Returns:
        PhotoFile entries sorted by (modified, path) descending

    Notes:
        - Hidden files and directories are skipped
        - HEIC/HEIF files are skipped when pillow-heif is not installed
        - Paths are resolved, so a photo reachable through several
          symlinks is listed once
        - Files that vanish or cannot be stat'ed while listing are skipped
    """
    extensions = supported_extensions()
    seen: set[str] = set()
    photos: list[PhotoFile] = []

    for filepath in _walk(Path(root_path), recursive):
        if filepath.suffix.lower() not in extensions:
            continue

        try:
            resolved = filepath.resolve()
            stat = resolved.stat()
        except OSError as e:
            _logger.debug(f"Skipping {filepath}: {e}")
            continue

        key = str(resolved)
        if key in seen or not resolved.is_file():
            continue
        seen.add(key)
        photos.append(PhotoFile(key, datetime.fromtimestamp(stat.st_mtime)))

    photos.sort(key=lambda p: (p.modified, p.path), reverse=True)
    return photos


__all__ = ['PhotoFile', 'list_photo_files', 'supported_extensions']
