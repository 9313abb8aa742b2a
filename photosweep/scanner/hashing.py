"""
Hashing module for the scanner package.

Provides the byte reader and the cryptographic digest used to fingerprint
photo thumbnails.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib
from pathlib import Path


def sha256_hex(text: str, algorithm: str = 'sha256') -> str:
    """
    Calculate the cryptographic digest of a text.

    Args:
        text: Text to digest (encoded as UTF-8)
        algorithm: Hash algorithm to use (default: sha256)

    Returns:
        Hex digest (64 characters for sha256)
    """
    hasher = hashlib.new(algorithm)
    hasher.update(text.encode('utf-8'))
    return hasher.hexdigest()


async def read_file_base64(uri: str | Path) -> str:
    """
    Read a file and return its contents base64 encoded.

    Raises:
        OSError: If the file cannot be read
    """
    data = await asyncio.to_thread(Path(uri).read_bytes)
    return base64.b64encode(data).decode('ascii')


__all__ = [
    'sha256_hex',
    'read_file_base64',
]
