"""
State management for PhotoSweep.

Holds the state shared by the components of one scanning session: the
cancellation token, the signature caches that survive between scans, the
set of already evaluated photo pairs and the user-visible scan state.
"""

import logging
import threading
from collections import OrderedDict
from datetime import datetime
from typing import Any, Iterator, Optional

from .config import CACHE_TRIM_KEEP, CACHE_TRIM_THRESHOLD
from .models import ScanResult, ScanStats

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Cooperative cancellation flag.

    Only the orchestrator writes it (start/cancel); every worker loop reads
    it before starting its next unit of work.
    """

    def __init__(self):
        self._cancel_requested = False
        self._lock = threading.Lock()

    @property
    def cancel_requested(self) -> bool:
        """Check if cancel has been requested."""
        with self._lock:
            return self._cancel_requested

    def request_cancel(self):
        """Request cancellation of the current scan."""
        with self._lock:
            self._cancel_requested = True

    def reset(self):
        """Clear a previous cancellation before a new scan starts."""
        with self._lock:
            self._cancel_requested = False


class RecencyCache:
    """
    Insertion-ordered mapping from asset id to a cached signature.

    The most recently stored (or touched) entries sit at the end, which
    lets similarity search walk a bounded window of recent entries without
    scanning the whole cache.
    """

    def __init__(self, name: str = 'cache'):
        self.name = name
        self._entries: OrderedDict[str, Any] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def put(self, key: str, value: Any) -> None:
        """Store a value and mark it as the most recent entry."""
        self._entries[key] = value
        self._entries.move_to_end(key)

    def touch(self, key: str) -> None:
        """Mark an existing entry as the most recent one."""
        if key in self._entries:
            self._entries.move_to_end(key)

    def keys(self) -> list[str]:
        return list(self._entries.keys())

    def clear(self) -> None:
        self._entries.clear()

    def trim(
        self,
        threshold: int = CACHE_TRIM_THRESHOLD,
        keep: int = CACHE_TRIM_KEEP,
    ) -> int:
        """
        Drop the oldest entries once the cache grows past threshold.

        Args:
            threshold: Size above which trimming happens
            keep: Number of newest entries kept after trimming

        Returns:
            Number of entries removed
        """
        if len(self._entries) <= threshold:
            return 0

        removed = 0
        while len(self._entries) > keep:
            self._entries.popitem(last=False)
            removed += 1

        logger.debug(f"Trimmed {removed:,} entries from {self.name}")
        return removed

    def recent_before(self, key: str, limit: int) -> Iterator[tuple[str, Any]]:
        """
        Yield up to limit entries stored before key, newest first.

        If key is not cached, the newest entries of the whole cache are
        yielded instead. The walk starts from the newest end, so its cost
        is bounded by the distance of key from the end plus limit.
        """
        if limit <= 0:
            return

        found = key not in self._entries
        yielded = 0
        for candidate in reversed(self._entries):
            if not found:
                if candidate == key:
                    found = True
                continue
            yield candidate, self._entries[candidate]
            yielded += 1
            if yielded >= limit:
                return


class ScanCaches:
    """
    Signature caches and the processed-pair set shared by one orchestrator.

    The two caches persist across scans and are only trimmed at scan start;
    the pair set is cleared completely.
    """

    def __init__(self):
        self.fingerprints = RecencyCache('fingerprint cache')
        self.colors = RecencyCache('color cache')
        self.processed_pairs: set[tuple[str, str]] = set()

    def reset_for_scan(self) -> None:
        """Prepare the caches for a new scan run."""
        self.processed_pairs.clear()
        self.fingerprints.trim()
        self.colors.trim()


class ScanState:
    """
    Manages the user-visible state of a scan.

    Updated only by the orchestrator; read by the CLI and progress callbacks.
    """

    def __init__(self):
        self.reset()

    def reset(self):
        """Reset state to initial values."""
        self.status = 'idle'  # idle, loading, processing, complete, cancelled, error
        self.is_scanning = False
        self.progress = 0.0
        self.current_batch = 0
        self.total_batches = 0
        self.loaded_assets = 0
        self.results: list[ScanResult] = []
        self.stats = ScanStats()
        self.message = ''
        self.error: Optional[str] = None
        self.started_at: Optional[datetime] = None
        self.finished_at: Optional[datetime] = None

    @property
    def elapsed_seconds(self) -> float:
        if self.started_at is None:
            return 0.0
        end = self.finished_at or datetime.now()
        return (end - self.started_at).total_seconds()

    def to_status_dict(self) -> dict:
        """Return current status for reporting."""
        return {
            'status': self.status,
            'is_scanning': self.is_scanning,
            'progress': self.progress,
            'current_batch': self.current_batch,
            'total_batches': self.total_batches,
            'loaded_assets': self.loaded_assets,
            'stats': self.stats.to_dict(),
            'result_count': len(self.results),
            'message': self.message,
            'error': self.error,
            'elapsed_seconds': round(self.elapsed_seconds, 1),
        }
