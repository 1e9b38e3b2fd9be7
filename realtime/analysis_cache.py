"""
Analysis Cache
Bounded, time-boxed store of real-time projections keyed by (text, options).
"""

import copy
import hashlib
import json
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from tense_analyzer.base_types import AnalysisCacheEntry

logger = logging.getLogger(__name__)


def make_cache_key(text: str, options: Optional[Dict[str, Any]] = None) -> str:
    """Stable key for a text and its normalized options."""
    payload = json.dumps({'text': text, 'options': options or {}}, sort_keys=True, default=str)
    return hashlib.sha256(payload.encode('utf-8')).hexdigest()


class AnalysisCache:
    """
    Thread-safe TTL cache with an oldest-first capacity bound.

    Payloads are deep-copied on the way in and on the way out, so a caller
    can never see or mutate a half-written entry. Expired entries are misses
    even before the sweeper removes them.
    """

    def __init__(self, max_size: int = 50, ttl_seconds: float = 300.0,
                 cleanup_interval: float = 60.0, clock: Callable[[], float] = time.time):
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self.cleanup_interval = cleanup_interval
        self._clock = clock
        self._entries: Dict[str, AnalysisCacheEntry] = {}
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._sweeper: Optional[threading.Thread] = None
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _is_expired(self, entry: AnalysisCacheEntry, now: float) -> bool:
        return now - entry.created_at >= self.ttl_seconds

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            if self._is_expired(entry, now):
                del self._entries[key]
                self.misses += 1
                return None
            self.hits += 1
            return copy.deepcopy(entry.payload)

    def set(self, key: str, payload: Dict[str, Any]) -> None:
        entry = AnalysisCacheEntry(key=key, payload=copy.deepcopy(payload), created_at=self._clock())
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = entry
            self._evict_over_capacity()

    def _evict_over_capacity(self) -> int:
        """Drop oldest entries until under the bound. Caller holds the lock."""
        excess = len(self._entries) - self.max_size
        if excess <= 0:
            return 0
        oldest = sorted(self._entries.values(), key=lambda e: e.created_at)[:excess]
        for entry in oldest:
            del self._entries[entry.key]
        return len(oldest)

    def sweep(self) -> int:
        """Remove expired entries, then trim to capacity. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
            for key in expired:
                del self._entries[key]
            removed = len(expired) + self._evict_over_capacity()
        if removed:
            logger.debug(f"Analysis cache sweep removed {removed} entries")
        return removed

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            size = len(self._entries)
        lookups = self.hits + self.misses
        return {
            'size': size,
            'max_size': self.max_size,
            'ttl_seconds': self.ttl_seconds,
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': self.hits / lookups if lookups else 0.0,
        }

    # === BACKGROUND SWEEP ===

    def start_background_sweep(self) -> None:
        """Start the daemon thread that sweeps every ``cleanup_interval`` seconds."""
        if self._sweeper is not None and self._sweeper.is_alive():
            return
        self._stop_event.clear()

        def sweep_worker():
            while not self._stop_event.wait(self.cleanup_interval):
                try:
                    self.sweep()
                except Exception as e:
                    logger.error(f"Error in analysis cache sweeper: {e}")

        self._sweeper = threading.Thread(target=sweep_worker, name='analysis-cache-sweeper', daemon=True)
        self._sweeper.start()
        logger.info("Started analysis cache sweeper thread")

    def stop_background_sweep(self, timeout: float = 1.0) -> None:
        self._stop_event.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout)
            self._sweeper = None

    @property
    def sweeping(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_alive()
