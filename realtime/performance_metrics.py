"""
Performance Metrics
Lightweight analysis-duration and failure counters for the orchestrator.
Counts are approximate by contract; the lock only keeps the deques sane.
"""

import logging
import time
from collections import defaultdict, deque
from threading import Lock
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class PerformanceMetrics:

    def __init__(self, target_analysis_time_ms: float = 100.0, history_size: int = 1000):
        self.target_analysis_time_ms = target_analysis_time_ms
        self._lock = Lock()
        self._started_at = time.time()
        self._durations = deque(maxlen=history_size)
        self._failures = deque(maxlen=history_size)
        self._counters = defaultdict(int)

    def record_analysis(self, duration_ms: float, tier: str, cached: bool = False,
                        incremental: bool = False) -> None:
        with self._lock:
            self._counters['total_analyses'] += 1
            self._counters[f'tier_{tier}'] += 1
            if cached:
                self._counters['cache_hits'] += 1
            if incremental:
                self._counters['incremental'] += 1
            self._durations.append(duration_ms)
            if duration_ms > self.target_analysis_time_ms:
                self._counters['over_budget'] += 1

        if duration_ms > self.target_analysis_time_ms:
            logger.debug(f"Analysis took {duration_ms:.1f}ms (target {self.target_analysis_time_ms}ms)")

    def record_rejection(self) -> None:
        with self._lock:
            self._counters['rejected'] += 1

    def record_failure(self, stage: str, error: Exception) -> None:
        with self._lock:
            self._counters['failures'] += 1
            self._counters[f'failures_{stage}'] += 1
            self._failures.append({
                'stage': stage,
                'error': str(error),
                'timestamp': time.time(),
            })

    def failure_count(self, stage: Optional[str] = None) -> int:
        with self._lock:
            if stage is None:
                return self._counters['failures']
            return self._counters[f'failures_{stage}']

    def summary(self) -> Dict[str, Any]:
        with self._lock:
            durations = list(self._durations)
            counters = dict(self._counters)
            recent_failures = list(self._failures)[-10:]

        average = sum(durations) / len(durations) if durations else 0.0
        return {
            'uptime_seconds': time.time() - self._started_at,
            'total_analyses': counters.get('total_analyses', 0),
            'average_analysis_time_ms': average,
            'max_analysis_time_ms': max(durations) if durations else 0.0,
            'target_analysis_time_ms': self.target_analysis_time_ms,
            'over_budget': counters.get('over_budget', 0),
            'cache_hits': counters.get('cache_hits', 0),
            'incremental': counters.get('incremental', 0),
            'rejected': counters.get('rejected', 0),
            'failures': counters.get('failures', 0),
            'counters': counters,
            'recent_failures': recent_failures,
        }

    def reset(self) -> None:
        with self._lock:
            self._durations.clear()
            self._failures.clear()
            self._counters.clear()
            self._started_at = time.time()
