"""
In-process API request metrics.
"""

import time
from datetime import datetime, timezone
from typing import Optional


class RequestMetrics:
    """Counters updated by the HTTP middleware and read by /api/metrics."""

    def __init__(self):
        self._started_at = time.monotonic()
        self.reset()

    def reset(self):
        self.request_count = 0
        self.error_count = 0
        self.total_response_time_ms = 0.0
        self.average_response_time_ms = 0.0
        self.last_error: Optional[str] = None
        self.last_error_time: Optional[str] = None
        self.concurrent_requests = 0
        self.max_concurrent_requests = 0

    def request_started(self):
        self.request_count += 1
        self.concurrent_requests += 1
        self.max_concurrent_requests = max(self.max_concurrent_requests, self.concurrent_requests)

    def request_finished(self, response_time_ms: float):
        self.total_response_time_ms += response_time_ms
        self.average_response_time_ms = self.total_response_time_ms / max(self.request_count, 1)
        self.concurrent_requests = max(0, self.concurrent_requests - 1)

    def record_error(self, error: BaseException):
        self.error_count += 1
        self.last_error = f"{type(error).__name__}: {error}"
        self.last_error_time = datetime.now(timezone.utc).isoformat()

    def snapshot(self) -> dict:
        return {
            "request_count": self.request_count,
            "error_count": self.error_count,
            "average_response_time_ms": round(self.average_response_time_ms, 2),
            "total_response_time_ms": round(self.total_response_time_ms, 2),
            "last_error": self.last_error,
            "last_error_time": self.last_error_time,
            "concurrent_requests": self.concurrent_requests,
            "max_concurrent_requests": self.max_concurrent_requests,
            "uptime_seconds": round(time.monotonic() - self._started_at, 1),
            "timestamp": datetime.now(timezone.utc).isoformat()
        }


metrics = RequestMetrics()
