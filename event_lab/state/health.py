"""
Per-engine health tracking.

Each engine receives one ``HealthStatus`` record from the registry at
construction. The record is updated explicitly after every analysis and is
safe to share between threads.
"""

import threading
from dataclasses import dataclass
from typing import Any, Optional

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class HealthSnapshot:
    """Point-in-time copy of a health record."""
    name: str
    healthy: bool
    success_count: int
    error_count: int
    last_error: Optional[str]

    @property
    def total_analyses(self) -> int:
        return self.success_count + self.error_count

    @property
    def success_rate(self) -> float:
        total = self.total_analyses
        return self.success_count / total if total else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "healthy": self.healthy,
            "success_rate": self.success_rate,
            "last_error": self.last_error,
            "total_analyses": self.total_analyses,
        }


class HealthStatus:
    """Mutable health record for one engine; counters only increase."""

    def __init__(self, name: str):
        self.name = name
        self._lock = threading.Lock()
        self._healthy = True
        self._success_count = 0
        self._error_count = 0
        self._last_error: Optional[str] = None

    def record_success(self) -> None:
        """Mark a completed analysis; clears the last error."""
        with self._lock:
            self._success_count += 1
            self._healthy = True
            self._last_error = None

    def record_failure(self, error: str) -> None:
        """Mark a failed analysis."""
        with self._lock:
            self._error_count += 1
            self._healthy = False
            self._last_error = error

    def snapshot(self) -> HealthSnapshot:
        with self._lock:
            return HealthSnapshot(
                name=self.name,
                healthy=self._healthy,
                success_count=self._success_count,
                error_count=self._error_count,
                last_error=self._last_error,
            )

    @property
    def healthy(self) -> bool:
        return self.snapshot().healthy

    @property
    def success_rate(self) -> float:
        return self.snapshot().success_rate

    @property
    def total_analyses(self) -> int:
        return self.snapshot().total_analyses

    def to_dict(self) -> dict[str, Any]:
        return self.snapshot().to_dict()


class HealthRegistry:
    """Creates and owns the health records handed to engines."""

    def __init__(self):
        self._records: dict[str, HealthStatus] = {}
        self._lock = threading.Lock()

    def create(self, key: str, name: str) -> HealthStatus:
        """Create (or return the existing) record for an engine key."""
        with self._lock:
            record = self._records.get(key)
            if record is None:
                record = HealthStatus(name)
                self._records[key] = record
                logger.debug("Health record created", key=key, engine=name)
            return record

    def get(self, key: str) -> Optional[HealthStatus]:
        with self._lock:
            return self._records.get(key)

    def snapshot(self) -> dict[str, dict[str, Any]]:
        with self._lock:
            records = dict(self._records)
        return {key: record.to_dict() for key, record in records.items()}

    def unhealthy(self) -> list[str]:
        with self._lock:
            records = dict(self._records)
        return [key for key, record in records.items() if not record.healthy]
