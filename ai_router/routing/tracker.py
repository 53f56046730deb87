"""
Outcome Tracker.

Accumulates per-provider success/failure counts and running average latency
for the life of the process. The adaptive and reliability policies read a
snapshot; the router writes one record per invocation attempt.
"""

import logging
import threading
from dataclasses import dataclass, replace

from ai_router.providers.base import RequestOutcome

logger = logging.getLogger(__name__)


@dataclass
class OutcomeStats:
    """Running statistics for one provider.

    Attributes:
        success_count: Successful attempts
        total_count: All attempts (success_count <= total_count)
        average_latency_ms: Mean latency over all attempts
    """

    success_count: int = 0
    total_count: int = 0
    average_latency_ms: float = 0.0

    def success_rate(self, declared_reliability: float) -> float:
        """Observed success rate, or the declared prior without history."""
        if self.total_count > 0:
            return self.success_count / self.total_count
        return declared_reliability

    def to_dict(self) -> dict[str, float | int]:
        """Convert to dictionary for serialization."""
        return {
            "success": self.success_count,
            "total": self.total_count,
            "avgLatency": round(self.average_latency_ms, 2),
        }


class OutcomeTracker:
    """Thread-safe store of per-provider ``OutcomeStats``.

    All updates go through a single lock, so the three fields of an entry
    always change together and concurrent records never lose an update.

    Example:
        >>> tracker = OutcomeTracker()
        >>> tracker.record("gemini", True, 120.0)
        >>> tracker.record("gemini", False, 80.0)
        >>> tracker.snapshot()["gemini"].average_latency_ms
        100.0
    """

    def __init__(self):
        self._stats: dict[str, OutcomeStats] = {}
        self._lock = threading.Lock()

    def record(self, provider_name: str, succeeded: bool, latency_ms: float) -> None:
        """Add one attempt to a provider's statistics.

        Args:
            provider_name: Provider the attempt was made against
            succeeded: Whether the attempt succeeded
            latency_ms: Measured latency of the attempt
        """
        with self._lock:
            current = self._stats.get(provider_name, OutcomeStats())
            new_total = current.total_count + 1
            self._stats[provider_name] = OutcomeStats(
                success_count=current.success_count + (1 if succeeded else 0),
                total_count=new_total,
                average_latency_ms=(
                    current.average_latency_ms * current.total_count + latency_ms
                )
                / new_total,
            )

    def record_outcome(self, outcome: RequestOutcome) -> None:
        """Record a ``RequestOutcome``."""
        self.record(outcome.provider_name, outcome.succeeded, outcome.latency_ms)

    def get(self, provider_name: str) -> OutcomeStats:
        """Copy of one provider's stats (zeroed if never recorded)."""
        with self._lock:
            return replace(self._stats.get(provider_name, OutcomeStats()))

    def snapshot(self) -> dict[str, OutcomeStats]:
        """Read-only copy of all statistics, keyed by provider name."""
        with self._lock:
            return {name: replace(stats) for name, stats in self._stats.items()}

    def reset(self) -> None:
        """Clear all accumulated statistics."""
        with self._lock:
            self._stats.clear()
        logger.info("Outcome statistics reset")
