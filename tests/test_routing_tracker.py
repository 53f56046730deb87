"""Tests for ai_router/routing/tracker.py - Outcome Tracker."""

import random
import threading

import pytest

from ai_router.providers.base import RequestOutcome
from ai_router.routing.tracker import OutcomeStats, OutcomeTracker


class TestOutcomeStats:
    """Tests for OutcomeStats."""

    def test_defaults(self):
        """New stats should be zeroed."""
        stats = OutcomeStats()
        assert stats.success_count == 0
        assert stats.total_count == 0
        assert stats.average_latency_ms == 0.0

    def test_success_rate_falls_back_to_declared(self):
        """Without history the declared reliability should be used."""
        assert OutcomeStats().success_rate(0.9) == 0.9

    def test_success_rate_observed(self):
        """With history the observed rate should be used."""
        stats = OutcomeStats(success_count=1, total_count=4, average_latency_ms=10.0)
        assert stats.success_rate(0.9) == 0.25

    def test_to_dict(self):
        """to_dict should use the caller-facing keys."""
        data = OutcomeStats(success_count=2, total_count=3, average_latency_ms=10.125).to_dict()
        assert data == {"success": 2, "total": 3, "avgLatency": 10.12}


class TestOutcomeTrackerRecord:
    """Tests for OutcomeTracker.record."""

    def test_counts(self):
        """record should increment success and total counts."""
        tracker = OutcomeTracker()
        tracker.record("a", True, 10.0)
        tracker.record("a", False, 20.0)
        tracker.record("a", True, 30.0)

        stats = tracker.get("a")
        assert stats.success_count == 2
        assert stats.total_count == 3

    def test_success_never_exceeds_total(self):
        """success_count <= total_count after every record."""
        tracker = OutcomeTracker()
        rng = random.Random(7)
        for _ in range(500):
            tracker.record("a", rng.random() < 0.7, rng.uniform(1, 500))
            stats = tracker.get("a")
            assert stats.success_count <= stats.total_count

    def test_incremental_average_matches_mean(self):
        """The running average should equal the arithmetic mean."""
        tracker = OutcomeTracker()
        rng = random.Random(3)
        latencies = [rng.uniform(0, 2000) for _ in range(250)]
        for i, latency in enumerate(latencies):
            tracker.record("a", i % 3 != 0, latency)

        assert tracker.get("a").average_latency_ms == pytest.approx(
            sum(latencies) / len(latencies)
        )

    def test_failures_update_latency(self):
        """Failed attempts should also move the average."""
        tracker = OutcomeTracker()
        tracker.record("a", False, 100.0)
        tracker.record("a", False, 300.0)
        assert tracker.get("a").average_latency_ms == 200.0

    def test_record_outcome(self):
        """record_outcome should read name, success and latency from the outcome."""
        tracker = OutcomeTracker()
        tracker.record_outcome(RequestOutcome.success("b", "ok", 42.0))
        stats = tracker.get("b")
        assert (stats.success_count, stats.total_count, stats.average_latency_ms) == (1, 1, 42.0)

    def test_providers_independent(self):
        """Records for one provider should not touch another."""
        tracker = OutcomeTracker()
        tracker.record("a", True, 10.0)
        assert tracker.get("b").total_count == 0

    def test_concurrent_records_not_lost(self):
        """Concurrent records from many threads should all be counted."""
        tracker = OutcomeTracker()
        per_thread = 200

        def worker():
            for _ in range(per_thread):
                tracker.record("a", True, 50.0)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        stats = tracker.get("a")
        assert stats.total_count == 8 * per_thread
        assert stats.success_count == 8 * per_thread
        assert stats.average_latency_ms == pytest.approx(50.0)


class TestOutcomeTrackerSnapshot:
    """Tests for snapshot / reset."""

    def test_snapshot_is_a_copy(self):
        """Mutating a snapshot should not affect the tracker."""
        tracker = OutcomeTracker()
        tracker.record("a", True, 10.0)
        snap = tracker.snapshot()
        snap["a"].success_count = 99
        assert tracker.get("a").success_count == 1

    def test_reset_clears_everything(self):
        """reset then snapshot should be empty regardless of prior volume."""
        tracker = OutcomeTracker()
        for i in range(1000):
            tracker.record(f"p{i % 5}", i % 2 == 0, float(i))

        tracker.reset()

        assert tracker.snapshot() == {}
        assert tracker.get("p0") == OutcomeStats()

    def test_reset_on_empty_tracker(self):
        """reset should be idempotent."""
        tracker = OutcomeTracker()
        tracker.reset()
        tracker.reset()
        assert tracker.snapshot() == {}
