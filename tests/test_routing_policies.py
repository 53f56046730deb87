"""Tests for ai_router/routing/policies.py - pure selection functions."""

import random
from collections import Counter

import pytest

from ai_router.routing import policies
from ai_router.routing.tracker import OutcomeStats


class TestSelectAll:
    """Tests for select_all (parallel fan-out set)."""

    def test_returns_every_provider(self, three_providers):
        """Every available provider should be selected."""
        assert policies.select_all(three_providers) == three_providers

    def test_empty(self):
        """No providers means an empty fan-out, not an error."""
        assert policies.select_all([]) == []


class TestSelectWeighted:
    """Tests for select_weighted."""

    def test_ratio_follows_weights(self, make_provider):
        """Weights {A: 3, B: 1} should be drawn roughly 3:1."""
        providers = [make_provider("A", weight=3), make_provider("B", weight=1)]
        rng = random.Random(1234)

        counts = Counter(policies.select_weighted(providers, rng).name for _ in range(10_000))

        ratio = counts["A"] / counts["B"]
        assert 3 * 0.9 <= ratio <= 3 * 1.1

    def test_zero_total_weight_falls_back_to_first(self, make_provider):
        """All-zero weights should return the first provider in registry order."""
        providers = [make_provider("first", weight=0), make_provider("second", weight=0)]
        for seed in range(20):
            assert policies.select_weighted(providers, random.Random(seed)).name == "first"

    def test_zero_weight_never_drawn(self, make_provider):
        """A zero-weight provider should never be chosen when others have weight."""
        providers = [make_provider("zero", weight=0), make_provider("one", weight=1)]
        rng = random.Random(5)
        assert {policies.select_weighted(providers, rng).name for _ in range(500)} == {"one"}

    def test_empty_returns_none(self):
        """No providers should yield None."""
        assert policies.select_weighted([], random.Random(0)) is None

    def test_reproducible_with_seed(self, three_providers):
        """The same seed should give the same sequence of choices."""
        rng_a, rng_b = random.Random(9), random.Random(9)
        first = [policies.select_weighted(three_providers, rng_a).name for _ in range(50)]
        second = [policies.select_weighted(three_providers, rng_b).name for _ in range(50)]
        assert first == second


class TestRankByPriority:
    """Tests for rank_by_priority / select_top_n."""

    def test_ascending_priority(self, three_providers):
        """Lower priority values should come first."""
        assert [p.name for p in policies.rank_by_priority(three_providers)] == [
            "beta",
            "alpha",
            "gamma",
        ]

    def test_ties_keep_registration_order(self, make_provider):
        """Equal priorities should keep registration order."""
        providers = [make_provider(n, priority=1) for n in ("x", "y", "z")]
        assert [p.name for p in policies.rank_by_priority(providers)] == ["x", "y", "z"]

    def test_top_n(self, make_provider):
        """select_top_n should take the N best by priority."""
        providers = [make_provider(f"p{i}", priority=10 - i) for i in range(5)]
        assert [p.name for p in policies.select_top_n(providers, 3)] == ["p4", "p3", "p2"]

    def test_top_n_larger_than_pool(self, three_providers):
        """N larger than the pool should return everything."""
        assert len(policies.select_top_n(three_providers, 10)) == 3


class TestCostPolicy:
    """Tests for estimate_request_units / rank_by_cost."""

    @pytest.mark.parametrize(
        "prompt,units",
        [("", 0), ("a", 1), ("abcd", 1), ("abcde", 2), ("x" * 400, 100)],
    )
    def test_request_units(self, prompt, units):
        """Units should be ceil(len / 4)."""
        assert policies.estimate_request_units(prompt) == units

    def test_estimate_cost(self, make_provider):
        """Estimated cost should be cost_per_unit * units."""
        provider = make_provider("a", cost_per_unit=0.5)
        assert policies.estimate_cost(provider, "abcdefgh") == 1.0

    def test_skips_over_budget(self, make_provider):
        """Only providers within budget should remain, cheapest first."""
        providers = [
            make_provider("expensive", cost_per_unit=0.02),
            make_provider("cheap", cost_per_unit=0.005),
        ]
        ranked = policies.rank_by_cost(providers, "abcd", max_cost=0.01)
        assert [p.name for p in ranked] == ["cheap"]

    def test_ascending_cost(self, three_providers):
        """Affordable providers should be ordered by ascending cost."""
        ranked = policies.rank_by_cost(three_providers, "abcd", max_cost=1.0)
        assert [p.name for p in ranked] == ["beta", "alpha", "gamma"]

    def test_nothing_affordable(self, three_providers):
        """A tiny budget should leave no candidates."""
        assert policies.rank_by_cost(three_providers, "x" * 1000, max_cost=0.0001) == []


class TestReliabilityPolicy:
    """Tests for rank_by_reliability."""

    def test_declared_without_history(self, three_providers):
        """Without history, declared reliability should decide the order."""
        ranked = policies.rank_by_reliability(three_providers, {})
        assert [p.name for p in ranked] == ["gamma", "alpha", "beta"]

    def test_observed_overrides_declared(self, three_providers):
        """Observed history should replace the declared prior."""
        stats = {
            "gamma": OutcomeStats(success_count=0, total_count=5, average_latency_ms=100),
            "beta": OutcomeStats(success_count=5, total_count=5, average_latency_ms=100),
        }
        ranked = policies.rank_by_reliability(three_providers, stats)
        assert [p.name for p in ranked] == ["beta", "alpha", "gamma"]


class TestAdaptivePolicy:
    """Tests for adaptive_score / rank_adaptive."""

    def test_score_formula(self, make_provider):
        """Score should be success_rate * 1 / (avg_latency + 1)."""
        provider = make_provider("a", declared_reliability=0.5)
        stats = {"a": OutcomeStats(success_count=3, total_count=4, average_latency_ms=99.0)}
        assert policies.adaptive_score(provider, stats) == pytest.approx(0.75 / 100)

    def test_score_prior_without_history(self, make_provider):
        """Without history: declared reliability and the latency prior."""
        provider = make_provider("a", declared_reliability=0.9)
        assert policies.adaptive_score(provider, {}, latency_prior_ms=999) == pytest.approx(
            0.9 / 1000
        )

    def test_fast_reliable_ranked_first(self, three_providers):
        """A fast, reliable history should outrank the prior of the others."""
        stats = {"beta": OutcomeStats(success_count=10, total_count=10, average_latency_ms=50)}
        ranked = policies.rank_adaptive(three_providers, stats)
        assert ranked[0].name == "beta"

    def test_order_without_history_follows_reliability(self, three_providers):
        """With a shared latency prior, declared reliability decides."""
        ranked = policies.rank_adaptive(three_providers, {})
        assert [p.name for p in ranked] == ["gamma", "alpha", "beta"]
