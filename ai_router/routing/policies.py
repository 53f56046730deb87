"""
Provider selection policies.

Pure decision functions: given the available providers (registration order),
a stats snapshot and request options, they return which provider(s) to try
and in what order. They perform no I/O and hold no state; the router
executes their decisions.

Policy            Decision                                  Execution
----------------  ----------------------------------------  -------------------------
parallel          all providers                             fan-out, return all
weighted          one provider, P = weight / sum(weights)   single shot
priority          ascending priority                        stop on first success
cost-optimized    affordable providers, ascending cost      stop on first success
reliability       descending observed success rate          stop on first success
hybrid            top N by priority                         fan-out, fastest success
adaptive          descending success_rate / (latency + 1)   stop on first success

All sorts are stable, so ties keep registration order.
"""

import math
import random
from collections.abc import Mapping, Sequence

from ai_router.providers.base import ProviderConfig
from ai_router.routing.tracker import OutcomeStats

# Characters per token, coarse proxy used for cost estimates
CHARS_PER_UNIT = 4
DEFAULT_HYBRID_FANOUT = 3
DEFAULT_LATENCY_PRIOR_MS = 1000.0


def select_all(providers: Sequence[ProviderConfig]) -> list[ProviderConfig]:
    """Fan-out set: every available provider."""
    return list(providers)


def select_weighted(
    providers: Sequence[ProviderConfig],
    rng: random.Random | None = None,
) -> ProviderConfig | None:
    """Draw one provider with probability proportional to its weight.

    Args:
        providers: Available providers in registration order
        rng: Random source (module-level ``random`` if None)

    Returns:
        The chosen provider, or None if ``providers`` is empty.
        When every weight is zero the first provider is returned.
    """
    if not providers:
        return None

    total_weight = sum(p.weight for p in providers)
    if total_weight <= 0:
        # Degenerate weights: fall back to registration order
        return providers[0]

    draw = (rng or random).random() * total_weight
    cumulative = 0.0
    last_weighted = providers[0]
    for provider in providers:
        if provider.weight <= 0:
            continue
        cumulative += provider.weight
        last_weighted = provider
        if draw < cumulative:
            return provider

    # Floating point rounding left draw at the very top of the range
    return last_weighted


def rank_by_priority(providers: Sequence[ProviderConfig]) -> list[ProviderConfig]:
    """Ascending ``priority`` (lower is tried first)."""
    return sorted(providers, key=lambda p: p.priority)


def estimate_request_units(prompt: str) -> int:
    """Estimated token count of a prompt: ceil(characters / 4)."""
    return math.ceil(len(prompt) / CHARS_PER_UNIT)


def estimate_cost(provider: ProviderConfig, prompt: str) -> float:
    """Estimated cost of sending ``prompt`` to ``provider``."""
    return provider.cost_per_unit * estimate_request_units(prompt)


def rank_by_cost(
    providers: Sequence[ProviderConfig],
    prompt: str,
    max_cost: float,
) -> list[ProviderConfig]:
    """Affordable providers in ascending ``cost_per_unit``.

    Providers whose estimated request cost exceeds ``max_cost`` are dropped.
    """
    ranked = sorted(providers, key=lambda p: p.cost_per_unit)
    return [p for p in ranked if estimate_cost(p, prompt) <= max_cost]


def rank_by_reliability(
    providers: Sequence[ProviderConfig],
    stats: Mapping[str, OutcomeStats],
) -> list[ProviderConfig]:
    """Descending observed success rate, declared reliability without history."""

    def success_rate(provider: ProviderConfig) -> float:
        return stats.get(provider.name, OutcomeStats()).success_rate(
            provider.declared_reliability
        )

    return sorted(providers, key=success_rate, reverse=True)


def select_top_n(
    providers: Sequence[ProviderConfig],
    n: int = DEFAULT_HYBRID_FANOUT,
) -> list[ProviderConfig]:
    """The ``n`` best providers by priority."""
    return rank_by_priority(providers)[: max(n, 0)]


def adaptive_score(
    provider: ProviderConfig,
    stats: Mapping[str, OutcomeStats],
    latency_prior_ms: float = DEFAULT_LATENCY_PRIOR_MS,
) -> float:
    """Heuristic score: success_rate * 1 / (average_latency_ms + 1).

    Without history the declared reliability and ``latency_prior_ms`` are
    used. The formula is an unvalidated heuristic kept for parity.
    """
    entry = stats.get(provider.name)
    if entry is None or entry.total_count == 0:
        return provider.declared_reliability * (1 / (latency_prior_ms + 1))
    return entry.success_rate(provider.declared_reliability) * (
        1 / (entry.average_latency_ms + 1)
    )


def rank_adaptive(
    providers: Sequence[ProviderConfig],
    stats: Mapping[str, OutcomeStats],
    latency_prior_ms: float = DEFAULT_LATENCY_PRIOR_MS,
) -> list[ProviderConfig]:
    """Descending ``adaptive_score``."""
    return sorted(
        providers,
        key=lambda p: adaptive_score(p, stats, latency_prior_ms),
        reverse=True,
    )
