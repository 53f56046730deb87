"""
Provider Router.

Binds a ``ProviderRegistry``, an invoker and an ``OutcomeTracker`` and runs
the selection policies against them. Every attempt, whatever the policy,
is recorded in the tracker before the router returns.

Usage:
    from ai_router.routing import ProviderRouter, SelectionMethod

    router = ProviderRouter(registry, HttpProviderInvoker())

    # Dispatch by method name (as the HTTP endpoint does)
    result = await router.route("priority", AIRequest(prompt="Tagline for a bakery"))
    print(result.outcome.provider_name, result.outcome.content)

    # Or call a policy directly
    outcomes = await router.call_parallel(AIRequest(prompt="..."))
"""

import asyncio
import logging
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ai_router.exceptions import (
    AllProvidersFailedError,
    InvalidMethodError,
    NoAffordableProviderError,
    NoProvidersAvailableError,
    PolicyExhaustedError,
)
from ai_router.providers.base import AIRequest, ProviderConfig, RequestOutcome
from ai_router.providers.invoker import DEFAULT_TIMEOUT_SECONDS, TIMEOUT_MESSAGE, Invoker
from ai_router.providers.registry import ProviderRegistry
from ai_router.routing import policies
from ai_router.routing.tracker import OutcomeTracker

logger = logging.getLogger(__name__)

DEFAULT_MAX_COST = 0.01


class SelectionMethod(str, Enum):
    """Selection policies callers can ask for by name."""

    PARALLEL = "parallel"
    WEIGHTED = "weighted"
    PRIORITY = "priority"
    COST_OPTIMIZED = "cost-optimized"
    RELIABILITY = "reliability"
    HYBRID = "hybrid"
    ADAPTIVE = "adaptive"


def valid_method_names() -> list[str]:
    """Names accepted by ``parse_method``."""
    return [m.value for m in SelectionMethod]


def parse_method(name: "str | SelectionMethod") -> SelectionMethod:
    """Resolve a method name.

    Raises:
        InvalidMethodError: If the name is not a known selection method
    """
    if isinstance(name, SelectionMethod):
        return name
    try:
        return SelectionMethod(name)
    except ValueError:
        raise InvalidMethodError(str(name), valid_method_names()) from None


@dataclass
class RouteResult:
    """What a policy produced for one logical request.

    Attributes:
        method: Policy that ran
        outcome: Chosen outcome (None for parallel fan-out)
        outcomes: Every attempt, in attempt (or candidate) order
        max_cost: Budget used by cost-optimized selection
    """

    method: SelectionMethod
    outcome: RequestOutcome | None
    outcomes: list[RequestOutcome] = field(default_factory=list)
    max_cost: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Caller-facing response body."""
        if self.method is SelectionMethod.PARALLEL:
            return {
                "success": True,
                "method": self.method.value,
                "results": [o.to_dict() for o in self.outcomes],
                "message": f"Called {len(self.outcomes)} AI services in parallel",
            }

        data: dict[str, Any] = {
            "success": True,
            "method": self.method.value,
            "result": self.outcome.to_dict() if self.outcome else None,
            "attempts": [o.to_dict() for o in self.outcomes],
            "message": (
                f"Used {self.method.value} selection with "
                f"{self.outcome.provider_name if self.outcome else 'no provider'}"
            ),
        }
        if self.max_cost is not None:
            data["maxCost"] = self.max_cost
        return data


class ProviderRouter:
    """Routes AI requests to providers according to a selection policy.

    Attributes:
        registry: Provider configurations
        invoker: Performs single provider calls
        tracker: Per-provider outcome statistics owned by this router
        hybrid_fanout: N for hybrid-fastest-of-N
        default_max_cost: Budget for cost-optimized when the request has none
        latency_prior_ms: Adaptive latency prior for providers without history
        request_timeout: Upper bound on any single invocation, seconds
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        invoker: Invoker,
        tracker: OutcomeTracker | None = None,
        *,
        hybrid_fanout: int = policies.DEFAULT_HYBRID_FANOUT,
        default_max_cost: float = DEFAULT_MAX_COST,
        latency_prior_ms: float = policies.DEFAULT_LATENCY_PRIOR_MS,
        request_timeout: float = DEFAULT_TIMEOUT_SECONDS,
        rng: random.Random | None = None,
    ):
        self.registry = registry
        self.invoker = invoker
        self.tracker = tracker or OutcomeTracker()
        self.hybrid_fanout = hybrid_fanout
        self.default_max_cost = default_max_cost
        self.latency_prior_ms = latency_prior_ms
        self.request_timeout = request_timeout
        self.rng = rng or random.Random()

        self._handlers = {
            SelectionMethod.PARALLEL: self._run_parallel,
            SelectionMethod.WEIGHTED: self._run_weighted,
            SelectionMethod.PRIORITY: self._run_priority,
            SelectionMethod.COST_OPTIMIZED: self._run_cost_optimized,
            SelectionMethod.RELIABILITY: self._run_reliability,
            SelectionMethod.HYBRID: self._run_hybrid,
            SelectionMethod.ADAPTIVE: self._run_adaptive,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def route(self, method: "str | SelectionMethod", request: AIRequest) -> RouteResult:
        """Run the named policy for ``request``.

        Raises:
            InvalidMethodError: Unknown method name
            PolicyExhaustedError: No candidate produced a success
        """
        selection = parse_method(method)
        logger.info(f"Routing request with method: {selection.value}", extra={"method": selection.value})
        return await self._handlers[selection](request)

    async def call_parallel(self, request: AIRequest) -> list[RequestOutcome]:
        """Call every available provider concurrently and return all outcomes."""
        return (await self._run_parallel(request)).outcomes

    async def call_weighted(self, request: AIRequest) -> RequestOutcome:
        """Call one provider drawn by weight. No retry on failure."""
        return (await self._run_weighted(request)).outcome

    async def call_priority(self, request: AIRequest) -> RequestOutcome:
        """Try providers by ascending priority until one succeeds."""
        return (await self._run_priority(request)).outcome

    async def call_cost_optimized(
        self,
        request: AIRequest,
        max_cost: float | None = None,
    ) -> RequestOutcome:
        """Try affordable providers by ascending cost until one succeeds."""
        return (await self._run_cost_optimized(request, max_cost)).outcome

    async def call_reliability(self, request: AIRequest) -> RequestOutcome:
        """Try providers by descending success rate until one succeeds."""
        return (await self._run_reliability(request)).outcome

    async def call_hybrid(self, request: AIRequest) -> RequestOutcome:
        """Call the top N providers concurrently; return the fastest success."""
        return (await self._run_hybrid(request)).outcome

    async def call_adaptive(self, request: AIRequest) -> RequestOutcome:
        """Try providers by descending adaptive score until one succeeds."""
        return (await self._run_adaptive(request)).outcome

    def get_stats(self) -> dict[str, dict]:
        """Serializable snapshot of per-provider statistics."""
        return {name: stats.to_dict() for name, stats in self.tracker.snapshot().items()}

    def reset_stats(self) -> None:
        """Clear the outcome statistics."""
        self.tracker.reset()

    # ------------------------------------------------------------------
    # Policy execution
    # ------------------------------------------------------------------

    async def _run_parallel(self, request: AIRequest) -> RouteResult:
        candidates = policies.select_all(self.registry.list_available())
        outcomes = await self._fan_out(candidates, request, SelectionMethod.PARALLEL)
        return RouteResult(SelectionMethod.PARALLEL, None, outcomes)

    async def _run_weighted(self, request: AIRequest) -> RouteResult:
        method = SelectionMethod.WEIGHTED
        chosen = policies.select_weighted(self._require_available(method), self.rng)
        return await self._try_in_order(method, [chosen], request)

    async def _run_priority(self, request: AIRequest) -> RouteResult:
        method = SelectionMethod.PRIORITY
        candidates = policies.rank_by_priority(self._require_available(method))
        return await self._try_in_order(method, candidates, request)

    async def _run_cost_optimized(
        self,
        request: AIRequest,
        max_cost: float | None = None,
    ) -> RouteResult:
        method = SelectionMethod.COST_OPTIMIZED
        if max_cost is None:
            max_cost = request.options.max_cost
        if max_cost is None:
            max_cost = self.default_max_cost

        candidates = policies.rank_by_cost(
            self._require_available(method), request.prompt, max_cost
        )
        if not candidates:
            self._log_exhausted(method, "no provider under budget")
            raise NoAffordableProviderError(
                f"No affordable AI service available (max cost {max_cost})",
                method=method.value,
            )

        result = await self._try_in_order(
            method,
            candidates,
            request,
            error_cls=NoAffordableProviderError,
            message=f"No affordable AI service available (max cost {max_cost})",
        )
        result.max_cost = max_cost
        return result

    async def _run_reliability(self, request: AIRequest) -> RouteResult:
        method = SelectionMethod.RELIABILITY
        candidates = policies.rank_by_reliability(
            self._require_available(method), self.tracker.snapshot()
        )
        return await self._try_in_order(method, candidates, request)

    async def _run_hybrid(self, request: AIRequest) -> RouteResult:
        method = SelectionMethod.HYBRID
        candidates = policies.select_top_n(self._require_available(method), self.hybrid_fanout)
        outcomes = await self._fan_out(candidates, request, method)

        successes = [o for o in outcomes if o.succeeded]
        if not successes:
            last = outcomes[-1] if outcomes else None
            self._log_exhausted(method, "all failed")
            raise AllProvidersFailedError(
                "All AI services failed",
                method=method.value,
                provider=last.provider_name if last else None,
                last_error=last.error_message if last else None,
                attempts=outcomes,
            )

        # min() keeps the first of equal latencies, i.e. priority order
        fastest = min(successes, key=lambda o: o.latency_ms)
        return RouteResult(method, fastest, outcomes)

    async def _run_adaptive(self, request: AIRequest) -> RouteResult:
        method = SelectionMethod.ADAPTIVE
        candidates = policies.rank_adaptive(
            self._require_available(method),
            self.tracker.snapshot(),
            self.latency_prior_ms,
        )
        return await self._try_in_order(method, candidates, request)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_available(self, method: SelectionMethod) -> list[ProviderConfig]:
        available = self.registry.list_available()
        if not available:
            self._log_exhausted(method, "no providers")
            raise NoProvidersAvailableError("No AI services available", method=method.value)
        return available

    async def _try_in_order(
        self,
        method: SelectionMethod,
        candidates: list[ProviderConfig],
        request: AIRequest,
        error_cls: type[PolicyExhaustedError] = AllProvidersFailedError,
        message: str = "All AI services failed",
    ) -> RouteResult:
        """Attempt candidates strictly in order, stopping at the first success."""
        attempts: list[RequestOutcome] = []
        for config in candidates:
            outcome = await self._attempt(config, request, method)
            attempts.append(outcome)
            if outcome.succeeded:
                logger.info(
                    f"{method.value} selection served by {config.name}",
                    extra={"method": method.value, "provider": config.name},
                )
                return RouteResult(method, outcome, attempts)

        last = attempts[-1] if attempts else None
        self._log_exhausted(method, "all failed")
        raise error_cls(
            message,
            method=method.value,
            provider=last.provider_name if last else None,
            last_error=last.error_message if last else None,
            attempts=attempts,
        )

    async def _fan_out(
        self,
        candidates: list[ProviderConfig],
        request: AIRequest,
        method: SelectionMethod,
    ) -> list[RequestOutcome]:
        """Invoke all candidates concurrently; outcomes keep candidate order."""
        if not candidates:
            return []
        return list(
            await asyncio.gather(*(self._attempt(c, request, method) for c in candidates))
        )

    async def _attempt(
        self,
        config: ProviderConfig,
        request: AIRequest,
        method: SelectionMethod,
    ) -> RequestOutcome:
        """Invoke one provider, bound its wait, and record the outcome."""
        timeout = request.options.timeout_seconds or self.request_timeout
        started = time.perf_counter()
        try:
            outcome = await asyncio.wait_for(
                self.invoker.invoke(config, request.prompt, request.options),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            outcome = RequestOutcome.failure(
                config.name, TIMEOUT_MESSAGE, (time.perf_counter() - started) * 1000
            )
        except Exception as e:
            # Invokers should not raise; treat it like a network failure
            logger.warning(
                f"Invoker raised for {config.name}: {e}",
                extra={"provider": config.name, "method": method.value},
            )
            outcome = RequestOutcome.failure(
                config.name,
                str(e) or type(e).__name__,
                (time.perf_counter() - started) * 1000,
            )

        self.tracker.record_outcome(outcome)
        logger.debug(
            f"{config.name} attempt {'succeeded' if outcome.succeeded else 'failed'}",
            extra={
                "provider": config.name,
                "method": method.value,
                "latency_ms": outcome.latency_ms,
            },
        )
        return outcome

    @staticmethod
    def _log_exhausted(method: SelectionMethod, reason: str) -> None:
        logger.warning(
            f"{method.value} selection exhausted: {reason}",
            extra={"method": method.value, "reason": reason},
        )
