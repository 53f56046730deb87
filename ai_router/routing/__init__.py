"""
Provider selection and routing.

Usage:
    from ai_router.routing import ProviderRouter, SelectionMethod

    router = ProviderRouter(registry, invoker)
    result = await router.route(SelectionMethod.HYBRID, request)
"""

from ai_router.routing.router import (
    ProviderRouter,
    RouteResult,
    SelectionMethod,
    parse_method,
    valid_method_names,
)
from ai_router.routing.tracker import OutcomeStats, OutcomeTracker

__all__ = [
    "OutcomeStats",
    "OutcomeTracker",
    "ProviderRouter",
    "RouteResult",
    "SelectionMethod",
    "parse_method",
    "valid_method_names",
]
