"""
Provider layer.

Configuration, vendor adapters, registry and invokers for the AI backends
the router can send requests to.

Architecture:
    ProviderRouter (ai_router.routing)
         ↓
    Invoker (this package)
         ↓
    ProviderAdapter per vendor (Gemini, OpenAI, Anthropic, HuggingFace)
         ↓
    Vendor HTTP APIs

Usage:
    from ai_router.providers import HttpProviderInvoker, ProviderRegistry

    registry = ProviderRegistry(configs)
    invoker = HttpProviderInvoker(timeout=30.0)
    outcome = await invoker.invoke(registry.get("gemini"), "Hello", RequestOptions())
"""

from ai_router.providers.adapters import ADAPTERS, get_adapter
from ai_router.providers.base import (
    AIRequest,
    ProviderAdapter,
    ProviderConfig,
    RequestOptions,
    RequestOutcome,
)
from ai_router.providers.invoker import HttpProviderInvoker, Invoker
from ai_router.providers.registry import ProviderRegistry

__all__ = [
    "ADAPTERS",
    "AIRequest",
    "HttpProviderInvoker",
    "Invoker",
    "ProviderAdapter",
    "ProviderConfig",
    "ProviderRegistry",
    "RequestOptions",
    "RequestOutcome",
    "get_adapter",
]
