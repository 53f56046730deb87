"""
Pytest configuration and shared fixtures.

Provides provider configurations, registries and a scripted invoker so the
router can be tested without network access.
"""

import random

import pytest

from ai_router.providers.base import ProviderConfig
from ai_router.providers.mock import MockInvoker
from ai_router.providers.registry import ProviderRegistry
from ai_router.routing.router import ProviderRouter
from ai_router.routing.tracker import OutcomeTracker


def make_config(name: str, **kwargs) -> ProviderConfig:
    """Build a ProviderConfig with test defaults (credential present)."""
    defaults = {
        "kind": "openai",
        "endpoint": f"https://{name}.example.test/v1",
        "model_id": f"{name}-model",
        "credential": f"key-{name}",
    }
    defaults.update(kwargs)
    return ProviderConfig(name=name, **defaults)


@pytest.fixture
def three_providers() -> list[ProviderConfig]:
    """Three providers with distinct priority, cost and reliability."""
    return [
        make_config("alpha", priority=2, weight=1.0, cost_per_unit=0.002, declared_reliability=0.90),
        make_config("beta", priority=1, weight=1.0, cost_per_unit=0.001, declared_reliability=0.80),
        make_config("gamma", priority=3, weight=1.0, cost_per_unit=0.003, declared_reliability=0.99),
    ]


@pytest.fixture
def registry(three_providers) -> ProviderRegistry:
    return ProviderRegistry(three_providers)


@pytest.fixture
def invoker() -> MockInvoker:
    return MockInvoker()


@pytest.fixture
def tracker() -> OutcomeTracker:
    return OutcomeTracker()


@pytest.fixture
def provider_router(registry, invoker, tracker) -> ProviderRouter:
    return ProviderRouter(registry, invoker, tracker, rng=random.Random(42))


@pytest.fixture
def make_provider():
    """Factory fixture: ``make_provider("name", priority=1, ...)``."""
    return make_config
