"""
Provider Registry.

Holds the fixed configuration of every known provider and exposes the ones
usable in this process (credential present).

Usage:
    from ai_router.providers import ProviderRegistry

    registry = ProviderRegistry(load_provider_configs())

    # Providers with a credential, in registration order
    for config in registry.list_available():
        print(config.name)

    # Lookup by name
    gemini = registry.get("gemini")
"""

import logging
from collections.abc import Iterable

from ai_router.exceptions import ConfigurationError
from ai_router.providers.adapters import ADAPTERS
from ai_router.providers.base import ProviderConfig

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Read-only registry of provider configurations.

    Unlike a process-wide singleton, each registry is an explicit object so
    tests and applications can hold independent instances. The registry is
    never mutated after construction.

    Registration order is preserved and used as the tie-breaker by every
    selection policy, so selections are reproducible for a given random seed.
    """

    def __init__(self, configs: Iterable[ProviderConfig]):
        """Initialize the registry.

        Args:
            configs: Provider configurations in registration order

        Raises:
            ConfigurationError: On duplicate names or an unknown provider kind
        """
        self._providers: dict[str, ProviderConfig] = {}
        for config in configs:
            if config.name in self._providers:
                raise ConfigurationError(f"Duplicate provider name: {config.name}")
            if config.kind not in ADAPTERS:
                raise ConfigurationError(
                    f"Unknown provider kind: {config.kind}",
                    provider=config.name,
                )
            self._providers[config.name] = config
            if config.has_credential:
                logger.info(f"Registered provider: {config.name} ({config.model_id})")
            else:
                logger.info(f"Provider {config.name} has no credential, excluded from selection")

    def list_available(self) -> list[ProviderConfig]:
        """Providers that have a credential, in registration order."""
        return [config for config in self._providers.values() if config.has_credential]

    def list_all(self) -> list[ProviderConfig]:
        """All registered providers, in registration order."""
        return list(self._providers.values())

    def names(self) -> list[str]:
        """List all registered provider names."""
        return list(self._providers.keys())

    def get(self, name: str) -> ProviderConfig:
        """Get a provider configuration by name.

        Raises:
            KeyError: If provider not found
        """
        if name not in self._providers:
            available = ", ".join(self._providers.keys()) or "none"
            raise KeyError(f"Provider not found: {name}. Available: {available}")
        return self._providers[name]

    def has_provider(self, name: str) -> bool:
        """Check if a provider is registered."""
        return name in self._providers

    def __len__(self) -> int:
        return len(self._providers)

    def capabilities_summary(self) -> dict[str, dict]:
        """Get the public configuration of all providers.

        Returns:
            Dict mapping provider name to its configuration (no credentials)
        """
        return {name: config.to_dict() for name, config in self._providers.items()}
