"""
Base types for AI providers.

This module defines the data that flows through the router:
- ProviderConfig: static, per-process configuration of one provider
- AIRequest / RequestOptions: one logical request from a caller
- RequestOutcome: normalized result of a single invocation attempt
- ProviderAdapter: per-vendor request building and response parsing

Selection logic never looks at endpoint or model details; those are opaque
connection parameters consumed only by the adapters.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class ProviderConfig:
    """Static configuration for one provider.

    Attributes:
        name: Unique identifier across the registry.
        kind: Adapter key ("gemini", "openai", "anthropic", "huggingface").
        endpoint: Base URL of the vendor API.
        model_id: Model requested from the vendor.
        credential: API key, or None when not configured.
        weight: Relative weight for weighted-random selection.
        priority: Rank for priority selection (lower is tried first).
        cost_per_unit: Cost per estimated token, USD.
        declared_reliability: Prior success rate used before any history.
        max_tokens: Default output token limit.
        temperature: Default sampling temperature.
    """

    name: str
    kind: str
    endpoint: str
    model_id: str
    credential: str | None = field(default=None, repr=False)
    weight: float = 1.0
    priority: int = 100
    cost_per_unit: float = 0.0
    declared_reliability: float = 0.9
    max_tokens: int = 4000
    temperature: float = 0.7

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Provider name must not be empty")
        if self.weight < 0:
            raise ValueError(f"{self.name}: weight must be non-negative, got {self.weight}")
        if self.cost_per_unit < 0:
            raise ValueError(
                f"{self.name}: cost_per_unit must be non-negative, got {self.cost_per_unit}"
            )
        if not 0.0 <= self.declared_reliability <= 1.0:
            raise ValueError(
                f"{self.name}: declared_reliability must be in [0, 1], "
                f"got {self.declared_reliability}"
            )

    @property
    def has_credential(self) -> bool:
        """True if an API key is configured."""
        return bool(self.credential)

    def to_dict(self) -> dict[str, Any]:
        """Public view of the configuration. Never includes the credential."""
        return {
            "name": self.name,
            "kind": self.kind,
            "model_id": self.model_id,
            "endpoint": self.endpoint,
            "has_credential": self.has_credential,
            "weight": self.weight,
            "priority": self.priority,
            "cost_per_unit": self.cost_per_unit,
            "declared_reliability": self.declared_reliability,
        }


@dataclass
class RequestOptions:
    """Per-request options supplied by the caller.

    Attributes:
        max_cost: Budget for cost-optimized selection (None = settings default).
        timeout_seconds: Per-invocation timeout (None = invoker default).
        max_tokens: Overrides the provider's default output limit.
        temperature: Overrides the provider's default temperature.
    """

    max_cost: float | None = None
    timeout_seconds: float | None = None
    max_tokens: int | None = None
    temperature: float | None = None


@dataclass
class AIRequest:
    """One logical request routed to one or more providers."""

    prompt: str
    options: RequestOptions = field(default_factory=RequestOptions)


@dataclass(frozen=True)
class RequestOutcome:
    """Result of one provider invocation attempt.

    Exactly one of ``content`` / ``error_message`` is set. Use the
    ``success`` / ``failure`` constructors rather than building it directly.
    """

    provider_name: str
    succeeded: bool
    latency_ms: float
    content: str | None = None
    error_message: str | None = None
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    def __post_init__(self) -> None:
        if self.succeeded and (self.content is None or self.error_message is not None):
            raise ValueError("Successful outcome needs content and no error message")
        if not self.succeeded and (self.error_message is None or self.content is not None):
            raise ValueError("Failed outcome needs an error message and no content")

    @classmethod
    def success(cls, provider_name: str, content: str, latency_ms: float) -> "RequestOutcome":
        """Build a successful outcome."""
        return cls(
            provider_name=provider_name,
            succeeded=True,
            latency_ms=latency_ms,
            content=content,
        )

    @classmethod
    def failure(cls, provider_name: str, error_message: str, latency_ms: float) -> "RequestOutcome":
        """Build a failed outcome."""
        return cls(
            provider_name=provider_name,
            succeeded=False,
            latency_ms=latency_ms,
            error_message=error_message or "Unknown error",
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {
            "service": self.provider_name,
            "success": self.succeeded,
            "latency": round(self.latency_ms, 2),
            "timestamp": self.timestamp,
        }
        if self.succeeded:
            data["content"] = self.content
        else:
            data["error"] = self.error_message
        return data


@dataclass(frozen=True)
class PreparedRequest:
    """Vendor-specific HTTP request produced by an adapter."""

    url: str
    headers: dict[str, str]
    json: dict[str, Any]
    params: dict[str, str] = field(default_factory=dict)


class MalformedResponseError(ValueError):
    """Raised by adapters when a vendor body lacks the expected fields."""

    pass


class ProviderAdapter(ABC):
    """Maps (prompt, options) to a vendor request and the vendor body back to text.

    One adapter per vendor. Adapters are stateless and perform no I/O, so
    they can be tested without a network.

    Example:
        class EchoAdapter(ProviderAdapter):
            kind = "echo"

            def build_request(self, config, prompt, options):
                return PreparedRequest(url=config.endpoint, headers={}, json={"q": prompt})

            def parse_response(self, data):
                return data["answer"]
    """

    kind: str = ""

    @abstractmethod
    def build_request(
        self,
        config: ProviderConfig,
        prompt: str,
        options: RequestOptions,
    ) -> PreparedRequest:
        """Build the HTTP request for this vendor.

        Args:
            config: Provider configuration (endpoint, model, credential)
            prompt: Prompt text
            options: Generation options from the caller

        Returns:
            PreparedRequest ready to POST
        """
        pass

    @abstractmethod
    def parse_response(self, data: Any) -> str:
        """Extract the generated text from a decoded JSON body.

        Raises:
            MalformedResponseError: If the body does not have the vendor shape
        """
        pass

    @staticmethod
    def generation_params(config: ProviderConfig, options: RequestOptions) -> tuple[int, float]:
        """Resolve max_tokens / temperature, request overrides first."""
        max_tokens = options.max_tokens if options.max_tokens is not None else config.max_tokens
        temperature = (
            options.temperature if options.temperature is not None else config.temperature
        )
        return max_tokens, temperature
