"""
Exception hierarchy for the AI provider router.

Provider-level failures never surface as exceptions: the invoker turns them
into failed ``RequestOutcome`` records. Only configuration problems, invalid
method names and policy exhaustion are raised.

Usage:
    from ai_router.exceptions import (
        InvalidMethodError,
        NoAffordableProviderError,
        PolicyExhaustedError,
    )

    try:
        result = await router.route("cost-optimized", request)
    except NoAffordableProviderError as e:
        # Budget problem, not a transient network issue
        logger.warning(f"Over budget: {e}")
    except PolicyExhaustedError as e:
        logger.error(f"{e.method} failed on {e.provider}: {e.last_error}")
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ai_router.providers.base import RequestOutcome


class RouterError(Exception):
    """Base exception for all router errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dict with additional error context.
        provider: Name of the provider involved, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        provider: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.provider = provider

    def __str__(self) -> str:
        if self.provider:
            return f"[{self.provider}] {self.message}"
        return self.message


class ConfigurationError(RouterError):
    """Provider configuration or settings are invalid.

    Raised when:
    - A provider entry has a negative weight or cost
    - Declared reliability is outside [0, 1]
    - The provider kind has no adapter
    - Two providers share a name
    """

    pass


class InvalidMethodError(RouterError):
    """Unknown selection method requested by a caller.

    This is a client error, distinct from provider or network failures.

    Attributes:
        method: The rejected method name.
        valid_methods: Names the caller may use instead.
    """

    def __init__(self, method: str, valid_methods: list[str]) -> None:
        super().__init__(
            f"Invalid method: {method!r}. Valid methods: {', '.join(valid_methods)}",
            details={"method": method, "valid_methods": valid_methods},
        )
        self.method = method
        self.valid_methods = list(valid_methods)


class PolicyExhaustedError(RouterError):
    """A selection policy ran out of candidates without a success.

    Attributes:
        method: Selection method that was used.
        reason: Short machine-readable cause ("unavailable", "exhausted", "budget").
        last_error: Error message of the last failed attempt, if any.
        attempts: Every outcome produced before giving up, in attempt order.
    """

    reason = "exhausted"

    def __init__(
        self,
        message: str,
        *,
        method: str,
        provider: str | None = None,
        last_error: str | None = None,
        attempts: list["RequestOutcome"] | None = None,
    ) -> None:
        super().__init__(
            message,
            details={"method": method, "reason": self.reason},
            provider=provider,
        )
        self.method = method
        self.last_error = last_error
        self.attempts = list(attempts or [])

    def __str__(self) -> str:
        text = super().__str__()
        if self.last_error:
            text = f"{text}: {self.last_error}"
        return text

    def to_dict(self) -> dict[str, Any]:
        """Caller-facing error body."""
        return {
            "success": False,
            "error": self.message,
            "method": self.method,
            "reason": self.reason,
            "provider": self.provider,
            "message": self.last_error or self.message,
        }


class NoProvidersAvailableError(PolicyExhaustedError):
    """No provider has a credential configured."""

    reason = "unavailable"


class AllProvidersFailedError(PolicyExhaustedError):
    """Every candidate provider was tried and failed."""

    reason = "exhausted"


class NoAffordableProviderError(PolicyExhaustedError):
    """No provider under the cost budget produced a success."""

    reason = "budget"
