"""
Provider Invoker.

Performs exactly one HTTP call to one provider and normalizes the result into
a ``RequestOutcome``. The invoker never raises and never touches outcome
statistics; recording is the router's job.

Example:
    >>> invoker = HttpProviderInvoker(timeout=20.0)
    >>> outcome = await invoker.invoke(config, "Write a tagline", RequestOptions())
    >>> outcome.succeeded, outcome.latency_ms
    (True, 812.4)
    >>> await invoker.aclose()
"""

import asyncio
import logging
import time
from typing import Protocol

import httpx

from ai_router.providers.adapters import get_adapter
from ai_router.providers.base import (
    MalformedResponseError,
    ProviderConfig,
    RequestOptions,
    RequestOutcome,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
TIMEOUT_MESSAGE = "timeout"

# Keep error bodies short in outcomes and logs
MAX_ERROR_BODY_CHARS = 200


class Invoker(Protocol):
    """Anything that can invoke a provider once."""

    async def invoke(
        self,
        config: ProviderConfig,
        prompt: str,
        options: RequestOptions,
    ) -> RequestOutcome: ...


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


class HttpProviderInvoker:
    """Invokes providers over HTTP using their vendor adapters.

    Attributes:
        timeout: Default per-invocation timeout in seconds
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """Initialize the invoker.

        Args:
            client: Shared HTTP client (one is created and owned if None)
            timeout: Default timeout in seconds for each invocation
        """
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient()

    async def aclose(self) -> None:
        """Close the HTTP client if this invoker created it."""
        if self._owns_client:
            await self._client.aclose()

    async def invoke(
        self,
        config: ProviderConfig,
        prompt: str,
        options: RequestOptions | None = None,
    ) -> RequestOutcome:
        """Call one provider once.

        Args:
            config: Provider to call
            prompt: Prompt text
            options: Generation options and optional timeout override

        Returns:
            RequestOutcome; failures (HTTP status, malformed body, network or
            request-construction error, timeout) come back with ``succeeded=False``
        """
        options = options or RequestOptions()
        timeout = options.timeout_seconds or self.timeout

        try:
            prepared = get_adapter(config.kind).build_request(config, prompt, options)
        except KeyError as e:
            return RequestOutcome.failure(config.name, str(e), 0.0)

        started = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                self._client.post(
                    prepared.url,
                    headers=prepared.headers,
                    params=prepared.params or None,
                    json=prepared.json,
                    timeout=timeout,
                ),
                timeout=timeout,
            )
            latency_ms = _elapsed_ms(started)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return self._failed(config, TIMEOUT_MESSAGE, _elapsed_ms(started))
        except httpx.HTTPError as e:
            return self._failed(config, f"network error: {e}", _elapsed_ms(started))
        except Exception as e:
            return self._failed(config, f"request error: {e}", _elapsed_ms(started))

        if not response.is_success:
            body = response.text[:MAX_ERROR_BODY_CHARS]
            return self._failed(config, f"HTTP {response.status_code}: {body}", latency_ms)

        try:
            content = get_adapter(config.kind).parse_response(response.json())
        except (MalformedResponseError, ValueError) as e:
            return self._failed(config, f"malformed response: {e}", latency_ms)

        logger.debug(
            f"{config.name} succeeded in {latency_ms:.0f}ms",
            extra={"provider": config.name, "latency_ms": latency_ms},
        )
        return RequestOutcome.success(config.name, content, latency_ms)

    @staticmethod
    def _failed(config: ProviderConfig, message: str, latency_ms: float) -> RequestOutcome:
        logger.warning(
            f"{config.name} failed: {message}",
            extra={"provider": config.name, "latency_ms": latency_ms},
        )
        return RequestOutcome.failure(config.name, message, latency_ms)
