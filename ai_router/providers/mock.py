"""
Mock Invoker for Testing.

Provides a deterministic, network-free invoker for tests and local
development. Each provider gets a scripted reply: content or an error, a
simulated latency, and optionally an exception to raise instead of
returning an outcome (to exercise the router's safety net).

Usage:
    from ai_router.providers.mock import MockInvoker, ScriptedReply

    invoker = MockInvoker({
        "gemini": ScriptedReply(error="HTTP 500", latency_ms=10),
        "openai": ScriptedReply(content="Hello", latency_ms=50),
    })
    router = ProviderRouter(registry, invoker)

    await router.call_priority(AIRequest(prompt="hi"))
    assert invoker.calls == ["gemini", "openai"]
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass

from ai_router.providers.base import ProviderConfig, RequestOptions, RequestOutcome


@dataclass
class ScriptedReply:
    """Scripted behaviour for one provider.

    Attributes:
        content: Text returned on success (ignored when ``error`` is set)
        error: Error message; makes the attempt fail
        latency_ms: Latency reported in the outcome
        raise_exc: Exception raised instead of returning an outcome
        sleep: Actually wait ``latency_ms`` before answering
    """

    content: str = "Mock response generated successfully."
    error: str | None = None
    latency_ms: float = 100.0
    raise_exc: Exception | None = None
    sleep: bool = False


class MockInvoker:
    """Invoker returning scripted outcomes without any network I/O.

    Providers without a script get the ``default`` reply. ``calls`` records
    every provider name in the order attempts were made.
    """

    def __init__(
        self,
        replies: dict[str, ScriptedReply | Callable[[str], ScriptedReply]] | None = None,
        default: ScriptedReply | None = None,
    ):
        """Initialize mock invoker.

        Args:
            replies: Scripted reply (or factory taking the prompt) per provider
            default: Reply for providers without a script
        """
        self.replies = dict(replies or {})
        self.default = default or ScriptedReply()
        self.calls: list[str] = []

    def script(self, provider_name: str, reply: ScriptedReply) -> None:
        """Replace the scripted reply for one provider."""
        self.replies[provider_name] = reply

    async def invoke(
        self,
        config: ProviderConfig,
        prompt: str,
        options: RequestOptions | None = None,
    ) -> RequestOutcome:
        """Return the scripted outcome for ``config.name``."""
        self.calls.append(config.name)

        reply = self.replies.get(config.name, self.default)
        if callable(reply):
            reply = reply(prompt)

        if reply.sleep:
            await asyncio.sleep(reply.latency_ms / 1000)
        if reply.raise_exc is not None:
            raise reply.raise_exc
        if reply.error is not None:
            return RequestOutcome.failure(config.name, reply.error, reply.latency_ms)
        return RequestOutcome.success(config.name, reply.content, reply.latency_ms)

    async def aclose(self) -> None:
        """Nothing to release."""
        return None
