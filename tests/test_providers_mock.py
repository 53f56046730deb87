"""Tests for ai_router/providers/mock.py - Mock Invoker."""

import pytest

from ai_router.providers.mock import MockInvoker, ScriptedReply


class TestMockInvoker:
    """Tests for MockInvoker behaviour."""

    @pytest.mark.asyncio
    async def test_default_reply(self, make_provider):
        """Unscripted providers should get the default successful reply."""
        invoker = MockInvoker()
        outcome = await invoker.invoke(make_provider("a"), "hello")
        assert outcome.succeeded is True
        assert outcome.latency_ms == 100.0

    @pytest.mark.asyncio
    async def test_scripted_failure(self, make_provider):
        """A scripted error should produce a failed outcome."""
        invoker = MockInvoker({"a": ScriptedReply(error="HTTP 503", latency_ms=12)})
        outcome = await invoker.invoke(make_provider("a"), "hello")
        assert outcome.succeeded is False
        assert outcome.error_message == "HTTP 503"
        assert outcome.latency_ms == 12

    @pytest.mark.asyncio
    async def test_scripted_exception(self, make_provider):
        """raise_exc should propagate out of invoke."""
        invoker = MockInvoker({"a": ScriptedReply(raise_exc=ConnectionError("reset"))})
        with pytest.raises(ConnectionError):
            await invoker.invoke(make_provider("a"), "hello")

    @pytest.mark.asyncio
    async def test_reply_factory_receives_prompt(self, make_provider):
        """A callable script should be called with the prompt."""
        invoker = MockInvoker({"a": lambda prompt: ScriptedReply(content=prompt.upper())})
        outcome = await invoker.invoke(make_provider("a"), "hello")
        assert outcome.content == "HELLO"

    @pytest.mark.asyncio
    async def test_records_call_order(self, make_provider):
        """calls should list provider names in invocation order."""
        invoker = MockInvoker()
        await invoker.invoke(make_provider("b"), "x")
        await invoker.invoke(make_provider("a"), "x")
        assert invoker.calls == ["b", "a"]

    @pytest.mark.asyncio
    async def test_script_replaces_reply(self, make_provider):
        """script() should change later replies."""
        invoker = MockInvoker()
        invoker.script("a", ScriptedReply(error="down"))
        outcome = await invoker.invoke(make_provider("a"), "x")
        assert outcome.succeeded is False
