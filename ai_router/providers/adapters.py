"""
Vendor adapters for AI providers.

Each adapter knows one vendor's JSON contract. The invoker looks adapters up
by ``ProviderConfig.kind`` in ``ADAPTERS`` instead of branching on names.

Supported vendors:
    gemini       Google Generative Language API (generateContent)
    openai       OpenAI Chat Completions
    anthropic    Anthropic Messages API
    huggingface  Hugging Face Inference API (text generation)
"""

from typing import Any

from ai_router.providers.base import (
    MalformedResponseError,
    PreparedRequest,
    ProviderAdapter,
    ProviderConfig,
    RequestOptions,
)

ANTHROPIC_VERSION = "2023-06-01"


def _dig(data: Any, *path: str | int) -> Any:
    """Walk nested dicts/lists, raising MalformedResponseError on any miss."""
    current = data
    for key in path:
        try:
            current = current[key]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError(f"missing field {key!r} in response") from e
    return current


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise MalformedResponseError(f"expected text, got {type(value).__name__}")
    return value


class GeminiAdapter(ProviderAdapter):
    """Google Gemini ``models/{model}:generateContent``."""

    kind = "gemini"

    def build_request(
        self,
        config: ProviderConfig,
        prompt: str,
        options: RequestOptions,
    ) -> PreparedRequest:
        max_tokens, temperature = self.generation_params(config, options)
        return PreparedRequest(
            url=f"{config.endpoint.rstrip('/')}/{config.model_id}:generateContent",
            headers={"Content-Type": "application/json"},
            params={"key": config.credential or ""},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "temperature": temperature,
                    "maxOutputTokens": max_tokens,
                },
            },
        )

    def parse_response(self, data: Any) -> str:
        return _text(_dig(data, "candidates", 0, "content", "parts", 0, "text"))


class OpenAIAdapter(ProviderAdapter):
    """OpenAI ``/chat/completions``."""

    kind = "openai"

    def build_request(
        self,
        config: ProviderConfig,
        prompt: str,
        options: RequestOptions,
    ) -> PreparedRequest:
        max_tokens, temperature = self.generation_params(config, options)
        return PreparedRequest(
            url=f"{config.endpoint.rstrip('/')}/chat/completions",
            headers={
                "Authorization": f"Bearer {config.credential}",
                "Content-Type": "application/json",
            },
            json={
                "model": config.model_id,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": max_tokens,
                "temperature": temperature,
            },
        )

    def parse_response(self, data: Any) -> str:
        return _text(_dig(data, "choices", 0, "message", "content"))


class AnthropicAdapter(ProviderAdapter):
    """Anthropic ``/messages``."""

    kind = "anthropic"

    def build_request(
        self,
        config: ProviderConfig,
        prompt: str,
        options: RequestOptions,
    ) -> PreparedRequest:
        max_tokens, temperature = self.generation_params(config, options)
        return PreparedRequest(
            url=f"{config.endpoint.rstrip('/')}/messages",
            headers={
                "x-api-key": config.credential or "",
                "anthropic-version": ANTHROPIC_VERSION,
                "Content-Type": "application/json",
            },
            json={
                "model": config.model_id,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "messages": [{"role": "user", "content": prompt}],
            },
        )

    def parse_response(self, data: Any) -> str:
        blocks = _dig(data, "content")
        if not isinstance(blocks, list) or not blocks:
            raise MalformedResponseError("missing field 'content' in response")
        # Only text blocks carry generated output
        texts = [b.get("text") for b in blocks if isinstance(b, dict) and b.get("type", "text") == "text"]
        if not texts:
            raise MalformedResponseError("no text block in response")
        return "".join(_text(t) for t in texts)


class HuggingFaceAdapter(ProviderAdapter):
    """Hugging Face Inference API text generation (``/models/{model}``)."""

    kind = "huggingface"

    def build_request(
        self,
        config: ProviderConfig,
        prompt: str,
        options: RequestOptions,
    ) -> PreparedRequest:
        max_tokens, temperature = self.generation_params(config, options)
        return PreparedRequest(
            url=f"{config.endpoint.rstrip('/')}/{config.model_id}",
            headers={
                "Authorization": f"Bearer {config.credential}",
                "Content-Type": "application/json",
            },
            json={
                "inputs": prompt,
                "parameters": {
                    "max_new_tokens": max_tokens,
                    "temperature": temperature,
                    "return_full_text": False,
                },
            },
        )

    def parse_response(self, data: Any) -> str:
        # The API answers with a list for pipelines and a dict for some models
        if isinstance(data, dict) and "error" in data:
            raise MalformedResponseError(f"provider error: {data['error']}")
        if isinstance(data, list):
            return _text(_dig(data, 0, "generated_text"))
        return _text(_dig(data, "generated_text"))


ADAPTERS: dict[str, ProviderAdapter] = {
    adapter.kind: adapter
    for adapter in (
        GeminiAdapter(),
        OpenAIAdapter(),
        AnthropicAdapter(),
        HuggingFaceAdapter(),
    )
}


def get_adapter(kind: str) -> ProviderAdapter:
    """Look up the adapter for a provider kind.

    Raises:
        KeyError: If no adapter handles this kind
    """
    if kind not in ADAPTERS:
        available = ", ".join(sorted(ADAPTERS)) or "none"
        raise KeyError(f"No adapter for provider kind: {kind}. Available: {available}")
    return ADAPTERS[kind]
