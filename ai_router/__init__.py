"""
UMKM AI Router.

Routes AI generation requests across several providers (Gemini, OpenAI,
Anthropic, HuggingFace) using one of seven selection methods: parallel,
weighted, priority, cost-optimized, reliability, hybrid and adaptive.

Usage:
    from ai_router.config import RouterSettings
    from ai_router.providers import AIRequest, HttpProviderInvoker, ProviderRegistry
    from ai_router.routing import ProviderRouter

    settings = RouterSettings.from_env()
    router = ProviderRouter(ProviderRegistry(settings.providers), HttpProviderInvoker())
    result = await router.route("priority", AIRequest(prompt="Slogan for a coffee shop"))
"""

__version__ = "0.1.0"
