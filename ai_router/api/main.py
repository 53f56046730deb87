"""FastAPI application entry point for the AI router.

This module builds the ProviderRouter from environment settings during the
application lifespan and registers all route handlers.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ai_router import __version__
from ai_router.api.routes import alternatives, health
from ai_router.config import RouterSettings
from ai_router.logging_config import setup_logging
from ai_router.providers.invoker import HttpProviderInvoker
from ai_router.providers.mock import MockInvoker
from ai_router.providers.registry import ProviderRegistry
from ai_router.routing.router import ProviderRouter

logger = logging.getLogger(__name__)


def build_router(settings: RouterSettings) -> ProviderRouter:
    """Create a ProviderRouter (with its own registry, invoker and tracker).

    Args:
        settings: Router settings, usually from RouterSettings.from_env()

    Returns:
        ProviderRouter ready to serve requests
    """
    registry = ProviderRegistry(settings.providers)
    if settings.mock_mode:
        logger.warning("ROUTER_MOCK_MODE enabled: provider calls are simulated")
        invoker = MockInvoker()
    else:
        invoker = HttpProviderInvoker(timeout=settings.request_timeout)

    return ProviderRouter(
        registry,
        invoker,
        hybrid_fanout=settings.hybrid_fanout,
        default_max_cost=settings.default_max_cost,
        latency_prior_ms=settings.latency_prior_ms,
        request_timeout=settings.request_timeout,
    )


def create_app(
    router: ProviderRouter | None = None,
    settings: RouterSettings | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        router: Pre-built router (tests inject one); built from settings if None
        settings: Settings (read from the environment if None)

    Returns:
        Configured FastAPI app
    """
    settings = settings or RouterSettings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Own the router for the lifetime of the application.

        The invoker's HTTP client is closed on shutdown.
        """
        owns_router = router is None
        app.state.router = router or build_router(settings)
        available = [c.name for c in app.state.router.registry.list_available()]
        logger.info(f"Router ready with providers: {available or 'none'}")

        yield

        if owns_router:
            try:
                await app.state.router.invoker.aclose()
                logger.info("Provider HTTP client closed")
            except Exception as e:
                logger.error(f"Failed to close provider HTTP client: {e}")

    app = FastAPI(
        title="UMKM AI Router API",
        description="Routes AI generation requests across multiple providers",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    logger.info(f"CORS allowed origins: {settings.allowed_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept", "X-Request-ID"],
    )

    # Register route handlers
    app.include_router(health.router, tags=["health"])
    app.include_router(alternatives.router, tags=["alternatives"])

    return app


# Initialize structured logging on module import
setup_logging(level=os.getenv("LOG_LEVEL", "INFO"))

app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting FastAPI application", extra={"port": 8000})

    uvicorn.run(
        "ai_router.api.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=False,
        log_level="info",
    )
