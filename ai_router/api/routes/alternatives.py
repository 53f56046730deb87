"""AI alternatives endpoint: route a prompt to providers by selection method.

This module exposes the router over HTTP:
- POST /api/ai-alternatives              run one selection method
- GET  /api/ai-alternatives/stats        per-provider outcome statistics
- POST /api/ai-alternatives/stats/reset  clear the statistics
- GET  /api/ai-alternatives/providers    registry summary (no credentials)
"""

import logging
from typing import Any

from fastapi import APIRouter, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ai_router.exceptions import (
    InvalidMethodError,
    NoProvidersAvailableError,
    PolicyExhaustedError,
)
from ai_router.providers.base import AIRequest, RequestOptions
from ai_router.routing.router import ProviderRouter, SelectionMethod, parse_method, valid_method_names

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai-alternatives")

STATS_METHOD = "stats"


class AlternativesOptions(BaseModel):
    """Per-request options. Accepts camelCase keys as sent by the web client."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    max_cost: float | None = Field(default=None, alias="maxCost", ge=0)
    timeout: float | None = Field(default=None, gt=0)
    max_tokens: int | None = Field(default=None, alias="maxTokens", gt=0)
    temperature: float | None = Field(default=None, ge=0, le=2)

    def to_request_options(self) -> RequestOptions:
        return RequestOptions(
            max_cost=self.max_cost,
            timeout_seconds=self.timeout,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )


class AlternativesRequest(BaseModel):
    """Request body.

    Attributes:
        prompt: Prompt text (required, non-blank)
        method: Selection method name
        options: Generation and selection options
    """

    prompt: str | None = None
    method: str = SelectionMethod.PRIORITY.value
    options: AlternativesOptions = Field(default_factory=AlternativesOptions)


def get_router(request: Request) -> ProviderRouter:
    """The ProviderRouter owned by the application."""
    return request.app.state.router


def available_methods() -> list[str]:
    return valid_method_names() + [STATS_METHOD]


@router.post("")
async def call_alternatives(
    body: AlternativesRequest,
    request: Request,
    x_request_id: str | None = Header(default=None),
) -> JSONResponse:
    """Run one selection method for a prompt.

    Returns:
        200 with the outcome(s); 400 for a missing prompt or invalid method;
        502/503 when the policy is exhausted
    """
    provider_router = get_router(request)
    log_extra = {"correlation_id": x_request_id, "method": body.method}

    if body.method == STATS_METHOD:
        return JSONResponse(
            status_code=200,
            content={
                "success": True,
                "method": STATS_METHOD,
                "stats": provider_router.get_stats(),
                "message": "Service performance statistics",
            },
        )

    if not body.prompt or not body.prompt.strip():
        return JSONResponse(status_code=400, content={"error": "Prompt is required"})

    try:
        method = parse_method(body.method)
    except InvalidMethodError as e:
        logger.info(f"Rejected invalid method: {e.method}", extra=log_extra)
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid method",
                "method": e.method,
                "availableMethods": available_methods(),
            },
        )

    logger.info(f"Calling AI with method: {method.value}", extra=log_extra)
    ai_request = AIRequest(prompt=body.prompt, options=body.options.to_request_options())

    try:
        result = await provider_router.route(method, ai_request)
    except PolicyExhaustedError as e:
        status_code = 503 if isinstance(e, NoProvidersAvailableError) else 502
        logger.warning(f"AI alternative calling failed: {e}", extra={**log_extra, "reason": e.reason})
        return JSONResponse(status_code=status_code, content=e.to_dict())

    return JSONResponse(status_code=200, content=result.to_dict())


@router.get("/stats")
async def get_stats(request: Request) -> dict[str, Any]:
    """Per-provider success counts and average latency."""
    return {"success": True, "stats": get_router(request).get_stats()}


@router.post("/stats/reset")
async def reset_stats(request: Request) -> dict[str, Any]:
    """Clear all outcome statistics."""
    get_router(request).reset_stats()
    return {"success": True, "message": "Statistics reset"}


@router.get("/providers")
async def list_providers(request: Request) -> dict[str, Any]:
    """Registered providers, their selection parameters and availability."""
    registry = get_router(request).registry
    return {
        "providers": registry.capabilities_summary(),
        "available": [config.name for config in registry.list_available()],
        "methods": valid_method_names(),
    }
