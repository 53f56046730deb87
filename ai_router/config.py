"""
Router configuration.

Scalar settings come from environment variables; the provider list comes
from a YAML file when ``ROUTER_PROVIDERS_FILE`` points at one, otherwise from
the built-in defaults below. Credentials are never stored in the file: each
entry names the environment variable holding its API key.

Usage:
    from ai_router.config import RouterSettings

    settings = RouterSettings.from_env()
    registry = ProviderRegistry(settings.providers)

Example providers file:
    providers:
      - name: gemini
        kind: gemini
        credential_env: GEMINI_API_KEY
        endpoint: https://generativelanguage.googleapis.com/v1beta/models
        model_id: gemini-1.5-pro
        weight: 0.4
        priority: 1
        cost_per_unit: 0.0001
        declared_reliability: 0.95
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ai_router.exceptions import ConfigurationError
from ai_router.providers.base import ProviderConfig

logger = logging.getLogger(__name__)

DEFAULT_PROVIDERS: list[dict[str, Any]] = [
    {
        "name": "gemini",
        "kind": "gemini",
        "credential_env": "GEMINI_API_KEY",
        "endpoint": "https://generativelanguage.googleapis.com/v1beta/models",
        "model_id": "gemini-1.5-pro",
        "weight": 0.4,
        "priority": 1,
        "cost_per_unit": 0.0001,
        "declared_reliability": 0.95,
        "max_tokens": 4000,
    },
    {
        "name": "openai",
        "kind": "openai",
        "credential_env": "OPENAI_API_KEY",
        "endpoint": "https://api.openai.com/v1",
        "model_id": "gpt-4",
        "weight": 0.3,
        "priority": 2,
        "cost_per_unit": 0.03,
        "declared_reliability": 0.98,
        "max_tokens": 4000,
    },
    {
        "name": "anthropic",
        "kind": "anthropic",
        "credential_env": "ANTHROPIC_API_KEY",
        "endpoint": "https://api.anthropic.com/v1",
        "model_id": "claude-3-sonnet-20240229",
        "weight": 0.2,
        "priority": 3,
        "cost_per_unit": 0.015,
        "declared_reliability": 0.97,
        "max_tokens": 4000,
    },
    {
        "name": "huggingface",
        "kind": "huggingface",
        "credential_env": "HUGGINGFACE_API_KEY",
        "endpoint": "https://api-inference.huggingface.co/models",
        "model_id": "microsoft/DialoGPT-medium",
        "weight": 0.1,
        "priority": 4,
        "cost_per_unit": 0.0005,
        "declared_reliability": 0.85,
        "max_tokens": 2000,
    },
]

_CONFIG_FIELDS = (
    "weight",
    "priority",
    "cost_per_unit",
    "declared_reliability",
    "max_tokens",
    "temperature",
)


def _parse_provider(entry: Mapping[str, Any], environ: Mapping[str, str]) -> ProviderConfig:
    """Build a ProviderConfig from one file/default entry."""
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"Provider entry must be a mapping, got {type(entry).__name__}")

    missing = [key for key in ("name", "endpoint", "model_id") if not entry.get(key)]
    if missing:
        raise ConfigurationError(
            f"Provider entry missing fields: {', '.join(missing)}",
            provider=entry.get("name"),
        )

    name = str(entry["name"])
    credential_env = entry.get("credential_env")
    credential = environ.get(credential_env) if credential_env else None

    kwargs = {key: entry[key] for key in _CONFIG_FIELDS if key in entry}
    try:
        return ProviderConfig(
            name=name,
            kind=str(entry.get("kind", name)),
            endpoint=str(entry["endpoint"]),
            model_id=str(entry["model_id"]),
            credential=credential or None,
            **kwargs,
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(str(e), provider=name) from e


def load_provider_configs(
    path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> list[ProviderConfig]:
    """Load provider configurations.

    Args:
        path: YAML file with a ``providers`` list (built-in defaults if None
            or missing)
        environ: Environment to read credentials from (os.environ if None)

    Returns:
        Provider configurations in file order

    Raises:
        ConfigurationError: If the file or an entry is invalid
    """
    environ = os.environ if environ is None else environ
    entries: list[Any] = DEFAULT_PROVIDERS

    if path is not None:
        path = Path(path)
        if not path.exists():
            logger.warning(f"Providers config not found: {path}, using built-in defaults")
        else:
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid providers file {path}: {e}") from e

            entries = data.get("providers") if isinstance(data, dict) else None
            if not isinstance(entries, list):
                raise ConfigurationError(f"{path}: expected a top-level 'providers' list")
            logger.info(f"Loaded {len(entries)} provider entries from {path}")

    return [_parse_provider(entry, environ) for entry in entries]


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


@dataclass
class RouterSettings:
    """Settings for building a ProviderRouter and the API around it.

    Attributes:
        providers: Provider configurations in registration order
        request_timeout: Per-invocation timeout in seconds
        hybrid_fanout: N for hybrid-fastest-of-N
        default_max_cost: Cost-optimized budget when the caller gives none
        latency_prior_ms: Adaptive latency prior without history
        mock_mode: Use the network-free MockInvoker
        log_level: Root log level
        allowed_origins: CORS origins for the API
    """

    providers: list[ProviderConfig] = field(default_factory=list)
    request_timeout: float = 30.0
    hybrid_fanout: int = 3
    default_max_cost: float = 0.01
    latency_prior_ms: float = 1000.0
    mock_mode: bool = False
    log_level: str = "INFO"
    allowed_origins: list[str] = field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://localhost:8000",
            "http://127.0.0.1:8000",
        ]
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RouterSettings":
        """Read settings from the environment.

        Raises:
            ConfigurationError: If a value cannot be parsed
        """
        environ = os.environ if environ is None else environ

        settings = cls(
            providers=load_provider_configs(environ.get("ROUTER_PROVIDERS_FILE"), environ),
            request_timeout=_env_float(environ, "ROUTER_REQUEST_TIMEOUT", 30.0),
            hybrid_fanout=int(_env_float(environ, "ROUTER_HYBRID_FANOUT", 3)),
            default_max_cost=_env_float(environ, "ROUTER_DEFAULT_MAX_COST", 0.01),
            latency_prior_ms=_env_float(environ, "ROUTER_LATENCY_PRIOR_MS", 1000.0),
            mock_mode=environ.get("ROUTER_MOCK_MODE", "false").lower() == "true",
            log_level=environ.get("LOG_LEVEL", "INFO"),
        )

        origins = environ.get("ALLOWED_ORIGINS", "")
        if origins:
            settings.allowed_origins = [o.strip() for o in origins.split(",") if o.strip()]

        if settings.request_timeout <= 0:
            raise ConfigurationError("ROUTER_REQUEST_TIMEOUT must be positive")
        if settings.hybrid_fanout < 1:
            raise ConfigurationError("ROUTER_HYBRID_FANOUT must be at least 1")
        return settings
