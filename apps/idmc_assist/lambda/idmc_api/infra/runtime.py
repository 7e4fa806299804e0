"""Runtime infrastructure helpers for settings, tracing, and provider clients."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import boto3
from google import genai
from google.genai import types
from langsmith.run_trees import get_cached_client
from openai import OpenAI

from idmc_api.constants import AWS_REGION, LANGSMITH_PROJECT
from idmc_api.errors import ProviderError
from idmc_api.model_registry import PROVIDER_CAPABILITIES
from idmc_api.providers.base import ProviderBinding
from idmc_api.providers.googleai_provider import GoogleAIAnswerClient
from idmc_api.providers.openai_provider import OpenAIAnswerClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssistSettings:
    google_api_key: str | None = None
    openai_api_key: str | None = None
    langsmith_api_key: str | None = None
    aws_region: str = AWS_REGION
    request_timeout_seconds: float | None = None

    def __repr__(self) -> str:
        return (
            "AssistSettings("
            f"google_api_key_set={self.google_api_key is not None}, "
            f"openai_api_key_set={self.openai_api_key is not None}, "
            f"langsmith_api_key_set={self.langsmith_api_key is not None}, "
            f"aws_region={self.aws_region!r}, "
            f"request_timeout_seconds={self.request_timeout_seconds!r})"
        )


def _env_value(environ: Mapping[str, str], *names: str) -> str | None:
    for name in names:
        value = environ.get(name, "").strip()
        if value:
            return value
    return None


def _get_secure_parameter(ssm_client: Any, parameter_name: str) -> str:
    result = ssm_client.get_parameter(Name=parameter_name, WithDecryption=True)
    value = result["Parameter"].get("Value")
    if not value:
        raise RuntimeError(f"SSM parameter {parameter_name} has no value")
    return value


def _get_optional_secure_parameter(ssm_client: Any, parameter_name: str) -> str | None:
    try:
        return _get_secure_parameter(ssm_client, parameter_name)
    except Exception:
        logger.warning(
            "Optional SSM parameter is unavailable; disabling dependent feature",
            extra={"parameter_name": parameter_name},
            exc_info=True,
        )
        return None


def _parse_timeout(raw_value: str | None) -> float | None:
    if raw_value is None:
        return None
    timeout = float(raw_value)
    if timeout <= 0:
        raise ValueError("IDMC_ASSIST_REQUEST_TIMEOUT_SECONDS must be positive")
    return timeout


def load_settings(environ: Mapping[str, str] | None = None) -> AssistSettings:
    """Build settings from the environment, falling back to SSM for unset keys."""
    if environ is None:
        environ = os.environ

    aws_region = _env_value(environ, "AWS_REGION") or AWS_REGION
    keys = {
        "google_api_key": (
            _env_value(environ, "GEMINI_API_KEY", "GOOGLE_API_KEY"),
            _env_value(environ, "GEMINI_API_KEY_PARAMETER_NAME"),
        ),
        "openai_api_key": (
            _env_value(environ, "OPENAI_API_KEY"),
            _env_value(environ, "OPENAI_API_KEY_PARAMETER_NAME"),
        ),
        "langsmith_api_key": (
            _env_value(environ, "LANGSMITH_API_KEY"),
            _env_value(environ, "LANGSMITH_API_KEY_PARAMETER_NAME"),
        ),
    }

    resolved: dict[str, str | None] = {}
    ssm_client = None
    for field_name, (value, parameter_name) in keys.items():
        if value is None and parameter_name is not None:
            if ssm_client is None:
                ssm_client = boto3.client("ssm", region_name=aws_region)
            value = _get_optional_secure_parameter(ssm_client, parameter_name)
        resolved[field_name] = value

    return AssistSettings(
        **resolved,
        aws_region=aws_region,
        request_timeout_seconds=_parse_timeout(
            _env_value(environ, "IDMC_ASSIST_REQUEST_TIMEOUT_SECONDS")
        ),
    )


@lru_cache(maxsize=1)
def get_settings() -> AssistSettings:
    settings = load_settings()
    logger.info("Settings loaded", extra={"settings": repr(settings)})
    return settings


def _configure_langsmith(langsmith_api_key: str | None) -> None:
    if not langsmith_api_key:
        os.environ.pop("LANGSMITH_TRACING", None)
        os.environ.pop("LANGSMITH_API_KEY", None)
        logger.info("LangSmith tracing disabled because API key is unavailable")
        return

    os.environ["LANGSMITH_TRACING"] = "true"
    os.environ["LANGSMITH_API_KEY"] = langsmith_api_key
    os.environ.setdefault("LANGSMITH_PROJECT", LANGSMITH_PROJECT)


@lru_cache(maxsize=1)
def ensure_langsmith_configured() -> None:
    """Configure LangSmith environment variables (called once via lru_cache)."""
    _configure_langsmith(get_settings().langsmith_api_key)


def flush_langsmith_traces() -> None:
    if os.environ.get("LANGSMITH_TRACING", "").lower() != "true":
        return
    if not os.environ.get("LANGSMITH_API_KEY"):
        return
    try:
        get_cached_client().flush()
    except Exception:
        logger.warning("Failed to flush LangSmith traces", exc_info=True)


def build_google_client(api_key: str, timeout_seconds: float | None = None) -> GoogleAIAnswerClient:
    http_options = None
    if timeout_seconds is not None:
        http_options = types.HttpOptions(timeout=int(timeout_seconds * 1000))
    return GoogleAIAnswerClient(genai.Client(api_key=api_key, http_options=http_options))


def build_openai_client(api_key: str, timeout_seconds: float | None = None) -> OpenAIAnswerClient:
    if timeout_seconds is None:
        return OpenAIAnswerClient(OpenAI(api_key=api_key))
    return OpenAIAnswerClient(OpenAI(api_key=api_key, timeout=timeout_seconds))


def _missing_default_key(provider: str) -> ProviderError:
    return ProviderError(f"No default API key is configured for provider: {provider}")


def build_provider_bindings(settings: AssistSettings) -> dict[str, ProviderBinding]:
    """Create one binding per provider namespace from the settings struct.

    Default clients are built on first use and cached for the life of the
    bindings. Scoped clients are built per call and never cached.
    """
    timeout = settings.request_timeout_seconds

    @lru_cache(maxsize=1)
    def get_default_google_client() -> GoogleAIAnswerClient:
        if not settings.google_api_key:
            raise _missing_default_key("googleai")
        return build_google_client(settings.google_api_key, timeout)

    @lru_cache(maxsize=1)
    def get_default_openai_client() -> OpenAIAnswerClient:
        if not settings.openai_api_key:
            raise _missing_default_key("openai")
        return build_openai_client(settings.openai_api_key, timeout)

    def build_scoped_google_client(api_key: str) -> GoogleAIAnswerClient:
        return build_google_client(api_key, timeout)

    def build_scoped_openai_client(api_key: str) -> OpenAIAnswerClient:
        return build_openai_client(api_key, timeout)

    factories = {
        "googleai": (get_default_google_client, build_scoped_google_client),
        "openai": (get_default_openai_client, build_scoped_openai_client),
    }
    bindings: dict[str, ProviderBinding] = {}
    for provider, (get_default_client, build_scoped_client) in factories.items():
        capability = PROVIDER_CAPABILITIES[provider]
        bindings[provider] = ProviderBinding(
            get_default_client=get_default_client,
            build_scoped_client=(
                build_scoped_client if capability.accepts_caller_credentials else None
            ),
        )
    return bindings
