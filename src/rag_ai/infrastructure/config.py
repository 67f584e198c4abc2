"""Centralized configuration management for the RAG AI Service.

This module provides a single source of truth for all configuration values,
using pydantic-settings for environment variable loading and validation.

Design Principles:
    - Environment Variables: All settings can be overridden via environment variables
    - Sensible Defaults: Non-secret settings have production-ready defaults
    - Validation: Pydantic validates all values at load time
    - Singleton Pattern: Cached settings instance via lru_cache

Configuration Sections:
    - AzureOpenAIConfig: Completion backend connection
    - AzureSearchConfig: Retrieval source attached to RAG requests
    - ProviderConfig: Which completion provider to wire in at startup
    - APIConfig: FastAPI server configuration

Environment Variable Prefixes:
    - AZURE_OPENAI_*: Completion backend settings
    - AZURE_SEARCH_*: Retrieval source settings
    - PROVIDER_*: Provider selection
    - API_*: FastAPI server settings

Usage:
    from rag_ai.infrastructure.config import get_settings

    settings = get_settings()
    settings.require_live_backend()
    deployment = settings.azure_openai.deployment_name
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rag_ai.domain.exceptions import ConfigurationError


def _validate_http_url(v: str) -> str:
    if v and not v.startswith(("http://", "https://")):
        msg = "endpoint must start with http:// or https://"
        raise ValueError(msg)
    return v.rstrip("/")


class AzureOpenAIConfig(BaseSettings):
    """Azure OpenAI completion backend configuration.

    Attributes:
        endpoint: Resource endpoint, e.g. "https://my-resource.openai.azure.com".
        api_key: Resource key.
        deployment_name: Deployment (model) identifier used for every request.
        api_version: REST API version sent by the SDK.
        timeout: Client-side timeout in seconds. Expiry surfaces as a
            timeout-error to the caller.
        max_retries: Retries performed by the SDK client itself.
        show_citations: Copy retrieval citations into answers.
    """

    model_config = SettingsConfigDict(
        env_prefix="AZURE_OPENAI_",
        case_sensitive=False,
        extra="ignore",
    )

    endpoint: str = Field(default="", description="Azure OpenAI endpoint URL")
    api_key: SecretStr = Field(default=SecretStr(""), description="Azure OpenAI API key")
    deployment_name: str = Field(default="", description="Deployment/model identifier")
    api_version: str = Field(default="2024-02-15-preview", description="API version")
    timeout: float = Field(default=60.0, ge=1.0, le=600.0, description="Request timeout (seconds)")
    max_retries: int = Field(default=2, ge=0, le=10, description="SDK retry attempts")
    show_citations: bool = Field(default=True, description="Include citations in answers")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Ensure the endpoint, when set, is an http(s) URL."""
        return _validate_http_url(v)

    def missing_fields(self) -> list[str]:
        """Return the names of required fields that are empty."""
        missing = []
        if not self.endpoint:
            missing.append("endpoint")
        if not self.api_key.get_secret_value():
            missing.append("api_key")
        if not self.deployment_name:
            missing.append("deployment_name")
        return missing


class AzureSearchConfig(BaseSettings):
    """Azure AI Search retrieval source configuration.

    Attributes:
        endpoint: Search service endpoint.
        api_key: Search service query or admin key.
        index_name: Index searched for grounding documents.
    """

    model_config = SettingsConfigDict(
        env_prefix="AZURE_SEARCH_",
        case_sensitive=False,
        extra="ignore",
    )

    endpoint: str = Field(default="", description="Azure AI Search endpoint URL")
    api_key: SecretStr = Field(default=SecretStr(""), description="Azure AI Search API key")
    index_name: str = Field(default="", description="Search index name")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Ensure the endpoint, when set, is an http(s) URL."""
        return _validate_http_url(v)

    def missing_fields(self) -> list[str]:
        """Return the names of required fields that are empty."""
        missing = []
        if not self.endpoint:
            missing.append("endpoint")
        if not self.api_key.get_secret_value():
            missing.append("api_key")
        if not self.index_name:
            missing.append("index_name")
        return missing


class ProviderConfig(BaseSettings):
    """Completion provider selection.

    Attributes:
        mode: "live" wires the Azure OpenAI provider; "in_memory" wires the
            deterministic stand-in (offline development and tests).
    """

    model_config = SettingsConfigDict(
        env_prefix="PROVIDER_",
        case_sensitive=False,
        extra="ignore",
    )

    mode: Literal["live", "in_memory"] = Field(default="live", description="Provider mode")


class APIConfig(BaseSettings):
    """FastAPI server configuration.

    Attributes:
        host: Bind address.
        port: Bind port. Range: [1, 65535].
        reload: Enable auto-reload (development only).
        log_level: Root log level.
        title: OpenAPI title.
        version: API version reported by /health and the OpenAPI schema.
        docs_url: Swagger UI path.
        openapi_url: OpenAPI schema path.
        cors_origins: Comma-separated allowed origins, or "*".
        chat_rate_limit: slowapi limit for the text query route.
        image_rate_limit: slowapi limit for the image query route.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=8000, ge=1, le=65535, description="API server port")
    reload: bool = Field(default=False, description="Enable auto-reload (development)")
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info", description="Logging level"
    )
    title: str = Field(default="RAG AI Service API", description="API title")
    version: str = Field(default="1.0.0", description="API version")
    docs_url: str = Field(default="/api/docs", description="OpenAPI docs URL")
    openapi_url: str = Field(default="/api/openapi.json", description="OpenAPI spec URL")
    cors_origins: str = Field(default="*", description="Allowed CORS origins")
    chat_rate_limit: str = Field(default="60/minute", description="Text query rate limit")
    image_rate_limit: str = Field(default="30/minute", description="Image query rate limit")


class Settings(BaseSettings):
    """Root settings class containing all configuration sections.

    Configuration is loaded from:
        1. Environment variables (with the section prefixes above)
        2. .env file (if present in the working directory)
        3. Default values (if not set)

    Note:
        Settings are cached by get_settings(). Environment variable changes
        require a restart (or get_settings.cache_clear() in tests).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    azure_openai: AzureOpenAIConfig = Field(default_factory=AzureOpenAIConfig)
    azure_search: AzureSearchConfig = Field(default_factory=AzureSearchConfig)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    api: APIConfig = Field(default_factory=APIConfig)

    def require_live_backend(self) -> None:
        """Check that every value the live provider needs is present.

        Raises:
            ConfigurationError: Naming the incomplete section(s) and fields.
        """
        problems = []
        if missing := self.azure_openai.missing_fields():
            problems.append(
                f"Azure OpenAI configuration is incomplete (missing: {', '.join(missing)})"
            )
        if missing := self.azure_search.missing_fields():
            problems.append(
                f"Azure Search configuration is incomplete (missing: {', '.join(missing)})"
            )
        if problems:
            raise ConfigurationError("; ".join(problems))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    return Settings()


__all__ = [
    "APIConfig",
    "AzureOpenAIConfig",
    "AzureSearchConfig",
    "ProviderConfig",
    "Settings",
    "get_settings",
]
