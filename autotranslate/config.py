"""
Application configuration.

Loads settings from environment variables with sensible defaults.
Plugin options (locales, collections, exclusions) live in
``autotranslate.plugin_config`` and are loaded from YAML.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = False

    # ==========================================================================
    # API Server
    # ==========================================================================

    cors_origins: str = "http://localhost:3000"

    # ==========================================================================
    # AI / LLM
    # ==========================================================================

    # Which provider to use: openai, gemini or anthropic
    llm_provider: str = "openai"

    openai_api_key: str = ""
    openai_base_url: str = ""
    openai_model: str = "gpt-4o"

    # Accepts either GOOGLE_API_KEY or GEMINI_API_KEY
    google_api_key: str = ""
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"

    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-sonnet-latest"

    # Seconds
    translation_timeout: float = 30.0

    # ==========================================================================
    # Plugin
    # ==========================================================================

    # Path to the YAML plugin configuration; empty = built-in defaults
    autotranslate_config: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def api_key_for(self, provider: str) -> str:
        """Credential for an LLM provider, empty if not configured."""
        if provider == "gemini":
            return self.google_api_key or self.gemini_api_key
        if provider == "anthropic":
            return self.anthropic_api_key
        return self.openai_api_key

    def model_for(self, provider: str) -> str:
        if provider == "gemini":
            return self.gemini_model
        if provider == "anthropic":
            return self.anthropic_model
        return self.openai_model


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
