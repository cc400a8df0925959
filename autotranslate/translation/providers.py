"""
Translation providers.

A provider turns one TranslationRequest into a JSON object, either as
raw response text (LLM providers) or as an already-parsed mapping
(custom callables). Providers never retry; the invoker enforces the
timeout and turns failures into ProviderErrors.

Supports OpenAI (default), Gemini / Anthropic / OpenAI through DSPy,
and caller-supplied functions.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import dspy
from openai import APITimeoutError, AsyncOpenAI

from autotranslate.config import Settings, get_settings
from autotranslate.errors import ConfigurationError
from autotranslate.plugin_config import DEFAULT_TIMEOUT, ProviderConfig
from autotranslate.translation.settings import TranslationSettings

JSON_OBJECT_FORMAT = {"type": "json_object"}


@dataclass
class TranslationRequest:
    """Everything a provider needs for one locale pair."""

    payload: dict[str, Any]  # path -> string, or a whole document in legacy mode
    from_locale: str
    to_locale: str
    settings: TranslationSettings
    system_message: str
    user_content: str  # payload serialized as JSON
    timeout: float = DEFAULT_TIMEOUT
    collection: str | None = None
    document_id: str | None = None

    @property
    def messages(self) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system_message},
            {"role": "user", "content": self.user_content},
        ]


class TranslationProvider(ABC):
    """Base class for translation providers."""

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this provider."""
        pass

    @abstractmethod
    async def complete(self, request: TranslationRequest) -> str | dict[str, Any]:
        """
        Translate a request.

        Returns:
            Response text expected to hold a JSON object, or the parsed object
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.provider_id})>"


# =============================================================================
# OpenAI
# =============================================================================


class OpenAIProvider(TranslationProvider):
    """
    Chat completions in JSON-object mode.

    The client is created lazily, so a missing API key only fails the
    calls that need it.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url or None
        self._client = client

    @property
    def provider_id(self) -> str:
        return "openai"

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy-load OpenAI client."""
        if self._client is None:
            if not self._api_key:
                raise ConfigurationError(
                    "OpenAI API key is required. Set OPENAI_API_KEY or provide it in the provider config."
                )
            self._client = AsyncOpenAI(api_key=self._api_key, base_url=self._base_url)
        return self._client

    async def complete(self, request: TranslationRequest) -> str:
        params: dict[str, Any] = {
            "model": request.settings.model,
            "messages": request.messages,
            "response_format": JSON_OBJECT_FORMAT,
            "temperature": request.settings.temperature,
        }
        if request.settings.max_tokens:
            params["max_tokens"] = request.settings.max_tokens

        try:
            response = await self.client.chat.completions.create(**params, timeout=request.timeout)
        except APITimeoutError as e:
            raise TimeoutError(str(e)) from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


# =============================================================================
# DSPy (litellm routing)
# =============================================================================


class DSPyProvider(TranslationProvider):
    """
    Gemini, Anthropic or OpenAI models through ``dspy.LM``.

    Settings models without a provider prefix get one (``gemini-2.0-flash``
    becomes ``gemini/gemini-2.0-flash``).
    """

    SUPPORTED = ("gemini", "anthropic", "openai")

    def __init__(self, llm_provider: str = "gemini", api_key: str | None = None):
        if llm_provider not in self.SUPPORTED:
            raise ConfigurationError(f"Unknown provider: {llm_provider}")
        self.llm_provider = llm_provider
        self._api_key = api_key

    @property
    def provider_id(self) -> str:
        return f"dspy:{self.llm_provider}"

    def get_lm(self, settings: TranslationSettings) -> dspy.LM:
        if not self._api_key:
            raise ConfigurationError(f"API key for {self.llm_provider} not set")

        model = settings.model if "/" in settings.model else f"{self.llm_provider}/{settings.model}"
        kwargs: dict[str, Any] = {"temperature": settings.temperature}
        if settings.max_tokens:
            kwargs["max_tokens"] = settings.max_tokens
        return dspy.LM(model=model, api_key=self._api_key, **kwargs)

    async def complete(self, request: TranslationRequest) -> str:
        lm = self.get_lm(request.settings)
        outputs = await lm.acall(
            messages=request.messages,
            response_format=JSON_OBJECT_FORMAT,
            timeout=request.timeout,
        )
        if not outputs:
            return ""
        output = outputs[0]
        if isinstance(output, dict):
            return output.get("text") or ""
        return output or ""


# =============================================================================
# Custom
# =============================================================================

CustomTranslate = Callable[[TranslationRequest], dict[str, Any] | Awaitable[dict[str, Any]]]


class CustomProvider(TranslationProvider):
    """Wraps a caller-supplied function (sync or async) returning a mapping."""

    def __init__(self, translate: CustomTranslate):
        self._translate = translate

    @property
    def provider_id(self) -> str:
        return "custom"

    async def complete(self, request: TranslationRequest) -> dict[str, Any]:
        result = self._translate(request)
        if inspect.isawaitable(result):
            result = await result
        return result


# =============================================================================
# Factory
# =============================================================================


def create_provider(config: ProviderConfig, settings: Settings | None = None) -> TranslationProvider:
    """
    Build the provider selected by the plugin configuration.

    Credentials fall back to the environment settings.
    """
    settings = settings or get_settings()

    if config.type == "openai":
        return OpenAIProvider(
            api_key=config.api_key or settings.openai_api_key,
            base_url=config.base_url or settings.openai_base_url,
        )

    if config.type == "dspy":
        llm_provider = config.llm_provider or settings.llm_provider
        return DSPyProvider(
            llm_provider=llm_provider,
            api_key=config.api_key or settings.api_key_for(llm_provider),
        )

    if config.type == "custom":
        if config.custom_translate is None:
            raise ConfigurationError("Custom provider requires a custom_translate function")
        return CustomProvider(config.custom_translate)

    raise ConfigurationError(f"Unknown provider type: {config.type}")
