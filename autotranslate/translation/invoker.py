"""
Translation invoker.

Sends one bounded payload per locale pair to a provider and parses the
JSON-object answer. Failures are surfaced as ProviderErrors carrying the
locale pair and document context; nothing is retried here.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Mapping

from autotranslate.errors import (
    ConfigurationError,
    ProviderError,
    ResponseParseError,
    TranslationTimeoutError,
)
from autotranslate.plugin_config import DEFAULT_TIMEOUT
from autotranslate.translation.providers import TranslationProvider, TranslationRequest
from autotranslate.translation.settings import TranslationSettings

logger = logging.getLogger(__name__)


class TranslationInvoker:
    """
    Calls a translation provider with a timeout.

    Usage:
        invoker = TranslationInvoker(OpenAIProvider(api_key="..."), timeout=30)
        settings = await settings_repo.load()

        translated = await invoker.translate(
            {"title": "Hej världen"}, "sv", "en", settings,
        )
        # {"title": "Hello world"}
    """

    def __init__(
        self,
        provider: TranslationProvider,
        timeout: float = DEFAULT_TIMEOUT,
        debugging: bool = False,
    ):
        self.provider = provider
        self.timeout = timeout
        self.debugging = debugging

    def build_request(
        self,
        payload: dict[str, Any],
        from_locale: str,
        to_locale: str,
        settings: TranslationSettings,
        collection: str | None = None,
        document_id: str | None = None,
    ) -> TranslationRequest:
        return TranslationRequest(
            payload=payload,
            from_locale=from_locale,
            to_locale=to_locale,
            settings=settings,
            system_message=settings.system_message(from_locale, to_locale),
            user_content=json.dumps(payload, ensure_ascii=False, indent=2),
            timeout=self.timeout,
            collection=collection,
            document_id=document_id,
        )

    async def translate(
        self,
        strings: Mapping[str, str],
        from_locale: str,
        to_locale: str,
        settings: TranslationSettings,
        collection: str | None = None,
        document_id: str | None = None,
    ) -> dict[str, str]:
        """
        Translate a path -> string map.

        Returns:
            path -> translated string; non-string values in the answer are
            dropped, missing paths are simply absent

        Raises:
            ConfigurationError: Provider is not configured (e.g. no API key)
            TranslationTimeoutError: No answer within the timeout
            ResponseParseError: Answer is not a JSON object
            ProviderError: Any other provider failure
        """
        if not strings:
            return {}

        request = self.build_request(dict(strings), from_locale, to_locale, settings, collection, document_id)
        data = await self._call(request)
        return {key: value for key, value in data.items() if isinstance(value, str)}

    async def translate_document(
        self,
        document: dict[str, Any],
        from_locale: str,
        to_locale: str,
        settings: TranslationSettings,
        collection: str | None = None,
        document_id: str | None = None,
    ) -> dict[str, Any]:
        """Send a whole document and take the answer as the translated document."""
        request = self.build_request(document, from_locale, to_locale, settings, collection, document_id)
        return await self._call(request)

    async def _call(self, request: TranslationRequest) -> dict[str, Any]:
        context = {"collection": request.collection, "document_id": request.document_id}

        if self.debugging:
            logger.info(
                f"[Auto-Translate] Calling {self.provider.provider_id} "
                f"(timeout: {self.timeout}s, model: {request.settings.model}, "
                f"payload: {len(request.user_content)} bytes)"
            )

        try:
            raw = await asyncio.wait_for(self.provider.complete(request), timeout=self.timeout)
        except (ConfigurationError, ProviderError):
            raise
        except (asyncio.TimeoutError, TimeoutError) as e:
            raise TranslationTimeoutError(
                f"timed out after {self.timeout}s",
                request.from_locale,
                request.to_locale,
                **context,
            ) from e
        except Exception as e:
            status = getattr(e, "status_code", None)
            code = getattr(e, "code", None)
            logger.error(
                f"[Auto-Translate] Provider {self.provider.provider_id} failed "
                f"({request.from_locale} -> {request.to_locale}, status: {status}, code: {code}): {e}"
            )
            raise ProviderError(str(e), request.from_locale, request.to_locale, **context) from e

        return self.parse_response(raw, request)

    def parse_response(self, raw: str | Mapping[str, Any], request: TranslationRequest) -> dict[str, Any]:
        """Parse a provider answer into a dict."""
        context = {"collection": request.collection, "document_id": request.document_id}

        if isinstance(raw, Mapping):
            return dict(raw)

        if not raw:
            raise ResponseParseError(
                "No translation received from provider", "", request.from_locale, request.to_locale, **context
            )

        if self.debugging:
            logger.info(f"[Auto-Translate] Received response ({len(raw)} chars)")

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"[Auto-Translate] Failed to parse provider response as JSON: {raw[:500]}")
            raise ResponseParseError(
                f"Invalid JSON response: {e}", raw, request.from_locale, request.to_locale, **context
            ) from e

        if not isinstance(data, dict):
            raise ResponseParseError(
                "Response is not a JSON object", raw, request.from_locale, request.to_locale, **context
            )
        return data
