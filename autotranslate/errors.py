"""
Error taxonomy for the auto-translate plugin.

Configuration errors are fatal to the operation that needs them.
Provider errors carry locale-pair and document context so the sync
orchestrator can log them and move on to the next locale.
"""

from __future__ import annotations


class AutoTranslateError(Exception):
    """Base class for all plugin errors."""
    pass


class ConfigurationError(AutoTranslateError):
    """Raised when required configuration (credentials, locales) is missing."""
    pass


class SettingsLockedError(AutoTranslateError):
    """Raised when translation settings are updated while locked."""
    pass


class ProviderError(AutoTranslateError):
    """
    A translation provider call failed.
    
    The original exception is chained as ``__cause__``.
    """
    
    def __init__(
        self,
        reason: str,
        from_locale: str,
        to_locale: str,
        collection: str | None = None,
        document_id: str | None = None,
    ):
        self.reason = reason
        self.from_locale = from_locale
        self.to_locale = to_locale
        self.collection = collection
        self.document_id = document_id
        super().__init__(f"Translation failed from {from_locale} to {to_locale}: {reason}")
    
    @property
    def context(self) -> dict[str, str | None]:
        return {
            "from_locale": self.from_locale,
            "to_locale": self.to_locale,
            "collection": self.collection,
            "document_id": self.document_id,
        }


class TranslationTimeoutError(ProviderError):
    """The provider did not answer within the configured timeout."""
    pass


class ResponseParseError(ProviderError):
    """The provider answered with something that is not a JSON object."""
    
    PREVIEW_LENGTH = 500
    
    def __init__(self, reason: str, text: str, from_locale: str, to_locale: str, **context):
        self.preview = (text or "")[: self.PREVIEW_LENGTH]
        super().__init__(reason, from_locale, to_locale, **context)
