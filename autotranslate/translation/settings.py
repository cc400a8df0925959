"""
Translation settings: the prompt, rules and model parameters.

Settings are persisted as a single record and read once per translation
batch; the resulting snapshot is passed explicitly to the invoker.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from autotranslate.errors import SettingsLockedError
from autotranslate.storage.base import MetadataStorage

logger = logging.getLogger(__name__)

SETTINGS_RECORD_ID = "global"

DEFAULT_MODEL = "gpt-4o"

DEFAULT_SYSTEM_PROMPT = (
    "You are a professional translator. "
    "Translate the JSON object values from {fromLocale} to {toLocale}."
)

DEFAULT_TRANSLATION_RULES = """Rules:
- Only translate the values, never the keys
- Preserve the exact JSON structure
- Do not translate field names like 'id', 'createdAt', 'updatedAt', etc.
- Maintain formatting, HTML tags, and special characters
- Return only valid JSON without any markdown formatting or code blocks
- If a value is already in the target language or is a proper noun, keep it as is"""


class TranslationSettings(BaseModel):
    """Snapshot of the translation settings."""

    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    translation_rules: str = DEFAULT_TRANSLATION_RULES
    model: str = DEFAULT_MODEL
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, ge=1)

    # Editing is refused while locked; every successful edit re-locks.
    locked: bool = True

    def system_message(self, from_locale: str, to_locale: str) -> str:
        """System instruction for one locale pair: prompt followed by rules."""
        prompt = self.system_prompt.replace("{fromLocale}", from_locale).replace("{toLocale}", to_locale)
        return f"{prompt}\n\n{self.translation_rules}"


class SettingsRepository:
    """
    Loads and updates the persisted translation settings.

    Usage:
        repo = SettingsRepository(storage.metadata, default_model="gpt-4o-mini")
        settings = await repo.load()

        await repo.unlock()
        await repo.update(temperature=0.1)  # locks again
    """

    def __init__(
        self,
        storage: MetadataStorage,
        slug: str = "translation-settings",
        default_model: str | None = None,
        debugging: bool = False,
    ):
        self.storage = storage
        self.slug = slug
        self.defaults = TranslationSettings(model=default_model or DEFAULT_MODEL)
        self.debugging = debugging

    async def load(self) -> TranslationSettings:
        """
        Current settings; defaults when the record is missing or unreadable.

        Persisted values override the defaults field by field; empty values
        fall back to the default.
        """
        try:
            record = await self.storage.get(self.slug, SETTINGS_RECORD_ID)
        except Exception as e:
            if self.debugging:
                logger.warning(f"[Auto-Translate] Could not fetch translation settings, using defaults: {e}")
            return self.defaults.model_copy()

        if not record:
            return self.defaults.model_copy()

        values = self.defaults.model_dump()
        for key in TranslationSettings.model_fields:
            value = record.get(key)
            if value is None or value == "":
                continue
            values[key] = value

        try:
            return TranslationSettings(**values)
        except ValidationError as e:
            logger.warning(f"[Auto-Translate] Stored translation settings are invalid, using defaults: {e}")
            return self.defaults.model_copy()

    async def update(self, **changes: Any) -> TranslationSettings:
        """
        Update settings fields.

        Raises:
            SettingsLockedError: If the settings are locked
            pydantic.ValidationError: If a value is out of range
        """
        current = await self.load()
        if current.locked:
            raise SettingsLockedError("Translation settings are locked; unlock them before editing")

        changes.pop("locked", None)
        updated = TranslationSettings(**{**current.model_dump(), **changes, "locked": True})
        await self.storage.save(self.slug, SETTINGS_RECORD_ID, updated.model_dump())
        return updated

    async def lock(self) -> TranslationSettings:
        return await self._set_locked(True)

    async def unlock(self) -> TranslationSettings:
        return await self._set_locked(False)

    async def _set_locked(self, locked: bool) -> TranslationSettings:
        current = await self.load()
        current.locked = locked
        await self.storage.save(self.slug, SETTINGS_RECORD_ID, current.model_dump())
        return current
