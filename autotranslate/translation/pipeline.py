"""
Document translation pipeline: filter -> extract -> translate -> reconstruct.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from autotranslate.core.exclusions import filter_excluded_paths
from autotranslate.core.extraction import Extractor
from autotranslate.core.reconstruction import reconstruct
from autotranslate.translation.invoker import TranslationInvoker
from autotranslate.translation.settings import TranslationSettings

logger = logging.getLogger(__name__)


class DocumentTranslator:
    """
    Translates one document into one locale.

    Excluded paths are removed before anything else, so excluded content
    never reaches the provider. With ``optimize`` off the filtered document
    is sent whole instead of as a deduplicated string map.
    """

    def __init__(
        self,
        invoker: TranslationInvoker,
        extractor: Extractor | None = None,
        optimize: bool = True,
        debugging: bool = False,
    ):
        self.invoker = invoker
        self.extractor = extractor or Extractor()
        self.optimize = optimize
        self.debugging = debugging

    async def translate(
        self,
        document: dict[str, Any],
        from_locale: str,
        to_locale: str,
        settings: TranslationSettings,
        excluded_paths: Iterable[str] = (),
        collection: str | None = None,
        document_id: str | None = None,
    ) -> dict[str, Any]:
        """
        Translate a document.

        Returns:
            The translated document, without the excluded subtrees
        """
        data = filter_excluded_paths(document, excluded_paths)

        if not self.optimize:
            return await self.invoker.translate_document(
                data, from_locale, to_locale, settings, collection, document_id
            )

        extraction = self.extractor.extract(data)
        if extraction.is_empty:
            return data

        if self.debugging:
            stats = extraction.stats(document)
            logger.info(
                f"[Auto-Translate] {collection}:{document_id} {from_locale}->{to_locale}: "
                f"{stats['unique_strings']} unique strings, "
                f"{stats['total_instances']} instances, "
                f"dedup savings {stats['deduplication_savings']} ({stats['deduplication_percent']}%), "
                f"{stats['original_size']} -> {stats['optimized_size']} bytes "
                f"({stats['size_reduction_percent']}% smaller)"
            )

        translations = await self.invoker.translate(
            extraction.strings, from_locale, to_locale, settings, collection, document_id
        )
        return reconstruct(extraction.metadata, translations, extraction.deduplication_index)
