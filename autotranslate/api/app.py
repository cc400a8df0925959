"""
FastAPI application for the auto-translate plugin.

Exposes the exclusion store and translation settings to the admin UI, and
a minimal localized content API whose writes drive translation sync.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from autotranslate.config import get_settings
from autotranslate.core.exclusions import is_path_excluded
from autotranslate.core.paths import field_paths
from autotranslate.errors import SettingsLockedError
from autotranslate.plugin import AutoTranslate

logger = logging.getLogger(__name__)


# =============================================================================
# App State
# =============================================================================


class AppState:
    """Application state - initialized at startup."""

    plugin: AutoTranslate | None = None


state = AppState()


# =============================================================================
# Dependencies
# =============================================================================


def get_plugin() -> AutoTranslate:
    if state.plugin is None:
        raise HTTPException(status_code=503, detail="Auto-translate is not initialized")
    return state.plugin


# =============================================================================
# Request/Response Models
# =============================================================================


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ToggleExclusionRequest(CamelModel):
    collection: str | None = None
    document_id: str | None = None
    locale: str | None = None
    field_path: str | None = None
    exclude: bool | None = None


class ExclusionResponse(CamelModel):
    is_excluded: bool
    excluded_paths: list[str]


class ToggleExclusionResponse(ExclusionResponse):
    success: bool = True


class FieldInfo(CamelModel):
    path: str
    is_excluded: bool


class UpdateSettingsRequest(CamelModel):
    system_prompt: str | None = None
    translation_rules: str | None = None
    model: str | None = None
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, ge=1)


def _require(**params: Any) -> None:
    missing = [name for name, value in params.items() if value in (None, "")]
    if missing:
        raise HTTPException(status_code=400, detail=f"Missing required parameters: {', '.join(missing)}")


# =============================================================================
# App factory
# =============================================================================


def create_app(plugin: AutoTranslate | None = None) -> FastAPI:
    """
    Create the API application.

    Without a plugin, one is built at startup from the YAML configuration
    named by AUTOTRANSLATE_CONFIG.
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if plugin is not None:
            state.plugin = plugin
        elif state.plugin is None:
            state.plugin = AutoTranslate.from_yaml(settings=settings)
        state.plugin.install()

        logger.info(f"Auto-translate API starting in {settings.environment} mode")

        yield

        state.plugin.uninstall()
        await state.plugin.orchestrator.shutdown()
        state.plugin = None
        logger.info("Auto-translate API shutting down")

    app = FastAPI(
        title="Auto-Translate API",
        description="Translation exclusions, translation settings and localized content",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "autotranslate-api"}

    # =========================================================================
    # Translation exclusions
    # =========================================================================

    @app.get("/api/translation-exclusions", response_model=ExclusionResponse)
    async def get_exclusions(
        collection: str | None = None,
        document_id: str | None = Query(None, alias="documentId"),
        locale: str | None = None,
        field_path: str | None = Query(None, alias="fieldPath"),
        plugin: AutoTranslate = Depends(get_plugin),
    ):
        """Excluded paths of a document in one locale, and whether ``fieldPath`` is among them."""
        _require(collection=collection, documentId=document_id, locale=locale)

        paths = await plugin.exclusions.get_exclusions(collection, document_id, locale)
        return ExclusionResponse(
            is_excluded=bool(field_path) and is_path_excluded(field_path, paths),
            excluded_paths=paths,
        )

    @app.post(
        "/api/translation-exclusions/toggle",
        response_model=ToggleExclusionResponse,
    )
    async def toggle_exclusion(
        request: ToggleExclusionRequest,
        plugin: AutoTranslate = Depends(get_plugin),
    ):
        """Exclude a field path from translation, or include it again."""
        _require(
            collection=request.collection,
            documentId=request.document_id,
            locale=request.locale,
            fieldPath=request.field_path,
            exclude=request.exclude,
        )

        try:
            paths = await plugin.exclusions.toggle(
                request.collection,
                request.document_id,
                request.locale,
                request.field_path,
                exclude=request.exclude,
            )
        except Exception as e:
            raise HTTPException(status_code=500, detail="Failed to update translation exclusions") from e

        return ToggleExclusionResponse(
            is_excluded=is_path_excluded(request.field_path, paths),
            excluded_paths=paths,
        )

    @app.get("/api/translation-exclusions/fields")
    async def list_fields(
        collection: str | None = None,
        document_id: str | None = Query(None, alias="documentId"),
        locale: str | None = None,
        plugin: AutoTranslate = Depends(get_plugin),
    ):
        """Field paths of a stored document that can be excluded."""
        _require(collection=collection, documentId=document_id, locale=locale)

        document = await plugin.content.read(collection, document_id, locale)
        if document is None:
            raise HTTPException(status_code=404, detail="Document not found")

        paths = await plugin.exclusions.get_exclusions(collection, document_id, locale)
        fields = [
            FieldInfo(path=path, is_excluded=is_path_excluded(path, paths)).model_dump(by_alias=True)
            for path in field_paths(document)
        ]
        return {"fields": fields, "count": len(fields)}

    # =========================================================================
    # Translation settings
    # =========================================================================

    @app.get("/api/translation-settings")
    async def get_translation_settings(plugin: AutoTranslate = Depends(get_plugin)):
        """Current translation settings."""
        settings = await plugin.settings_repo.load()
        return settings.model_dump()

    @app.patch("/api/translation-settings")
    async def update_translation_settings(
        request: UpdateSettingsRequest,
        plugin: AutoTranslate = Depends(get_plugin),
    ):
        """Edit the translation settings; refused while they are locked."""
        changes = request.model_dump(exclude_unset=True)
        try:
            settings = await plugin.settings_repo.update(**changes)
        except SettingsLockedError as e:
            raise HTTPException(status_code=423, detail=str(e))
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=e.errors())
        return settings.model_dump()

    @app.post("/api/translation-settings/lock")
    async def lock_translation_settings(plugin: AutoTranslate = Depends(get_plugin)):
        settings = await plugin.settings_repo.lock()
        return settings.model_dump()

    @app.post("/api/translation-settings/unlock")
    async def unlock_translation_settings(plugin: AutoTranslate = Depends(get_plugin)):
        settings = await plugin.settings_repo.unlock()
        return settings.model_dump()

    # =========================================================================
    # Content
    # =========================================================================

    @app.get("/api/{collection}/{document_id}")
    async def get_document(
        collection: str,
        document_id: str,
        locale: str | None = None,
        plugin: AutoTranslate = Depends(get_plugin),
    ):
        """Get a document in one locale (default locale if none given)."""
        locale = locale or plugin.localization.default_locale
        document = await plugin.content.read(collection, document_id, locale)
        if document is None:
            raise HTTPException(status_code=404, detail="Document not found")
        return document

    @app.put("/api/{collection}/{document_id}")
    async def put_document(
        collection: str,
        document_id: str,
        data: dict[str, Any] = Body(...),
        locale: str | None = None,
        plugin: AutoTranslate = Depends(get_plugin),
    ):
        """Write a document as a user; default-locale writes may trigger translation."""
        locale = locale or plugin.localization.default_locale
        if locale not in plugin.localization.locales:
            raise HTTPException(status_code=400, detail=f"Unknown locale: {locale}")

        result = await plugin.content.write(collection, document_id, data, locale)
        report = plugin.orchestrator.report_for(result.event.id)
        return {
            "document": result.document,
            "sync": report.to_dict() if report else None,
        }

    @app.delete("/api/{collection}/{document_id}")
    async def delete_document(
        collection: str,
        document_id: str,
        plugin: AutoTranslate = Depends(get_plugin),
    ):
        """Delete a document in every locale, along with its exclusions."""
        if not await plugin.content.delete(collection, document_id):
            raise HTTPException(status_code=404, detail="Document not found")
        return {"deleted": True}


app = create_app()
