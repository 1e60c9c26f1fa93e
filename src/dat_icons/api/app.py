"""HTTP API: FastAPI application for the icon service.

Endpoints:
  GET /                       OpenAPI document (JSON)
  GET /health                 Health check
  GET /files                  Newline-separated JSON, one catalog record per line
  GET /icons                  Same, restricted to 32x32 icon records
  GET /icons/{icon_id}        Composited PNG icon

Usage::

    from dat_icons.api.app import create_app

    app = create_app(store=store, archive=archive, settings=settings)
"""

from __future__ import annotations

import random
from typing import Any, Sequence

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from dat_icons import __version__
from dat_icons.core.config import IconConfig, Settings
from dat_icons.core.enums import FileSubtype, LayerRole
from dat_icons.core.errors import IconServiceError
from dat_icons.core.interfaces import IArchiveReader, IRecordStore
from dat_icons.core.models import Record
from dat_icons.imaging.encoder import MAX_SCALE, MIN_SCALE, parse_scale
from dat_icons.names import resolve_named
from dat_icons.observability.logger import bind_request, get_logger
from dat_icons.orchestrator import IconPipeline

logger = get_logger(__name__)

_ID_HELP = (
    "Icon ID as decimal or hex, absolute or relative to 0x06000000. "
    "For example 0x6957, 0x06006957, 26967 and 100690263 all name the same icon."
)


def create_app(
    store: IRecordStore,
    archive: IArchiveReader,
    settings: Settings | None = None,
    rng: random.Random | None = None,
) -> FastAPI:
    """Create the icon service FastAPI application.

    Args:
        store: Record catalog.
        archive: Archive byte-range reader.
        settings: Application settings; defaults are used when omitted.
        rng: Random source for ``random`` background/effect selection.
    """
    settings = settings or Settings()
    icons: IconConfig = settings.icons

    app = FastAPI(
        title="DAT Icon Service",
        description="Composited game icons served from the archive as PNG.",
        version=__version__,
    )

    app.state.settings = settings
    app.state.store = store
    app.state.rng = rng or random.Random()
    app.state.pipeline = IconPipeline(
        store,
        archive,
        header_skip=settings.archive.header_skip,
        default_effect=icons.default_effect,
        timeout=icons.request_timeout_seconds,
    )

    # ------------------------------------------------------------------
    # Middleware and error mapping
    # ------------------------------------------------------------------

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        rid = bind_request()
        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

    @app.exception_handler(IconServiceError)
    async def icon_error_handler(request: Request, exc: IconServiceError) -> PlainTextResponse:
        logger.info(
            "request_failed",
            path=request.url.path,
            status=exc.status_code,
            error=type(exc).__name__,
        )
        return PlainTextResponse(str(exc), status_code=exc.status_code)

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    @app.get("/", include_in_schema=False)
    async def index() -> JSONResponse:
        return JSONResponse(app.openapi())

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(
        "/files",
        response_class=PlainTextResponse,
        summary="List all file IDs",
        description="Newline-separated JSON objects, one per catalog record.",
    )
    async def files_index() -> PlainTextResponse:
        records = await store.list_records()
        return PlainTextResponse(_json_lines(records))

    @app.get(
        "/icons",
        response_class=PlainTextResponse,
        summary="List all icon IDs",
        description="Newline-separated JSON objects for records with the icon subtype.",
    )
    async def icons_index() -> PlainTextResponse:
        records = await store.list_records(FileSubtype.ICON)
        return PlainTextResponse(_json_lines(records))

    @app.get(
        "/icons/{icon_id}",
        response_class=Response,
        summary="Get an icon",
        description=(
            "Returns a PNG icon with optional scaling applied and any provided "
            "background, underlay, overlay, overlay2 or UI effect mixed in. "
            + _ID_HELP
        ),
        responses={
            200: {"content": {"image/png": {}}},
            400: {"description": "Invalid identifier, scale or name"},
            404: {"description": "Record not found"},
            500: {"description": "Archive read, decode or encode failure"},
        },
    )
    async def icons_get(
        icon_id: str,
        scale: str | None = None,
        background: str | None = None,
        underlay: str | None = None,
        overlay: str | None = None,
        overlay2: str | None = None,
        ui_effect: str | None = None,
    ) -> Response:
        rng: random.Random = app.state.rng
        layers: dict[LayerRole, str | int] = {}
        if background is not None:
            layers[LayerRole.BACKGROUND] = resolve_named(
                background, icons.backgrounds, kind="background", rng=rng
            )
        for role, value in (
            (LayerRole.UNDERLAY, underlay),
            (LayerRole.OVERLAY, overlay),
            (LayerRole.OVERLAY2, overlay2),
        ):
            if value is not None:
                layers[role] = value
        if ui_effect is not None:
            layers[LayerRole.EFFECT] = resolve_named(
                ui_effect, icons.ui_effects, kind="ui_effect", rng=rng
            )

        pipeline: IconPipeline = app.state.pipeline
        png = await pipeline.render(icon_id, scale=parse_scale(scale), layers=layers)
        return Response(
            content=png,
            media_type="image/png",
            headers={"Content-Disposition": "inline"},
        )

    _document_query_params(app)
    return app


def _json_lines(records: Sequence[Record]) -> str:
    return "\n".join(record.model_dump_json() for record in records)


def _document_query_params(app: FastAPI) -> None:
    """Attach descriptions and bounds to the icon route's query parameters.

    The parameters are plain strings so that validation errors come back as
    400 plain text rather than FastAPI's 422 JSON; the schema still
    advertises their real shape.
    """
    descriptions: dict[str, dict[str, Any]] = {
        "icon_id": {"description": _ID_HELP},
        "scale": {
            "description": "Optional integer value to scale the image by.",
            "schema": {"type": "integer", "default": 1, "minimum": MIN_SCALE, "maximum": MAX_SCALE},
        },
        "background": {
            "description": (
                "Background texture ID or item type name (case-insensitive). "
                "Use 'random' for a random item type background."
            ),
        },
        "underlay": {"description": "Underlay texture ID."},
        "overlay": {"description": "Overlay texture ID."},
        "overlay2": {"description": "Secondary overlay texture ID."},
        "ui_effect": {
            "description": (
                "UI effect texture ID or effect name (case-insensitive). "
                "Use 'random' for a random effect. Defaults to transparent."
            ),
        },
    }

    openapi = app.openapi
    cache: dict[str, Any] = {}

    def custom_openapi() -> dict[str, Any]:
        if "schema" in cache:
            return cache["schema"]
        schema = openapi()
        operation = schema["paths"]["/icons/{icon_id}"]["get"]
        for param in operation.get("parameters", []):
            param.update(descriptions.get(param["name"], {}))
        cache["schema"] = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[method-assign]
