"""Application bootstrap.

Wires settings, the record catalog and the archive reader together and runs
the HTTP server or one-off catalog/render tasks.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Iterator

import uvicorn
from sqlalchemy.ext.asyncio import AsyncEngine

from .api.app import create_app
from .core.config import Settings, load_settings
from .core.enums import LayerRole
from .core.errors import ConfigError
from .core.interfaces import IArchiveReader
from .core.models import Record
from .names import resolve_named
from .observability.logger import setup_logging
from .orchestrator import IconPipeline
from .storage.archive import FileArchiveReader, HttpArchiveReader
from .storage.sql.connection import create_all, create_engine, create_session_factory
from .storage.sql.repos import SqlRecordStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Component wiring
# ---------------------------------------------------------------------------

def build_archive(settings: Settings) -> IArchiveReader:
    settings.validate_archive()
    if settings.archive.path:
        path = Path(settings.archive.path)
        if not path.is_file():
            raise ConfigError(f"Archive file doesn't exist: {path}")
        return FileArchiveReader(path)
    return HttpArchiveReader(
        settings.archive.url, timeout=settings.archive.timeout_seconds
    )


def build_engine(settings: Settings) -> AsyncEngine:
    return create_engine(
        settings.catalog.database_url,
        pool_size=settings.catalog.pool_size,
        echo=settings.catalog.echo,
    )


@asynccontextmanager
async def open_catalog(settings: Settings) -> AsyncIterator[SqlRecordStore]:
    """Yield a catalog store, disposing of its engine afterwards."""
    engine = build_engine(settings)
    try:
        yield SqlRecordStore(create_session_factory(engine))
    finally:
        await engine.dispose()


@asynccontextmanager
async def open_archive(settings: Settings) -> AsyncIterator[IArchiveReader]:
    archive = build_archive(settings)
    try:
        yield archive
    finally:
        if isinstance(archive, HttpArchiveReader):
            await archive.close()


def _setup_logging(settings: Settings) -> None:
    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

async def serve(
    config_path: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> None:
    """Load config, wire the catalog and archive, and run the HTTP server."""
    settings = load_settings(config_path=config_path, overrides=overrides)
    _setup_logging(settings)

    async with open_catalog(settings) as store, open_archive(settings) as archive:
        app = create_app(store=store, archive=archive, settings=settings)
        config = uvicorn.Config(
            app,
            host=settings.server.host,
            port=settings.server.port,
            log_config=None,
        )
        logger.info(
            "Serving icons on http://%s:%d", settings.server.host, settings.server.port
        )
        await uvicorn.Server(config).serve()


async def init_db(config_path: str | None = None) -> None:
    settings = load_settings(config_path=config_path)
    _setup_logging(settings)
    engine = build_engine(settings)
    try:
        await create_all(engine)
    finally:
        await engine.dispose()


def read_index(path: str | Path) -> Iterator[Record]:
    """Parse a JSON-lines index file, one record descriptor per line.

    Accepts the output of ``GET /files``. Blank lines are skipped.

    Raises:
        ConfigError: If a line is not a valid record descriptor.
    """
    with open(path, encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield Record.model_validate(json.loads(line))
            except ValueError as exc:
                raise ConfigError(f"{path}:{lineno}: invalid record: {exc}") from exc


async def import_index(
    index_path: str,
    config_path: str | None = None,
    create_tables: bool = True,
) -> int:
    """Load record descriptors from *index_path* into the catalog."""
    settings = load_settings(config_path=config_path)
    _setup_logging(settings)
    records = list(read_index(index_path))

    engine = build_engine(settings)
    try:
        if create_tables:
            await create_all(engine)
        store = SqlRecordStore(create_session_factory(engine))
        count = await store.add_records(records)
    finally:
        await engine.dispose()

    logger.info("Imported %d records from %s", count, index_path)
    return count


async def render(
    icon_id: str,
    *,
    scale: int = 1,
    layers: dict[LayerRole, str] | None = None,
    config_path: str | None = None,
) -> bytes:
    """Render one icon without the HTTP layer."""
    settings = load_settings(config_path=config_path)
    _setup_logging(settings)

    resolved: dict[LayerRole, str | int] = dict(layers or {})
    if LayerRole.BACKGROUND in resolved:
        resolved[LayerRole.BACKGROUND] = resolve_named(
            layers[LayerRole.BACKGROUND], settings.icons.backgrounds, kind="background"
        )
    if LayerRole.EFFECT in resolved:
        resolved[LayerRole.EFFECT] = resolve_named(
            layers[LayerRole.EFFECT], settings.icons.ui_effects, kind="ui_effect"
        )

    async with open_catalog(settings) as store, open_archive(settings) as archive:
        pipeline = IconPipeline(
            store,
            archive,
            header_skip=settings.archive.header_skip,
            default_effect=settings.icons.default_effect,
            timeout=settings.icons.request_timeout_seconds,
        )
        return await pipeline.render(icon_id, scale=scale, layers=resolved)
