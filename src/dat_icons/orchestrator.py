"""Icon pipeline orchestrator.

Drives one render request through its stages::

    RESOLVING -> FETCHING_LAYERS -> COMPOSITING -> ENCODING -> DONE
                                                 (any) -> ERROR

Each layer's lookup -> fetch -> decode chain is independent; the chains run
concurrently and are joined before compositing. The first failure cancels
the remaining chains and aborts the request. Nothing is retried and no
partial image is ever produced.
"""

from __future__ import annotations

import asyncio
from typing import Mapping

import structlog

from .core.enums import LayerRole, PipelineStage
from .core.errors import FetchFailure, IconServiceError, RecordNotFound
from .core.ids import format_id, resolve
from .core.interfaces import IArchiveReader, IRecordStore
from .core.models import IconRequest
from .imaging.compositor import composite
from .imaging.decoder import decode
from .imaging.encoder import check_scale, finish
from .imaging.raster import Raster
from .names import TRANSPARENT_EFFECT
from .observability.logger import get_logger

logger = get_logger(__name__)

DEFAULT_HEADER_SKIP = 28


class IconPipeline:
    """Render icons from a record store and an archive reader.

    Holds no per-request state; a single instance serves concurrent
    requests.

    Args:
        store: Catalog used to look up each layer's record.
        archive: Reader for the record byte ranges.
        header_skip: Bytes of per-item header to skip before pixel data.
        default_effect: Effect layer used when a request names none.
        timeout: Optional deadline, in seconds, for fetching all layers.
    """

    def __init__(
        self,
        store: IRecordStore,
        archive: IArchiveReader,
        *,
        header_skip: int = DEFAULT_HEADER_SKIP,
        default_effect: int | None = TRANSPARENT_EFFECT,
        timeout: float | None = None,
    ) -> None:
        self._store = store
        self._archive = archive
        self._header_skip = header_skip
        self._default_effect = default_effect
        self._timeout = timeout

    def build_request(
        self,
        icon_id: str,
        *,
        scale: int = 1,
        layers: Mapping[LayerRole, str | int] | None = None,
    ) -> IconRequest:
        """Resolve textual identifiers into an :class:`IconRequest`.

        Layer values that are already ints are taken as canonical IDs
        (e.g. resolved from a symbolic name). A missing effect layer gets
        the default transparent effect.

        Raises:
            InvalidIdentifier: If any identifier fails to resolve.
            InvalidScale: If *scale* is outside 1..8.
        """
        check_scale(scale)
        base = resolve(icon_id)
        resolved: dict[LayerRole, int] = {}
        for role, value in (layers or {}).items():
            if role == LayerRole.BASE or value is None:
                continue
            resolved[role] = value if isinstance(value, int) else resolve(value)
        if LayerRole.EFFECT not in resolved and self._default_effect is not None:
            resolved[LayerRole.EFFECT] = self._default_effect
        return IconRequest(base=base, scale=scale, layers=resolved)

    async def render(
        self,
        icon_id: str,
        *,
        scale: int = 1,
        layers: Mapping[LayerRole, str | int] | None = None,
    ) -> bytes:
        """Resolve, fetch, composite and encode one icon as PNG bytes."""
        stage = PipelineStage.RESOLVING
        try:
            request = self.build_request(icon_id, scale=scale, layers=layers)
        except IconServiceError as exc:
            self._log_failure(stage, exc)
            raise
        return await self.render_request(request)

    async def render_request(self, request: IconRequest) -> bytes:
        log = logger.bind(icon_id=format_id(request.base), scale=request.scale)
        stage = PipelineStage.FETCHING_LAYERS
        try:
            log.debug("pipeline_stage", stage=stage.value, layers=len(request.layer_ids()))
            rasters = await self._fetch_layers(request.layer_ids())

            stage = PipelineStage.COMPOSITING
            base = rasters.pop(LayerRole.BASE)
            canvas = composite(base, rasters)

            stage = PipelineStage.ENCODING
            png = finish(canvas, request.scale)
        except IconServiceError as exc:
            self._log_failure(stage, exc, log)
            raise

        log.info(
            "icon_rendered",
            stage=PipelineStage.DONE.value,
            layers=sorted(role.value for role in rasters) + [LayerRole.BASE.value],
            bytes=len(png),
        )
        return png

    async def _fetch_layers(self, layer_ids: Mapping[LayerRole, int]) -> dict[LayerRole, Raster]:
        """Fan out one chain per layer and join; fail on the first error."""
        roles = list(layer_ids)
        tasks = [
            asyncio.ensure_future(self._load_layer(role, layer_ids[role]))
            for role in roles
        ]
        try:
            if self._timeout is None:
                rasters = await asyncio.gather(*tasks)
            else:
                rasters = await asyncio.wait_for(asyncio.gather(*tasks), self._timeout)
        except asyncio.TimeoutError:
            raise FetchFailure(
                f"Timed out after {self._timeout}s fetching icon layers"
            ) from None
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
        return dict(zip(roles, rasters))

    async def _load_layer(self, role: LayerRole, record_id: int) -> Raster:
        record = await self._store.lookup(record_id)
        if record is None:
            raise RecordNotFound(record_id)

        data = await self._archive.fetch(record.offset + self._header_skip, record.length)
        logger.debug(
            "layer_fetched",
            role=role.value,
            record_id=format_id(record_id),
            bytes=len(data),
        )
        return decode(data)

    @staticmethod
    def _log_failure(
        stage: PipelineStage,
        exc: IconServiceError,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        exc.stage = stage.value
        log = log or logger
        level = log.warning if exc.status_code < 500 else log.error
        level(
            "icon_failed",
            stage=PipelineStage.ERROR.value,
            failed_stage=stage.value,
            error=type(exc).__name__,
            reason=str(exc),
        )
