"""Shared fixtures for the dat-icon-service test suite."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from dat_icons.core.enums import FileSubtype
from dat_icons.core.models import Record
from dat_icons.imaging.raster import RASTER_BYTES, RASTER_SHAPE, Raster
from dat_icons.names import TRANSPARENT_EFFECT
from dat_icons.orchestrator import IconPipeline
from dat_icons.storage.memory import MemoryArchiveReader, MemoryRecordStore

HEADER_SKIP = 28

BASE_ID = 0x06006957
BACKGROUND_ID = 0x060011CF
OVERLAY_ID = 0x06001234
FIRE_ID = 0x06001B2E


# ---------------------------------------------------------------------------
# Rasters
# ---------------------------------------------------------------------------

def noise_raster(seed: int, alpha: int | None = None) -> Raster:
    """Deterministic pseudo-random raster; fixed alpha when given."""
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=RASTER_SHAPE, dtype=np.uint8)
    if alpha is not None:
        pixels[..., 3] = alpha
    return Raster(pixels)


def png_pixels(png: bytes) -> np.ndarray:
    with Image.open(io.BytesIO(png)) as image:
        assert image.mode == "RGBA"
        return np.asarray(image).copy()


@pytest.fixture
def transparent_raster() -> Raster:
    return Raster.solid((0, 0, 0, 0))


@pytest.fixture
def base_raster() -> Raster:
    return noise_raster(1)


@pytest.fixture
def background_raster() -> Raster:
    return noise_raster(2, alpha=255)


@pytest.fixture
def overlay_raster() -> Raster:
    return noise_raster(3)


# ---------------------------------------------------------------------------
# Catalog + archive
# ---------------------------------------------------------------------------

class IconWorld:
    """Memory catalog and archive kept in step with each other."""

    def __init__(self) -> None:
        self.store = MemoryRecordStore()
        self.archive = MemoryArchiveReader()

    def add(
        self,
        record_id: int,
        raster: Raster | None = None,
        *,
        payload: bytes | None = None,
        length: int = RASTER_BYTES,
        subtype: FileSubtype = FileSubtype.ICON,
    ) -> Record:
        """Store an item (28-byte header + pixels) and catalog it."""
        if payload is None:
            payload = raster.tobytes() if raster is not None else bytes(RASTER_BYTES)
        offset = self.archive.append(bytes(HEADER_SKIP) + payload)
        record = Record(id=record_id, offset=offset, length=length, file_subtype=subtype)
        self.store.put(record)
        return record


@pytest.fixture
def world(transparent_raster, base_raster) -> IconWorld:
    """Catalog holding a base icon and the default transparent effect."""
    w = IconWorld()
    w.add(BASE_ID, base_raster)
    w.add(TRANSPARENT_EFFECT, transparent_raster)
    return w


@pytest.fixture
def pipeline(world) -> IconPipeline:
    return IconPipeline(world.store, world.archive, header_skip=HEADER_SKIP)
