from __future__ import annotations

import numpy as np

from ..core.errors import DecodeFailure
from .raster import RASTER_BYTES, RASTER_SHAPE, Raster


def decode(data: bytes) -> Raster:
    """Reinterpret an archive payload as a 32x32 RGBA raster.

    Bytes are taken as-is: no color conversion, no premultiplication, and no
    resizing of payloads that are the wrong size.

    Raises:
        DecodeFailure: If *data* is not exactly 4096 bytes.
    """
    if len(data) != RASTER_BYTES:
        raise DecodeFailure(
            f"Expected {RASTER_BYTES} bytes of RGBA pixel data, got {len(data)}"
        )
    pixels = np.frombuffer(data, dtype=np.uint8).reshape(RASTER_SHAPE)
    return Raster(pixels)
