from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import numpy.typing as npt

ICON_SIZE = 32
CHANNELS = 4
RASTER_SHAPE = (ICON_SIZE, ICON_SIZE, CHANNELS)
RASTER_BYTES = ICON_SIZE * ICON_SIZE * CHANNELS

UInt8Array = npt.NDArray[np.uint8]


@dataclass(frozen=True)
class Raster:
    """A decoded 32x32 RGBA pixel grid, straight (non-premultiplied) alpha."""

    pixels: UInt8Array

    def __post_init__(self) -> None:
        if self.pixels.shape != RASTER_SHAPE or self.pixels.dtype != np.uint8:
            raise ValueError(
                f"Raster must be uint8 {RASTER_SHAPE}, got "
                f"{self.pixels.dtype} {self.pixels.shape}"
            )

    @classmethod
    def solid(cls, rgba: Tuple[int, int, int, int]) -> "Raster":
        pixels = np.empty(RASTER_SHAPE, dtype=np.uint8)
        pixels[...] = rgba
        return cls(pixels)

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()
