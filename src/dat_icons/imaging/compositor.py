"""Ordered alpha compositing of icon layers.

Layers are painted bottom to top in ``LayerRole`` declaration order:
Background, Underlay, Base, Overlay, Overlay2, Effect. Absent roles are
skipped, never stood in for by a transparent placeholder.
"""

from __future__ import annotations

from typing import Mapping

import numpy as np
from PIL import Image

from ..core.enums import LayerRole
from .raster import RASTER_SHAPE, Raster, UInt8Array


def alpha_over(dst: UInt8Array, src: UInt8Array) -> UInt8Array:
    """Blend *src* over *dst* (straight alpha, Porter-Duff "over").

    Fully transparent source pixels keep the destination byte-for-byte and
    fully opaque source pixels replace it byte-for-byte.
    """
    sa = src[..., 3:4].astype(np.float64) / 255.0
    da = dst[..., 3:4].astype(np.float64) / 255.0

    out_a = sa + da * (1.0 - sa)
    # Avoid division by zero where both pixels are transparent
    safe_a = np.where(out_a == 0.0, 1.0, out_a)
    out_rgb = (src[..., :3] * sa + dst[..., :3] * da * (1.0 - sa)) / safe_a

    out = np.empty_like(dst)
    out[..., :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)
    out[..., 3:4] = np.clip(np.rint(out_a * 255.0), 0, 255).astype(np.uint8)

    transparent = src[..., 3] == 0
    opaque = src[..., 3] == 255
    out[transparent] = dst[transparent]
    out[opaque] = src[opaque]
    return out


class CompositeCanvas:
    """Mutable 32x32 RGBA accumulator for a single request.

    The first layer painted is copied in as-is; every later layer is
    alpha-blended over the accumulated pixels.
    """

    def __init__(self) -> None:
        self._pixels: UInt8Array = np.zeros(RASTER_SHAPE, dtype=np.uint8)
        self._empty = True

    @property
    def pixels(self) -> UInt8Array:
        return self._pixels

    def paint(self, raster: Raster) -> None:
        if self._empty:
            self._pixels = raster.pixels.copy()
            self._empty = False
        else:
            self._pixels = alpha_over(self._pixels, raster.pixels)

    def tobytes(self) -> bytes:
        return self._pixels.tobytes()

    def to_image(self) -> Image.Image:
        return Image.fromarray(self._pixels)


def composite(
    base: Raster, optional_layers: Mapping[LayerRole, Raster] | None = None
) -> CompositeCanvas:
    """Stack *base* and any optional layers into a new canvas."""
    layers = dict(optional_layers or {})
    if LayerRole.BASE in layers:
        raise ValueError("Base raster must be passed as `base`, not as an optional layer")
    layers[LayerRole.BASE] = base

    canvas = CompositeCanvas()
    for role in LayerRole:
        raster = layers.get(role)
        if raster is not None:
            canvas.paint(raster)
    return canvas
