from __future__ import annotations

import io
import re

from PIL import Image

from ..core.errors import EncodeFailure, InvalidScale
from .compositor import CompositeCanvas
from .raster import ICON_SIZE

MIN_SCALE = 1
MAX_SCALE = 8

_SCALE = re.compile(r"\+?[0-9]+")


def check_scale(scale: int) -> int:
    if isinstance(scale, bool) or not isinstance(scale, int):
        raise InvalidScale(f"Scale must be an integer, got {scale!r}")
    if not MIN_SCALE <= scale <= MAX_SCALE:
        raise InvalidScale(
            f"Choose a scale value between {MIN_SCALE} and {MAX_SCALE}"
        )
    return scale


def parse_scale(text: str | None) -> int:
    """Parse the ``scale`` query parameter; missing means 1."""
    if text is None:
        return MIN_SCALE
    if not _SCALE.fullmatch(text):
        raise InvalidScale(f"Failed to parse scale `{text}` as an integer")
    return check_scale(int(text))


def finish(canvas: CompositeCanvas, scale: int = 1) -> bytes:
    """Upscale *canvas* by an integer factor and encode it as PNG.

    Scales above 1 resample with Lanczos (3 lobes) rather than nearest
    neighbour.

    Raises:
        InvalidScale: If *scale* is outside 1..8.
        EncodeFailure: If resampling or PNG encoding fails.
    """
    check_scale(scale)
    try:
        image = canvas.to_image()
        if scale > 1:
            size = ICON_SIZE * scale
            image = image.resize((size, size), Image.Resampling.LANCZOS)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
    except (OSError, ValueError) as exc:
        raise EncodeFailure(f"Failed to encode PNG: {exc}") from exc
    return buffer.getvalue()
