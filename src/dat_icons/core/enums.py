"""Enumerations used across the icon service."""

from enum import Enum


class LayerRole(str, Enum):
    """Compositing layers, declared bottom to top.

    Iterating the enum yields the z-order the compositor paints in.
    """

    BACKGROUND = "background"
    UNDERLAY = "underlay"
    BASE = "base"
    OVERLAY = "overlay"
    OVERLAY2 = "overlay2"
    EFFECT = "ui_effect"


class FileType(str, Enum):
    UNKNOWN = "unknown"
    TEXTURE = "texture"


class FileSubtype(str, Enum):
    UNKNOWN = "unknown"
    ICON = "icon"  # 32x32 texture


class PipelineStage(str, Enum):
    RESOLVING = "resolving"
    FETCHING_LAYERS = "fetching_layers"
    COMPOSITING = "compositing"
    ENCODING = "encoding"
    DONE = "done"
    ERROR = "error"
