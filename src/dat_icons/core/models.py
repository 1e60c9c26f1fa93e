"""Core domain models used across the icon service."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .enums import FileSubtype, FileType, LayerRole


class Record(BaseModel):
    """Catalog entry mapping a canonical ID to an archive byte range.

    ``offset`` points at the start of the stored item (its header included);
    ``length`` is the size of the pixel payload that follows the header.
    """

    model_config = {"frozen": True}

    id: int
    offset: int = Field(ge=0, lt=2**64)
    length: int = Field(ge=0, lt=2**32)
    file_type: FileType = FileType.TEXTURE
    file_subtype: FileSubtype = FileSubtype.ICON


class IconRequest(BaseModel):
    """A fully resolved render request: canonical IDs only."""

    model_config = {"frozen": True}

    base: int
    scale: int = 1
    layers: dict[LayerRole, int] = Field(default_factory=dict)

    def layer_ids(self) -> dict[LayerRole, int]:
        """All layers to fetch, keyed by role, base included."""
        ids = {role: rid for role, rid in self.layers.items() if role != LayerRole.BASE}
        ids[LayerRole.BASE] = self.base
        return ids
