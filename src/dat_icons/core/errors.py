"""Custom exception hierarchy for the icon service.

Every error carries the HTTP status it maps to at the API boundary.
"""


class IconServiceError(Exception):
    """Base exception for all icon service errors."""

    status_code: int = 500
    stage: str | None = None  # Pipeline stage the error aborted, when known


# --- Configuration ---
class ConfigError(IconServiceError):
    """Invalid or missing configuration."""


# --- Validation (caller errors) ---
class ValidationError(IconServiceError):
    """Request parameter failed validation."""

    status_code = 400


class InvalidIdentifier(ValidationError):
    """Identifier text is malformed or has the wrong length."""


class InvalidScale(ValidationError):
    """Scale is not an integer between 1 and 8."""


class InvalidSymbolicName(ValidationError):
    """Background or UI effect name is not in the name table."""


# --- Catalog ---
class RecordNotFound(IconServiceError):
    """Canonical ID is absent from the record catalog."""

    status_code = 404

    def __init__(self, record_id: int):
        self.record_id = record_id
        super().__init__(
            f"Failed to find record for ID 0x{record_id & 0xFFFFFFFF:08X}"
        )


class StoreError(IconServiceError):
    """Record catalog backend failure."""


# --- Archive / imaging ---
class FetchFailure(IconServiceError):
    """Archive byte-range read failed or returned no data."""


class DecodeFailure(IconServiceError):
    """Fetched bytes do not form a valid raster."""


class EncodeFailure(IconServiceError):
    """Resampling or PNG encoding failed."""
