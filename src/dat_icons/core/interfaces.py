"""Protocol interfaces for the external collaborators.

The pipeline only ever talks to the catalog and the archive through these
two narrow capabilities, so any backend can be substituted behind them.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from .enums import FileSubtype
from .models import Record


@runtime_checkable
class IRecordStore(Protocol):
    """Record catalog keyed by canonical ID."""

    async def lookup(self, record_id: int) -> Record | None:
        """Return the record for *record_id*, or ``None`` if absent."""
        ...

    async def list_records(
        self, subtype: FileSubtype | None = None
    ) -> Sequence[Record]: ...

    async def add_records(self, records: Sequence[Record]) -> int: ...


@runtime_checkable
class IArchiveReader(Protocol):
    """Byte-range access to the archive blob."""

    async def fetch(self, offset: int, length: int) -> bytes:
        """Return *length* bytes starting at *offset*.

        Raises:
            FetchFailure: If the read fails.
        """
        ...
