"""In-memory catalog and archive for tests and local development.

No external dependencies. Both classes satisfy the same protocols as the
SQL and file/HTTP implementations.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from dat_icons.core.enums import FileSubtype
from dat_icons.core.errors import FetchFailure
from dat_icons.core.models import Record


class MemoryRecordStore:
    """Dict-backed ``IRecordStore``."""

    def __init__(self, records: Iterable[Record] = ()) -> None:
        self._records: dict[int, Record] = {r.id: r for r in records}
        self.lookups: list[int] = []

    def put(self, record: Record) -> None:
        self._records[record.id] = record

    async def lookup(self, record_id: int) -> Record | None:
        self.lookups.append(record_id)
        return self._records.get(record_id)

    async def list_records(self, subtype: FileSubtype | None = None) -> list[Record]:
        return [
            self._records[rid]
            for rid in sorted(self._records)
            if subtype is None or self._records[rid].file_subtype == subtype
        ]

    async def add_records(self, records: Sequence[Record]) -> int:
        for record in records:
            self.put(record)
        return len(records)


class MemoryArchiveReader:
    """``IArchiveReader`` over an in-process byte blob."""

    def __init__(self, blob: bytes = b"") -> None:
        self._blob = bytearray(blob)

    def append(self, item: bytes) -> int:
        """Append *item* to the blob and return its offset."""
        offset = len(self._blob)
        self._blob.extend(item)
        return offset

    async def fetch(self, offset: int, length: int) -> bytes:
        data = bytes(self._blob[offset:offset + length])
        if not data:
            raise FetchFailure(
                f"Archive returned no data for range {offset}+{length}"
            )
        return data
