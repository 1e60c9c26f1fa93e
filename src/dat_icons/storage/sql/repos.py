"""Repository and record-store implementations for the catalog.

:class:`FileRepo` holds the query logic and works on a caller-provided
:class:`AsyncSession`. :class:`SqlRecordStore` adapts it to the
``IRecordStore`` protocol, opening one session per call.
"""

from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dat_icons.core.enums import FileSubtype, FileType
from dat_icons.core.errors import StoreError
from dat_icons.core.models import Record

from .connection import session_scope
from .models import FileRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Conversion helpers
# ---------------------------------------------------------------------------

def _to_file_record(record: Record) -> FileRecord:
    return FileRecord(
        id=record.id,
        file_offset=record.offset,
        file_size=record.length,
        file_type=record.file_type.value,
        file_subtype=record.file_subtype.value,
    )


def _to_record(row: FileRecord) -> Record:
    return Record(
        id=row.id,
        offset=row.file_offset,
        length=row.file_size,
        file_type=FileType(row.file_type),
        file_subtype=FileSubtype(row.file_subtype),
    )


# ---------------------------------------------------------------------------
# FileRepo
# ---------------------------------------------------------------------------

class FileRepo:
    """Repository for :class:`FileRecord` persistence and retrieval."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_record(self, record_id: int) -> Record | None:
        row = await self._session.get(FileRecord, record_id)
        if row is None:
            return None
        return _to_record(row)

    async def list_records(self, subtype: FileSubtype | None = None) -> list[Record]:
        stmt = select(FileRecord).order_by(FileRecord.id)
        if subtype is not None:
            stmt = stmt.where(FileRecord.file_subtype == subtype.value)
        result = await self._session.execute(stmt)
        return [_to_record(row) for row in result.scalars().all()]

    async def save_records(self, records: Sequence[Record]) -> int:
        """Insert or update records (upsert semantics via merge)."""
        for record in records:
            await self._session.merge(_to_file_record(record))
        await self._session.flush()
        logger.debug("Saved %d catalog records", len(records))
        return len(records)


# ---------------------------------------------------------------------------
# SqlRecordStore
# ---------------------------------------------------------------------------

class SqlRecordStore:
    """``IRecordStore`` over a SQLAlchemy async session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def lookup(self, record_id: int) -> Record | None:
        try:
            async with session_scope(self._session_factory) as session:
                return await FileRepo(session).get_record(record_id)
        except SQLAlchemyError as exc:
            raise StoreError(f"Catalog lookup failed: {exc}") from exc

    async def list_records(self, subtype: FileSubtype | None = None) -> list[Record]:
        try:
            async with session_scope(self._session_factory) as session:
                return await FileRepo(session).list_records(subtype)
        except SQLAlchemyError as exc:
            raise StoreError(f"Catalog listing failed: {exc}") from exc

    async def add_records(self, records: Sequence[Record]) -> int:
        try:
            async with session_scope(self._session_factory) as session:
                return await FileRepo(session).save_records(records)
        except SQLAlchemyError as exc:
            raise StoreError(f"Catalog import failed: {exc}") from exc
