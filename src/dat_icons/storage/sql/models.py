"""SQLAlchemy ORM models for the record catalog.

One row per archive item. ``file_offset`` is the item's position in the
archive blob (header included) and ``file_size`` the length of the pixel
payload after the header.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""

    pass


class FileRecord(Base):
    """Catalog entry for one archive item, keyed by canonical ID."""

    __tablename__ = "files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    file_offset: Mapped[int] = mapped_column(BigInteger, nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    file_type: Mapped[str] = mapped_column(String(16), nullable=False, default="texture")
    file_subtype: Mapped[str] = mapped_column(String(16), nullable=False, default="icon")

    __table_args__ = (
        Index("ix_files_file_subtype", "file_subtype"),
    )

    def __repr__(self) -> str:
        return (
            f"<FileRecord(id=0x{self.id & 0xFFFFFFFF:08X}, "
            f"offset={self.file_offset}, size={self.file_size})>"
        )
