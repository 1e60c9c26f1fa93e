"""Initial schema: record catalog.

Revision ID: 001_initial
Revises: None
Create Date: 2024-01-01 00:00:00.000000
"""
from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # One row per archive item, keyed by canonical ID
    op.create_table(
        "files",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("file_offset", sa.BigInteger, nullable=False),
        sa.Column("file_size", sa.BigInteger, nullable=False),
        sa.Column("file_type", sa.String(16), nullable=False, server_default="texture"),
        sa.Column("file_subtype", sa.String(16), nullable=False, server_default="icon"),
    )
    op.create_index("ix_files_file_subtype", "files", ["file_subtype"])


def downgrade() -> None:
    op.drop_index("ix_files_file_subtype", table_name="files")
    op.drop_table("files")
