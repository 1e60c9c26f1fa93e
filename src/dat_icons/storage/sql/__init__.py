"""SQL-backed record catalog (SQLAlchemy async: asyncpg or aiosqlite)."""
