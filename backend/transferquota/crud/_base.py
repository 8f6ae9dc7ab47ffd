"""Helpers shared by the CRUD singletons."""

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


def insert_ignoring_conflict(
    db: AsyncSession, model: Any, values: dict[str, Any], index_elements: list[str]
):
    """Build ``INSERT ... ON CONFLICT DO NOTHING`` for the session's dialect.

    PostgreSQL in production, SQLite in tests; both support the same clause.
    """
    dialect = db.bind.dialect.name if db.bind is not None else "postgresql"
    insert = sqlite.insert if dialect == "sqlite" else postgresql.insert
    return insert(model).values(**values).on_conflict_do_nothing(index_elements=index_elements)
