"""Set-style write primitives."""

from typing import Any

from sqlalchemy import Table
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


async def insert_ignore(db: AsyncSession, table: Table, values: dict[str, Any]) -> bool:
    """
    Insert a row unless its primary key already exists.

    This is the relational form of a set-add: concurrent adds of the same
    member never conflict and repeated adds are no-ops.

    Returns:
        True if a row was inserted.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(table).values(**values).on_conflict_do_nothing()
    elif dialect == "sqlite":
        stmt = sqlite.insert(table).values(**values).on_conflict_do_nothing()
    else:
        raise NotImplementedError(f"insert_ignore is not supported on {dialect}")
    result = await db.execute(stmt)
    return bool(result.rowcount)
