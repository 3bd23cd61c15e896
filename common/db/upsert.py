"""
Dialect-aware INSERT ... ON CONFLICT builder.

PostgreSQL and SQLite share the ``on_conflict_do_update`` API; the insert
construct just has to come from the dialect the session is bound to.
"""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.exceptions import StorageError

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def dialect_insert(session: AsyncSession, table):
    """Return an ``insert(table)`` supporting ``on_conflict_do_update``."""
    dialect_name = session.get_bind().dialect.name
    try:
        insert = _INSERTS[dialect_name]
    except KeyError:
        raise StorageError(f"Upsert is not supported on {dialect_name}")
    return insert(table)
