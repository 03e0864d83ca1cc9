from __future__ import annotations

import sqlite3

from flask import current_app
from sqlalchemy import event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from techfest.extensions import db

CORE_TABLES = {'user', 'event', 'registration', 'announcement', 'winner', 'audit_log'}


@event.listens_for(Engine, 'connect')
def enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite only honours ON DELETE rules with this pragma set per connection."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys = ON')
        cursor.close()


def close_db(_: Exception | None = None) -> None:
    db.session.remove()


def ensure_core_tables() -> None:
    """Create the ORM tables when a fresh database has none of them.

    A development convenience so the app runs before ``flask db upgrade``.
    """
    try:
        existing = set(inspect(db.engine).get_table_names())
        if not CORE_TABLES.issubset(existing):
            db.create_all()
    except SQLAlchemyError as e:
        current_app.logger.warning(f"Could not ensure core tables: {e}")


__all__ = ["close_db", "ensure_core_tables", "enable_sqlite_foreign_keys", "CORE_TABLES"]
