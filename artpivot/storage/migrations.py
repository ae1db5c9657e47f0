"""Additive schema migrations for the ArtPivot catalogue.

``create_all()`` handles a fresh database. Older databases created before a
column was added (for example ``image_url`` on periods) are brought up to
date here by adding the missing tables and columns. Type changes and
drops are out of reach of this helper.
"""

from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from artpivot.storage.models import Base

logger = logging.getLogger(__name__)


def check_schema(engine: Engine) -> list[tuple[str, str | None]]:
    """Compare the live schema against the ORM models.

    Returns ``(table, column)`` pairs that are missing; ``column`` is None
    when the whole table is missing. An empty list means up to date.
    """
    inspector = inspect(engine)
    existing_tables = set(inspector.get_table_names())

    missing: list[tuple[str, str | None]] = []
    for name, table in sorted(Base.metadata.tables.items()):
        if name not in existing_tables:
            missing.append((name, None))
            continue
        existing_cols = {c["name"] for c in inspector.get_columns(name)}
        for col in table.columns:
            if col.name not in existing_cols:
                missing.append((name, col.name))
    return missing


def _column_ddl(engine: Engine, table: str, column: str) -> str:
    sa_col = Base.metadata.tables[table].columns[column]
    col_type = sa_col.type.compile(engine.dialect)
    ddl = f"ALTER TABLE {table} ADD COLUMN {column} {col_type}"
    default = sa_col.default.arg if sa_col.default is not None else None
    # SQLite refuses NOT NULL without a default on ALTER TABLE
    if isinstance(default, (str, int, float)):
        ddl += f" DEFAULT {default!r}"
        if not sa_col.nullable:
            ddl += " NOT NULL"
    return ddl


def migrate(engine: Engine) -> list[str]:
    """Apply missing tables and columns. Returns a description of each change."""
    missing = check_schema(engine)
    if not missing:
        logger.info("Schema is up to date.")
        return []

    logger.info("Found %d schema differences, migrating...", len(missing))
    applied: list[str] = []

    if any(col is None for _, col in missing):
        Base.metadata.create_all(engine)
        applied.extend(f"created table {t}" for t, col in missing if col is None)

    for table, column in missing:
        if column is None:
            continue
        with engine.begin() as conn:
            conn.execute(text(_column_ddl(engine, table, column)))
        logger.info("Added column %s.%s", table, column)
        applied.append(f"added column {table}.{column}")

    logger.info("Migration complete.")
    return applied
