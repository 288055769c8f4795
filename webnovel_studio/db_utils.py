"""Database helper utilities for ensuring schema consistency."""
from __future__ import annotations

from typing import Iterable, Set

from sqlalchemy import inspect, text

from .extensions import db


def _get_column_names(table_name: str) -> Set[str]:
    inspector = inspect(db.engine)
    return {column["name"] for column in inspector.get_columns(table_name)}


def ensure_database_schema() -> None:
    """Ensure that essential schema updates are applied.

    Runs on every application start. Missing tables are created, and
    databases created before episode summaries and the denormalised episode
    count existed get the ``episodes.summary`` and
    ``novels.current_episode_count`` columns added in place.
    """

    inspector = inspect(db.engine)
    table_names: Iterable[str] = inspector.get_table_names()

    if "users" not in table_names:
        db.create_all()
        inspector = inspect(db.engine)
        table_names = inspector.get_table_names()

    # Import locally to avoid circular import issues during application setup.
    from .models import Episode, Novel

    required_tables = {
        "novels": Novel.__table__,
        "episodes": Episode.__table__,
    }

    for table_name, table in required_tables.items():
        if table_name not in table_names:
            table.create(bind=db.engine)

    alter_statements = []
    if "novels" in table_names:
        if "current_episode_count" not in _get_column_names("novels"):
            alter_statements.append(
                "ALTER TABLE novels ADD COLUMN current_episode_count INTEGER NOT NULL DEFAULT 0"
            )

    if "episodes" in table_names:
        if "summary" not in _get_column_names("episodes"):
            alter_statements.append("ALTER TABLE episodes ADD COLUMN summary TEXT")

    for statement in alter_statements:
        with db.engine.begin() as connection:
            connection.execute(text(statement))
