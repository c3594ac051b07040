"""
Schema migrations for the listkeeper store.

Each `NNN_name.sql` file holds an `-- Up` section and an optional `-- Down`
section. Only the Up section is executed; applied files are recorded in
`_migrations` so every file runs once per database.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"

UP_MARKER = "-- Up"
DOWN_MARKER = "-- Down"


@dataclass(frozen=True)
class Migration:
    name: str
    up_sql: str


def load_migration(path: Path) -> Migration:
    text = path.read_text()
    up_sql, _, _ = text.partition(DOWN_MARKER)
    return Migration(name=path.name, up_sql=up_sql.replace(UP_MARKER, "", 1).strip())


def discover_migrations(migrations_dir: Path) -> list[Migration]:
    return [load_migration(p) for p in sorted(migrations_dir.glob("*.sql"))]


class SQLiteMigrator:
    def __init__(self, db_path: str, migrations_dir: str | Path = MIGRATIONS_DIR):
        self.db_path = db_path
        self.migrations_dir = Path(migrations_dir)

    def _connect(self) -> sqlite3.Connection:
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute(
            "CREATE TABLE IF NOT EXISTS _migrations ("
            " filename TEXT PRIMARY KEY,"
            " applied_at DATETIME DEFAULT CURRENT_TIMESTAMP)"
        )
        return conn

    def applied(self) -> set[str]:
        conn = self._connect()
        try:
            return {row[0] for row in conn.execute("SELECT filename FROM _migrations")}
        finally:
            conn.close()

    def run_migrations(self) -> list[str]:
        """Apply every migration not yet recorded. Returns the names applied."""
        done = self.applied()
        pending = [m for m in discover_migrations(self.migrations_dir) if m.name not in done]
        if not pending:
            logger.debug("Schema is up to date")
            return []

        conn = self._connect()
        try:
            for migration in pending:
                self._apply(conn, migration)
        finally:
            conn.close()
        return [m.name for m in pending]

    def _apply(self, conn: sqlite3.Connection, migration: Migration) -> None:
        logger.info("Applying migration %s", migration.name)
        # Schema changes and the bookkeeping row commit together
        name = migration.name.replace("'", "''")
        script = (
            f"BEGIN;\n{migration.up_sql}\n"
            f"INSERT INTO _migrations (filename) VALUES ('{name}');\nCOMMIT;"
        )
        try:
            conn.executescript(script)
        except sqlite3.Error as e:
            if conn.in_transaction:
                conn.rollback()
            raise RuntimeError(f"Migration {migration.name} failed: {e}") from e
