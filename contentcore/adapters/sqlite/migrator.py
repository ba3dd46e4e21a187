"""
Schema migrations for the SQLite adapter.

Migration files are named `NNNN_description.sql` and applied in numeric
order. Each file holds an Up section; anything after a `-- Down` marker is
ignored. After applying, the schema is checked for every table the repos
read and write.
"""

import logging
import re
import sqlite3
from pathlib import Path

from contentcore.domain.errors import InfrastructureError

logger = logging.getLogger(__name__)

MIGRATION_FILE = re.compile(r"^(\d{4})_[a-z0-9_]+\.sql$")

REQUIRED_TABLES = frozenset(
    {
        "content_versions",
        "catalog_entries",
        "templates",
        "design_versions",
        "redirect_rules",
        "published_pages",
    }
)


class SQLiteMigrator:
    def __init__(self, db_path: str, migrations_dir: str | Path):
        self.db_path = db_path
        self.migrations_dir = Path(migrations_dir)

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _ensure_migration_table(self, conn: sqlite3.Connection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_migrations (
                number INTEGER PRIMARY KEY,
                filename TEXT UNIQUE NOT NULL,
                applied_at TEXT DEFAULT CURRENT_TIMESTAMP
            );
        """)

    def migration_files(self) -> list[tuple[int, Path]]:
        """Every migration file, ordered by number. Unnumbered .sql files are an error."""
        numbered: dict[int, Path] = {}
        for path in self.migrations_dir.glob("*.sql"):
            match = MIGRATION_FILE.match(path.name)
            if match is None:
                raise InfrastructureError(f"Migration file {path.name} is not NNNN_name.sql")
            number = int(match.group(1))
            if number in numbered:
                raise InfrastructureError(
                    f"Migrations {numbered[number].name} and {path.name} share number {number}"
                )
            numbered[number] = path
        return sorted(numbered.items())

    def run_migrations(self) -> list[str]:
        """Apply pending migrations and verify the schema. Returns the filenames applied."""
        files = self.migration_files()
        conn = self._get_connection()
        applied_now: list[str] = []
        try:
            self._ensure_migration_table(conn)
            applied = {row[0] for row in conn.execute("SELECT number FROM schema_migrations")}

            for number, path in files:
                if number in applied:
                    continue
                logger.info("Applying migration: %s", path.name)
                self._apply_migration(conn, number, path)
                applied_now.append(path.name)

            self._verify_schema(conn)
            logger.info("Schema up to date (%d applied now)", len(applied_now))
            return applied_now
        finally:
            conn.close()

    def _verify_schema(self, conn: sqlite3.Connection) -> None:
        tables = {
            row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        missing = sorted(REQUIRED_TABLES - tables)
        if missing:
            raise InfrastructureError(f"Schema is missing tables: {', '.join(missing)}")

    def _apply_migration(self, conn: sqlite3.Connection, number: int, path: Path) -> None:
        script = path.read_text().split("-- Down")[0]
        try:
            conn.executescript(script)
            conn.execute(
                "INSERT INTO schema_migrations (number, filename) VALUES (?, ?)",
                (number, path.name),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise InfrastructureError(f"Migration {path.name} failed: {e}") from e
