"""Apply the SQL files under ``migrations/`` to the hotel database.

Each file runs once, in filename order, inside its own transaction. Applied
files are recorded in ``schema_migrations``.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence
from urllib.parse import quote_plus

from dotenv import load_dotenv
import psycopg
from psycopg import Connection

from exceptions import ConfigurationError

LOGGER = logging.getLogger(__name__)
MIGRATIONS_DIR = Path(__file__).with_name("migrations")
DSN_PARTS = ("DB_USER", "DB_PASSWORD", "DB_HOST", "DB_PORT", "DB_NAME")


def load_conninfo(env: Optional[Mapping[str, str]] = None) -> str:
    """Build a psycopg connection string from the environment.

    ``DATABASE_URL`` wins when set; otherwise ``DB_USER``, ``DB_PASSWORD``,
    ``DB_HOST``, ``DB_PORT`` and ``DB_NAME`` must all be present.

    Raises:
        ConfigurationError: If neither form is fully configured.
    """

    if env is None:
        load_dotenv()
        env = os.environ

    url = env.get("DATABASE_URL")
    if url:
        # psycopg rejects the legacy scheme
        if url.startswith("postgres://"):
            return url.replace("postgres://", "postgresql://", 1)
        return url

    values = {name: env.get(name) for name in DSN_PARTS}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigurationError(f"Missing database settings: {', '.join(missing)}")

    return (
        f"postgresql://{quote_plus(values['DB_USER'])}:{quote_plus(values['DB_PASSWORD'])}"  # type: ignore[arg-type]
        f"@{values['DB_HOST']}:{values['DB_PORT']}/{values['DB_NAME']}"
    )


def discover_migrations(directory: Path) -> Sequence[Path]:
    """Return migration files sorted by filename."""

    return sorted(directory.glob("*.sql"), key=lambda path: path.name)


def _applied_migrations(connection: Connection[Any]) -> set[str]:
    connection.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_id TEXT PRIMARY KEY,
            applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );
        """
    )
    rows = connection.execute("SELECT migration_id FROM schema_migrations;")
    return {row[0] for row in rows}


def apply_pending_migrations(connection: Connection[Any], migrations: Iterable[Path]) -> list[str]:
    """Apply the migrations that have not run yet.

    Returns:
        Filenames of the migrations applied by this call.
    """

    applied = _applied_migrations(connection)
    newly_applied: list[str] = []
    for migration in migrations:
        if migration.name in applied:
            LOGGER.info("Migration %s already applied; skipping.", migration.name)
            continue
        sql = migration.read_text(encoding="utf-8").strip()
        if not sql:
            LOGGER.info("Skipping empty migration %s", migration.name)
            continue
        LOGGER.info("Applying migration %s", migration.name)
        try:
            with connection.transaction():
                connection.execute(sql)  # type: ignore[arg-type]
                connection.execute(
                    "INSERT INTO schema_migrations (migration_id) VALUES (%s) ON CONFLICT DO NOTHING;",
                    (migration.name,),
                )
        except psycopg.Error as exc:
            LOGGER.error("Failed to apply migration %s", migration.name)
            raise RuntimeError(f"Migration {migration.name} failed") from exc
        newly_applied.append(migration.name)
    return newly_applied


def main() -> None:
    """Entry point that loads configuration and applies pending migrations."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    migrations = discover_migrations(MIGRATIONS_DIR)
    if not migrations:
        LOGGER.info("No migrations found under %s", MIGRATIONS_DIR)
        return

    LOGGER.info("Connecting to hotel database.")
    with psycopg.connect(load_conninfo()) as connection:
        applied = apply_pending_migrations(connection, migrations)
        if applied:
            LOGGER.info("Applied migrations: %s", ", ".join(applied))
        else:
            LOGGER.info("Database schema already up to date.")


if __name__ == "__main__":
    main()
