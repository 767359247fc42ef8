"""SQLite-backed variable store."""

import sqlite3
from datetime import UTC, datetime
from pathlib import Path

import structlog

from loadconfig.loader.constants import COMPONENT_STORE
from loadconfig.loader.errors import VariableNotFoundError, VariableWriteError


logger = structlog.get_logger()

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS variables (
    name TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class StoreNotConnectedError(RuntimeError):
    """Raised when the store is used before connect()."""

    def __init__(self, message: str = "Variable store not connected") -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)


class SqliteVariableStore:
    """Persistent variable store in a single SQLite table.

    Uses WAL mode and commits every write so a failed load leaves the
    variables written before the failure in place.
    """

    def __init__(self, db_path: Path | str, *, strict: bool = False) -> None:
        """Initialize the store.

        Args:
            db_path: Path to SQLite database file.
            strict: Reject writes to variables that were never declared.
        """
        self._db_path = Path(db_path) if isinstance(db_path, str) else db_path
        self._strict = strict
        self._conn: sqlite3.Connection | None = None
        self._log = logger.bind(component=COMPONENT_STORE, db_path=str(self._db_path))

    @property
    def db_path(self) -> Path:
        """Get the database path."""
        return self._db_path

    @property
    def is_connected(self) -> bool:
        """Check if connected to database."""
        return self._conn is not None

    def connect(self) -> None:
        """Open the database and create the schema if needed.

        Creates the database file and parent directories if they don't exist.
        """
        if self._conn is not None:
            return

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=NORMAL")
        self._conn.executescript(SCHEMA_SQL)
        self._log.info("variable_store_connected")

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._log.info("variable_store_closed")

    def __enter__(self) -> "SqliteVariableStore":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()

    def _ensure_connected(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreNotConnectedError("Variable store not connected. Call connect() first.")
        return self._conn

    def get_variable(self, name: str) -> str | None:
        """Look up a variable value."""
        conn = self._ensure_connected()
        row = conn.execute(
            "SELECT value FROM variables WHERE name = ?", (name,)
        ).fetchone()
        return None if row is None else str(row[0])

    def declare(self, name: str, value: str) -> None:
        """Create or overwrite a variable regardless of strict mode.

        Args:
            name: Variable name.
            value: Initial value.
        """
        self._write(name, value)

    def set_variable(self, name: str, value: str) -> None:
        """Write a variable value.

        Raises:
            VariableNotFoundError: If strict and the name is not declared.
            VariableWriteError: If SQLite rejects the write.
        """
        if self._strict and self.get_variable(name) is None:
            raise VariableNotFoundError(name)
        self._write(name, value)

    def _write(self, name: str, value: str) -> None:
        conn = self._ensure_connected()
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO variables (name, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(name) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (name, value, datetime.now(UTC).isoformat()),
                )
        except sqlite3.Error as e:
            self._log.error("variable_write_failed", name=name, error=str(e))
            raise VariableWriteError(name, str(e)) from e

    def items(self) -> list[tuple[str, str]]:
        """Get all variables sorted by name."""
        conn = self._ensure_connected()
        rows = conn.execute("SELECT name, value FROM variables ORDER BY name").fetchall()
        return [(str(name), str(value)) for name, value in rows]
