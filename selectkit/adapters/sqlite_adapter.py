"""
SQLite Engine for selectkit

SQLite is ideal for:
- Local development and testing
- Single-file embedded databases
- Desktop and command-line tools

Features:
- Zero configuration (built into Python)
- In-memory databases
- Read-only mode for safety
- WAL mode for concurrent reads

Requirements:
    None - sqlite3 is included in Python standard library
"""

import os
import logging
import sqlite3
from typing import Any, Dict, List
from pathlib import Path

from selectkit.adapters.base import (
    BaseEngine,
    BindError,
    ConnectionError,
    PrepareError,
    PreparedHandle,
    ReadError,
)

logger = logging.getLogger(__name__)


class SQLiteEngine(BaseEngine):
    """
    Engine for SQLite databases.

    Supports file-based and in-memory SQLite databases.

    Config options:
        database: Path to SQLite file or ':memory:' (required)
        read_only: Open in read-only mode (default: False)
        create: Allow opening a file that does not exist yet (default: True)
        timeout: Connection timeout in seconds (default: 30)
        isolation_level: Transaction isolation (default: None for autocommit)
        check_same_thread: Restrict the connection to its thread (default: False)
        journal_mode: WAL, DELETE, TRUNCATE, etc. (default: WAL for writable files)
        foreign_keys: Enable foreign key constraints (default: True)

    Example (In-Memory):
        engine = SQLiteEngine({
            "database": ":memory:"
        })

    Example (Read-Only File):
        engine = SQLiteEngine({
            "database": "/path/to/data.db",
            "read_only": True
        })
    """

    ENGINE = "sqlite"
    PLACEHOLDER = "?"  # SQLite uses ? for parameters

    def __init__(self, config: Dict[str, Any]):
        """Initialize SQLite engine."""
        super().__init__(config)

        if "database" not in config:
            raise ConnectionError(
                "Missing required config: database",
                engine=self.ENGINE
            )

        self.database = config["database"]
        self.is_memory = self.database == ":memory:"
        self.read_only = config.get("read_only", False)

        if not self.is_memory and not config.get("create", True):
            if not os.path.exists(self.database):
                raise ConnectionError(
                    f"Database file not found: {self.database}",
                    engine=self.ENGINE
                )

        # Connection options
        self.timeout = config.get("timeout", 30.0)
        self.isolation_level = config.get("isolation_level", None)
        self.check_same_thread = config.get("check_same_thread", False)

        default_journal = "WAL" if not (self.is_memory or self.read_only) else None
        self.journal_mode = config.get("journal_mode", default_journal)
        self.foreign_keys = config.get("foreign_keys", True)

    def _get_uri(self) -> str:
        """Build SQLite URI for a read-only connection."""
        path = Path(self.database).absolute()
        return f"file:{path}?mode=ro"

    def connect(self) -> None:
        """Connect to SQLite database."""
        try:
            if self.read_only and not self.is_memory:
                self._connection = sqlite3.connect(
                    self._get_uri(),
                    uri=True,
                    timeout=self.timeout,
                    isolation_level=self.isolation_level,
                    check_same_thread=self.check_same_thread,
                )
            else:
                self._connection = sqlite3.connect(
                    self.database,
                    timeout=self.timeout,
                    isolation_level=self.isolation_level,
                    check_same_thread=self.check_same_thread,
                )

            cursor = self._connection.cursor()
            if self.journal_mode and not self.is_memory:
                cursor.execute(f"PRAGMA journal_mode = {self.journal_mode}")
            if self.foreign_keys:
                cursor.execute("PRAGMA foreign_keys = ON")
            cursor.close()

            self._connected = True
            logger.info(f"SQLite connected: {self.database}")

        except Exception as e:
            raise ConnectionError(
                f"Failed to connect to SQLite: {e}",
                engine=self.ENGINE,
                original_error=e
            )

    def disconnect(self) -> None:
        """Close SQLite connection."""
        try:
            if self._connection:
                self._connection.close()
                self._connection = None
        except Exception as e:
            logger.warning(f"Error closing SQLite connection: {e}")
        finally:
            self._connected = False

    def health_check(self) -> bool:
        """Check SQLite connection health."""
        if not self._connected:
            return False

        cursor = None
        try:
            cursor = self._connection.cursor()
            cursor.execute("SELECT 1")
            cursor.fetchone()
            return True
        except sqlite3.Error:
            return False
        finally:
            if cursor:
                try:
                    cursor.close()
                except sqlite3.Error as e:
                    logger.warning(f"Error closing SQLite health-check cursor: {e}")

    def prepare(self, sql: str) -> PreparedHandle:
        """
        Prepare a statement on a fresh cursor.

        sqlite3 compiles the text when it executes, which activate() does
        once parameters are bound.
        """
        if not self._connected:
            raise PrepareError(
                "Not connected to SQLite",
                engine=self.ENGINE,
                sql=sql
            )
        try:
            cursor = self._connection.cursor()
        except sqlite3.Error as e:
            raise PrepareError(
                f"SQLite cursor allocation failed: {e}",
                engine=self.ENGINE,
                original_error=e,
                sql=sql
            )
        return PreparedHandle(sql=sql, engine=self, cursor=cursor)

    def _execute(self, handle: PreparedHandle) -> None:
        """
        Execute a prepared statement on SQLite.

        The statement is first run under EXPLAIN, which compiles and binds
        without evaluating anything. Errors there are prepare or bind errors;
        errors from the real execution come from computing the first row.
        """
        try:
            handle.cursor.execute(f"EXPLAIN {handle.sql}", handle.parameters)
        except (sqlite3.ProgrammingError, sqlite3.InterfaceError) as e:
            if not _is_binding_error(e):
                raise PrepareError(
                    f"SQLite statement rejected: {e}",
                    engine=self.ENGINE,
                    original_error=e,
                    sql=handle.sql
                )
            raise BindError(
                f"SQLite parameter binding failed: {e}",
                engine=self.ENGINE,
                original_error=e,
                sql=handle.sql
            )
        except sqlite3.Error as e:
            raise PrepareError(
                f"SQLite statement failed: {e}",
                engine=self.ENGINE,
                original_error=e,
                sql=handle.sql
            )

        try:
            handle.cursor.execute(handle.sql, handle.parameters)
        except sqlite3.Error as e:
            raise ReadError(
                f"SQLite row evaluation failed: {e}",
                engine=self.ENGINE,
                original_error=e,
                sql=handle.sql
            )
        description = handle.cursor.description or ()
        handle.columns = [desc[0] for desc in description]

    def execute_script(self, script: str) -> None:
        """
        Execute multiple SQL statements (for setup/seeding).

        Useful for creating tables and inserting demo data.
        """
        if not self._connected:
            raise PrepareError("Not connected to SQLite", engine=self.ENGINE)

        try:
            self._connection.executescript(script)
        except sqlite3.Error as e:
            raise PrepareError(
                f"SQLite script execution failed: {e}",
                engine=self.ENGINE,
                original_error=e
            )

    def get_tables(self) -> List[str]:
        """Get list of tables in the database."""
        if not self._connected:
            return []

        cursor = self._connection.cursor()
        try:
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
            )
            return [row[0] for row in cursor.fetchall()]
        finally:
            cursor.close()


def _is_binding_error(error: sqlite3.Error) -> bool:
    """Wrong parameter count, or a value sqlite3 cannot adapt."""
    if isinstance(error, sqlite3.InterfaceError):
        return True
    return "binding" in str(error).lower()
