"""
DuckDB Engine for selectkit

DuckDB is an embedded analytical database, perfect for:
- Local analytics over files
- Testing without infrastructure
- Small to medium datasets (up to ~100GB)

Connection modes:
- In-memory (default): Fast, ephemeral
- File-based: Persistent, shareable

Requirements:
    pip install selectkit[duckdb]
"""

import logging
from typing import Any, Dict, Optional

try:
    import duckdb
    DUCKDB_AVAILABLE = True
except ImportError:
    DUCKDB_AVAILABLE = False
    duckdb = None

from selectkit.adapters.base import (
    BaseEngine,
    BindError,
    ConnectionError,
    PrepareError,
    PreparedHandle,
)

logger = logging.getLogger(__name__)


class DuckDBEngine(BaseEngine):
    """
    Engine for DuckDB embedded database.

    Config options:
        database: Path to database file, or ":memory:" (default)
        read_only: Open in read-only mode (default: False)

    Example:
        engine = DuckDBEngine({"database": ":memory:"})
        engine.connect()
        handle = engine.prepare("SELECT 1 + 1 AS answer")
    """

    ENGINE = "duckdb"
    PLACEHOLDER = "?"  # DuckDB uses ? natively

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize DuckDB engine."""
        super().__init__(config or {})

        if not DUCKDB_AVAILABLE:
            raise ConnectionError(
                "DuckDB not installed. Run: pip install selectkit[duckdb]",
                engine=self.ENGINE
            )

        self.database = self.config.get("database", ":memory:")
        self.read_only = self.config.get("read_only", False)

    def connect(self) -> None:
        """Connect to DuckDB database."""
        try:
            self._connection = duckdb.connect(
                database=self.database,
                read_only=self.read_only
            )
            self._connected = True
            logger.info(f"DuckDB connected: {self.database}")
        except Exception as e:
            raise ConnectionError(
                f"Failed to connect to DuckDB: {e}",
                engine=self.ENGINE,
                original_error=e
            )

    def disconnect(self) -> None:
        """Close DuckDB connection."""
        if self._connection:
            try:
                self._connection.close()
            except Exception as e:
                logger.warning(f"Error closing DuckDB connection: {e}")
            finally:
                self._connection = None
                self._connected = False

    def health_check(self) -> bool:
        """Check DuckDB connection health."""
        if not self._connected or not self._connection:
            return False

        try:
            self._connection.execute("SELECT 1").fetchone()
            return True
        except duckdb.Error:
            return False

    def prepare(self, sql: str) -> PreparedHandle:
        """
        Prepare a statement on a child cursor.

        DuckDB parses and binds on execute, which activate() does once
        parameters are bound.
        """
        if not self._connected or not self._connection:
            raise PrepareError("Not connected to DuckDB", engine=self.ENGINE, sql=sql)

        try:
            cursor = self._connection.cursor()
        except duckdb.Error as e:
            raise PrepareError(
                f"DuckDB cursor allocation failed: {e}",
                engine=self.ENGINE,
                original_error=e,
                sql=sql
            )
        return PreparedHandle(sql=sql, engine=self, cursor=cursor)

    def _execute(self, handle: PreparedHandle) -> None:
        """Execute a prepared statement on DuckDB."""
        try:
            handle.cursor.execute(handle.sql, list(handle.parameters))
        except duckdb.InvalidInputException as e:
            # Raised for a parameter count that does not match the placeholders
            raise BindError(
                f"DuckDB parameter binding failed: {e}",
                engine=self.ENGINE,
                original_error=e,
                sql=handle.sql
            )
        except duckdb.Error as e:
            raise PrepareError(
                f"DuckDB statement failed: {e}",
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
        if not self._connected or not self._connection:
            raise PrepareError("Not connected to DuckDB", engine=self.ENGINE)

        try:
            self._connection.execute(script)
        except duckdb.Error as e:
            raise PrepareError(
                f"DuckDB script execution failed: {e}",
                engine=self.ENGINE,
                original_error=e
            )
