"""
Base Engine Interface for selectkit

All database engines must implement this interface so the query executor
can drive any of them through the same statement lifecycle:

    prepare -> bind -> next / read_column ... -> close

DESIGN PRINCIPLES:
-----------------
1. Statement parameters use ? placeholders (engines convert as needed)
2. A PreparedHandle belongs to the engine that created it
3. close() on a handle is idempotent and never raises
4. Driver errors are wrapped in EngineError subclasses, keeping the original
5. Engines are configured with a plain dict on init
"""

import logging
import numbers
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
from datetime import datetime, timezone
from decimal import Decimal

logger = logging.getLogger(__name__)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class EngineError(Exception):
    """Base exception for engine errors."""

    def __init__(
        self,
        message: str,
        engine: str,
        original_error: Optional[Exception] = None,
        sql: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.engine = engine
        self.original_error = original_error
        self.sql = sql


class ConnectionError(EngineError):
    """Failed to connect to database, or no engine for the requested name."""
    pass


class PrepareError(EngineError):
    """Statement text could not be compiled."""
    pass


class BindError(EngineError):
    """Parameters do not match the prepared statement."""
    pass


class ReadError(EngineError):
    """A row or a column value could not be read."""
    pass


@dataclass(eq=False)
class PreparedHandle:
    """
    Engine-owned compiled statement.

    For DB-API drivers this wraps a cursor. Binding is recorded on the
    handle and applied when the statement first executes, which is how
    DB-API drivers bind.

    Attributes:
        sql: Statement text
        engine: Engine that created the handle
        cursor: Driver cursor (engine specific)
        parameters: Bound parameter values
        columns: Result column names, known once executed
        row: Current row, set by engine.next()
        executed: Whether the statement has been executed
        closed: Terminal state; no further use is allowed
    """
    sql: str
    engine: "BaseEngine" = field(repr=False)
    cursor: Any = field(default=None, repr=False)
    parameters: Tuple[Any, ...] = ()
    columns: List[str] = field(default_factory=list)
    row: Optional[Sequence[Any]] = field(default=None, repr=False)
    executed: bool = False
    closed: bool = False

    def close(self) -> None:
        """Release the statement. Safe to call more than once."""
        self.engine.close(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class BaseEngine(ABC):
    """
    Abstract base class for database engines.

    Each engine must implement:
    - connect(): Establish database connection
    - disconnect(): Close connection
    - health_check(): Verify connection is alive
    - prepare(): Create a PreparedHandle for a statement
    - _execute(): Run a prepared, bound statement on its cursor

    bind(), activate(), next(), read_column() and close() work on any DB-API cursor and
    can be overridden for drivers that differ.

    Usage:
        engine = SQLiteEngine({"database": ":memory:"})
        engine.connect()

        handle = engine.prepare("SELECT name FROM users WHERE id = ?")
        try:
            engine.bind(handle, [1])
            engine.activate(handle)
            while engine.next(handle):
                name = engine.read_column(handle, 0, str)
        finally:
            engine.close(handle)

        engine.disconnect()
    """

    # Engine identifier (e.g., "sqlite", "duckdb")
    ENGINE: str = "base"

    # Placeholder format used by this engine
    PLACEHOLDER: str = "?"

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize engine with connection configuration.

        Args:
            config: Engine-specific configuration dict
                    (database path, read_only, timeout, etc.)
        """
        self.config = config
        self._connection = None
        self._connected = False
        self._last_used = None

    @abstractmethod
    def connect(self) -> None:
        """
        Establish connection to database.

        Raises:
            ConnectionError: If connection fails
        """
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """
        Close database connection.

        Should be safe to call even if not connected.
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """
        Check if connection is alive and usable.

        Returns:
            True if connection is healthy, False otherwise
        """
        pass

    @abstractmethod
    def prepare(self, sql: str) -> PreparedHandle:
        """
        Prepare a statement.

        Args:
            sql: SQL text with ? placeholders

        Returns:
            A new, open PreparedHandle

        Raises:
            PrepareError: If the statement cannot be prepared
        """
        pass

    @abstractmethod
    def _execute(self, handle: PreparedHandle) -> None:
        """
        Execute a prepared statement with its bound parameters.

        Must set handle.columns.

        Raises:
            PrepareError: If the driver rejects the statement text
            BindError: If the driver rejects the parameters
        """
        pass

    def bind(self, handle: PreparedHandle, parameters: Sequence[Any]) -> None:
        """
        Bind positional parameters to a prepared statement.

        None binds SQL NULL.

        Raises:
            BindError: If the handle is closed or already executed
        """
        if handle.closed:
            raise BindError("Cannot bind a closed statement", engine=self.ENGINE, sql=handle.sql)
        if handle.executed:
            raise BindError("Cannot bind an executed statement", engine=self.ENGINE, sql=handle.sql)
        handle.parameters = tuple(parameters)

    def activate(self, handle: PreparedHandle) -> None:
        """
        Execute a prepared statement with its bound parameters.

        DB-API drivers compile and bind on execute, so this is where bad
        statement text or mismatched parameters are reported. A no-op once
        the statement has run.

        Raises:
            PrepareError: If the statement text is rejected or the handle is closed
            BindError: If the parameters are rejected
        """
        if handle.closed:
            raise PrepareError("Cannot execute a closed statement", engine=self.ENGINE, sql=handle.sql)
        if handle.executed:
            return
        self._update_last_used()
        self._execute(handle)
        handle.executed = True

    def next(self, handle: PreparedHandle) -> bool:
        """
        Advance to the next row.

        Executes the statement first if activate() has not run yet.

        Returns:
            True if a row is available, False when the result is exhausted

        Raises:
            ReadError: If the row cannot be fetched
            PrepareError, BindError: If the statement has not run and fails to
        """
        if handle.closed:
            raise ReadError("Cannot read from a closed statement", engine=self.ENGINE, sql=handle.sql)

        self.activate(handle)

        try:
            handle.row = handle.cursor.fetchone()
        except Exception as e:
            handle.row = None
            raise ReadError(
                f"{self.ENGINE} row fetch failed: {e}",
                engine=self.ENGINE,
                original_error=e,
                sql=handle.sql
            )
        return handle.row is not None

    def read_column(self, handle: PreparedHandle, index: int, expected_type: Optional[type] = None) -> Any:
        """
        Read a column of the current row.

        Args:
            handle: Statement positioned on a row by next()
            index: Zero-based column index
            expected_type: int, float, str, bytes, bool, or None for the raw value

        Returns:
            The column value (None for SQL NULL)

        Raises:
            ReadError: No current row, index out of range, or type mismatch
        """
        if handle.closed or handle.row is None:
            raise ReadError("No current row", engine=self.ENGINE, sql=handle.sql)
        if index < 0 or index >= len(handle.row):
            raise ReadError(
                f"Column index {index} out of range (row has {len(handle.row)} columns)",
                engine=self.ENGINE,
                sql=handle.sql
            )
        return coerce_value(handle.row[index], expected_type, engine=self.ENGINE, index=index)

    def close(self, handle: PreparedHandle) -> None:
        """
        Close a prepared statement.

        Idempotent; errors from the driver are logged, never raised.
        """
        if handle.closed:
            return
        try:
            if handle.cursor is not None:
                handle.cursor.close()
        except Exception as e:
            logger.warning(f"Error closing {self.ENGINE} statement: {e}")
        finally:
            handle.cursor = None
            handle.row = None
            handle.closed = True

    def is_connected(self) -> bool:
        """Check if engine has an active connection."""
        return self._connected

    def get_engine_info(self) -> Dict[str, Any]:
        """Get information about this engine."""
        return {
            "engine": self.ENGINE,
            "connected": self._connected,
            "placeholder": self.PLACEHOLDER,
            "last_used": self._last_used.isoformat() if self._last_used else None
        }

    def _update_last_used(self):
        """Update last used timestamp."""
        self._last_used = datetime.now(timezone.utc)

    def __enter__(self):
        """Context manager support."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager cleanup."""
        self.disconnect()
        return False


def coerce_value(value: Any, expected_type: Optional[type], engine: str = "base", index: int = 0) -> Any:
    """
    Convert a driver value to the requested Python type.

    NULL stays None for every type. Integers widen to float and narrow to
    bool; anything else that does not match raises ReadError.
    """
    if value is None or expected_type is None:
        return value

    if expected_type is int:
        if isinstance(value, numbers.Integral):
            return int(value)
    elif expected_type is float:
        if isinstance(value, (numbers.Real, Decimal)) and not isinstance(value, bool):
            return float(value)
    elif expected_type is str:
        if isinstance(value, str):
            return value
    elif expected_type is bytes:
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
    elif expected_type is bool:
        if isinstance(value, numbers.Integral):
            return bool(value)
    else:
        raise ReadError(f"Unsupported column type requested: {expected_type!r}", engine=engine)

    raise ReadError(
        f"Column {index} holds {type(value).__name__}, expected {expected_type.__name__}",
        engine=engine
    )


def check_int64(value: Optional[int], engine: str = "base", index: int = 0) -> Optional[int]:
    """Verify that an integer fits in a signed 64-bit slot."""
    if value is not None and not (INT64_MIN <= value <= INT64_MAX):
        raise ReadError(f"Column {index} value {value} does not fit in 64 bits", engine=engine)
    return value
