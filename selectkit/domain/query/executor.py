"""
Query Executor

Runs SELECT statements built from QuerySpec / CountSpec against an engine.

Every call follows the same lifecycle: build, prepare, bind (only when there
are parameters), iterate, close. The prepared statement is closed on every
exit path. Engine failures do not propagate: they come back as a failed
QueryOutcome carrying the error.

Usage:
    executor = QueryExecutor(engine)

    outcome = executor.select_from(
        QuerySpec(source="users", columns=["id", "name"], where="age > ?", parameters=[18]),
        lambda row: (row.int64(0), row.text(1)),
    )
    if outcome.ok:
        users = outcome.value

    active = executor.count_from(CountSpec(source="users", where="active = ?", parameters=[True]))
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, List, Optional, TypeVar

from selectkit.adapters.base import (
    BaseEngine,
    EngineError,
    PreparedHandle,
    ReadError,
    check_int64,
)
from selectkit.core.config import settings
from selectkit.domain.query.builder import StatementBuilder
from selectkit.shared.types.models import BuiltStatement, CountSpec, QuerySpec

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class QueryOutcome(Generic[T]):
    """
    Result of an executor call: a value, or the engine error that stopped it.

    Attributes:
        value: Result on success (None on failure)
        error: Engine error on failure (None on success)
        sql: Statement text that was run
    """
    value: Optional[T] = None
    error: Optional[EngineError] = None
    sql: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value


class Row:
    """
    Accessor for the current row of a running statement.

    Only valid inside the collector call it was passed to; reading from it
    afterwards raises ReadError.
    """

    __slots__ = ("_engine", "_handle", "_position", "_active")

    def __init__(self, engine: BaseEngine, handle: PreparedHandle, position: int):
        self._engine = engine
        self._handle = handle
        self._position = position
        self._active = True

    @property
    def position(self) -> int:
        """Zero-based position of this row in the result set."""
        return self._position

    @property
    def column_count(self) -> int:
        self._check()
        return len(self._handle.row)

    @property
    def column_names(self) -> List[str]:
        self._check()
        return list(self._handle.columns)

    def value(self, index: int, expected_type: Optional[type] = None) -> Any:
        """Read column `index`, optionally coerced to `expected_type`."""
        self._check()
        return self._engine.read_column(self._handle, index, expected_type)

    def __getitem__(self, index: int) -> Any:
        return self.value(index)

    def int64(self, index: int) -> Optional[int]:
        return check_int64(self.value(index, int), engine=self._engine.ENGINE, index=index)

    def real(self, index: int) -> Optional[float]:
        return self.value(index, float)

    def text(self, index: int) -> Optional[str]:
        return self.value(index, str)

    def blob(self, index: int) -> Optional[bytes]:
        return self.value(index, bytes)

    def boolean(self, index: int) -> Optional[bool]:
        return self.value(index, bool)

    def is_null(self, index: int) -> bool:
        return self.value(index) is None

    def _release(self) -> None:
        self._active = False

    def _check(self) -> None:
        if not self._active:
            raise ReadError(
                "Row accessor used outside of its collector call",
                engine=self._engine.ENGINE,
                sql=self._handle.sql
            )


Collector = Callable[[Row], T]


class QueryExecutor:
    """
    Prepares, runs and reads SELECT statements on one engine.

    Args:
        engine: Connected engine
        builder: Statement builder (default: StatementBuilder())
        log_sql: Log statement text at DEBUG (default: settings.log_sql)
    """

    def __init__(
        self,
        engine: BaseEngine,
        builder: Optional[StatementBuilder] = None,
        log_sql: Optional[bool] = None,
    ):
        self.engine = engine
        self.builder = builder or StatementBuilder()
        self.log_sql = settings.log_sql if log_sql is None else log_sql

    def prepare_select_from(self, spec: QuerySpec) -> QueryOutcome[PreparedHandle]:
        """
        Build and prepare a SELECT, binding its parameters.

        On success the caller owns the returned handle and must close it
        (it is a context manager). On failure no handle is left open.
        """
        statement = self.builder.build(spec)
        try:
            handle = self._prepare(statement)
        except EngineError as e:
            return self._failed(e, statement)
        return QueryOutcome(value=handle, sql=statement.sql)

    def select_from(self, spec: QuerySpec, collector: Collector) -> QueryOutcome[List[T]]:
        """
        Run a SELECT and collect one value per row.

        Args:
            spec: Query description
            collector: Called once per row, in result order, with a Row

        Returns:
            QueryOutcome with the collected values in row order
        """
        statement = self.builder.build(spec)
        try:
            with self._statement(statement) as handle:
                values = self._collect(handle, collector)
        except EngineError as e:
            return self._failed(e, statement)
        return QueryOutcome(value=values, sql=statement.sql)

    def count_from(self, spec: CountSpec) -> QueryOutcome[int]:
        """
        Run `SELECT count(...)` and return the count.

        No row at all counts as zero; only engine failures fail the outcome.
        """
        statement = self.builder.build_count(spec)
        try:
            with self._statement(statement) as handle:
                count = 0
                if self.engine.next(handle):
                    value = self.engine.read_column(handle, 0, int)
                    count = check_int64(value, engine=self.engine.ENGINE) or 0
        except EngineError as e:
            return self._failed(e, statement)
        return QueryOutcome(value=count, sql=statement.sql)

    # -------------------------------------------------------------------------
    # Statement lifecycle
    # -------------------------------------------------------------------------

    def _prepare(self, statement: BuiltStatement) -> PreparedHandle:
        if self.log_sql:
            logger.debug(f"Preparing: {statement.sql} params={list(statement.parameters)!r}")

        handle = self.engine.prepare(statement.sql)
        try:
            if statement.parameters:
                self.engine.bind(handle, statement.parameters)
            self.engine.activate(handle)
        except Exception:
            self.engine.close(handle)
            raise
        return handle

    @contextmanager
    def _statement(self, statement: BuiltStatement) -> Iterator[PreparedHandle]:
        """Prepared statement that is closed on scope exit, whatever the cause."""
        handle = self._prepare(statement)
        try:
            yield handle
        finally:
            self.engine.close(handle)

    def _collect(self, handle: PreparedHandle, collector: Collector) -> List[T]:
        values: List[T] = []
        while self.engine.next(handle):
            row = Row(self.engine, handle, len(values))
            try:
                values.append(collector(row))
            finally:
                row._release()
        return values

    def _failed(self, error: EngineError, statement: BuiltStatement) -> QueryOutcome:
        if error.sql is None:
            error.sql = statement.sql
        logger.warning(f"{type(error).__name__} on {self.engine.ENGINE}: {error}")
        return QueryOutcome(error=error, sql=statement.sql)
