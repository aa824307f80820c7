"""
Pytest configuration and shared fixtures for selectkit tests.
"""

from typing import Any, Dict, List, Optional, Sequence

import pytest

from selectkit.adapters.base import BaseEngine, BindError, PrepareError, PreparedHandle
from selectkit.adapters.sqlite_adapter import SQLiteEngine
from selectkit.database import Database
from selectkit.domain.query.executor import QueryExecutor


class FakeCursor:
    """DB-API style cursor over canned rows."""

    def __init__(self, rows: Sequence[Sequence[Any]], columns: List[str], fail_fetch_at: Optional[int] = None):
        self.rows = list(rows)
        self.columns = columns
        self.fail_fetch_at = fail_fetch_at
        self.position = 0
        self.closed = False

    @property
    def description(self):
        return [(name, None, None, None, None, None, None) for name in self.columns]

    def fetchone(self):
        if self.fail_fetch_at is not None and self.position == self.fail_fetch_at:
            raise RuntimeError("disk I/O error")
        if self.position >= len(self.rows):
            return None
        row = self.rows[self.position]
        self.position += 1
        return tuple(row)

    def close(self):
        self.closed = True


class RecordingEngine(BaseEngine):
    """
    Engine serving canned rows and recording every statement it hands out.

    Failures can be injected at prepare, bind, execute and fetch time.
    """

    ENGINE = "recording"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config or {})
        self.rows: List[Sequence[Any]] = list(self.config.get("rows", []))
        self.columns: List[str] = list(self.config.get("columns", []))
        self.fail_prepare = self.config.get("fail_prepare", False)
        self.fail_bind = self.config.get("fail_bind", False)
        self.fail_execute = self.config.get("fail_execute", False)
        self.fail_fetch_at = self.config.get("fail_fetch_at")
        self.handles: List[PreparedHandle] = []
        self.prepared_sql: List[str] = []
        self.bound: List[tuple] = []

    def connect(self) -> None:
        self._connected = True

    def disconnect(self) -> None:
        self._connected = False

    def health_check(self) -> bool:
        return self._connected

    def prepare(self, sql: str) -> PreparedHandle:
        self.prepared_sql.append(sql)
        if self.fail_prepare:
            raise PrepareError("near \"FORM\": syntax error", engine=self.ENGINE, sql=sql)
        columns = self.columns or [f"col{i}" for i in range(len(self.rows[0]) if self.rows else 1)]
        cursor = FakeCursor(self.rows, columns, self.fail_fetch_at)
        handle = PreparedHandle(sql=sql, engine=self, cursor=cursor)
        self.handles.append(handle)
        return handle

    def bind(self, handle: PreparedHandle, parameters: Sequence[Any]) -> None:
        self.bound.append(tuple(parameters))
        if self.fail_bind:
            raise BindError("Incorrect number of bindings supplied", engine=self.ENGINE, sql=handle.sql)
        super().bind(handle, parameters)

    def _execute(self, handle: PreparedHandle) -> None:
        if self.fail_execute:
            raise PrepareError("no such table: users", engine=self.ENGINE, sql=handle.sql)
        handle.columns = [d[0] for d in handle.cursor.description]

    def open_handles(self) -> List[PreparedHandle]:
        return [h for h in self.handles if not h.closed]


@pytest.fixture
def make_engine():
    """Factory for connected RecordingEngines."""
    def factory(**config) -> RecordingEngine:
        engine = RecordingEngine(config)
        engine.connect()
        return engine
    return factory


@pytest.fixture
def recording_engine(make_engine):
    """RecordingEngine with three user rows."""
    return make_engine(
        rows=[(1, "ada", 36), (2, "grace", 45), (3, "linus", 28)],
        columns=["id", "name", "age"],
    )


USERS_SCRIPT = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    age INTEGER,
    active BOOLEAN NOT NULL,
    score REAL,
    avatar BLOB
);
INSERT INTO users (id, name, age, active, score, avatar) VALUES
    (1, 'ada', 36, 1, 9.5, X'0102'),
    (2, 'grace', 45, 1, 8.0, NULL),
    (3, 'linus', 28, 0, NULL, NULL),
    (4, 'barbara', 17, 1, 7.25, NULL),
    (5, 'ken', 52, 0, 6.0, NULL);

CREATE TABLE orders (
    id INTEGER PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES users(id),
    total REAL NOT NULL
);
INSERT INTO orders (id, user_id, total) VALUES
    (1, 1, 10.0),
    (2, 1, 15.5),
    (3, 2, 7.0),
    (4, 4, 3.0);
"""


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite engine seeded with users and orders."""
    engine = SQLiteEngine({"database": ":memory:"})
    engine.connect()
    engine.execute_script(USERS_SCRIPT)
    yield engine
    engine.disconnect()


@pytest.fixture
def executor(sqlite_engine):
    """QueryExecutor over the seeded SQLite engine."""
    return QueryExecutor(sqlite_engine)


@pytest.fixture
def sqlite_file(tmp_path):
    """Path to a seeded SQLite database file."""
    path = tmp_path / "app.db"
    engine = SQLiteEngine({"database": str(path), "journal_mode": "DELETE"})
    engine.connect()
    engine.execute_script(USERS_SCRIPT)
    engine.disconnect()
    return str(path)


@pytest.fixture
def database(sqlite_file):
    """Database facade over the seeded SQLite file."""
    db = Database.open("sqlite", {"database": sqlite_file})
    yield db
    db.close()
