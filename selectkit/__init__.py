"""
selectkit - SELECT statement helpers for relational databases

Build SELECT statements from structured clauses, run them while streaming
rows through a collector, and count matching rows.

Quick Start:
    from selectkit import Database, QuerySpec, CountSpec
    from selectkit.domain.query.collectors import as_dict

    with Database.open("sqlite", {"database": "app.db"}) as db:
        outcome = db.select_from(
            QuerySpec(source="users", where="age > ?", limit=10, parameters=[18]),
            as_dict,
        )
        if outcome.ok:
            print(outcome.value)
        else:
            print(f"Query failed: {outcome.error}")
"""

from selectkit.adapters.base import (
    BaseEngine,
    BindError,
    ConnectionError,
    EngineError,
    PrepareError,
    PreparedHandle,
    ReadError,
)
from selectkit.adapters.factory import get_engine, register_engine, list_engines
from selectkit.database import Database
from selectkit.domain.query import collectors
from selectkit.domain.query.builder import StatementBuilder, count_query
from selectkit.domain.query.executor import QueryExecutor, QueryOutcome, Row
from selectkit.shared.types.models import BuiltStatement, CountSpec, QuerySpec

__version__ = "1.0.0"

__all__ = [
    # Facade
    "Database",
    # Query model
    "QuerySpec",
    "CountSpec",
    "BuiltStatement",
    "StatementBuilder",
    "count_query",
    # Execution
    "QueryExecutor",
    "QueryOutcome",
    "Row",
    "collectors",
    # Engines
    "BaseEngine",
    "PreparedHandle",
    "get_engine",
    "register_engine",
    "list_engines",
    # Errors
    "EngineError",
    "ConnectionError",
    "PrepareError",
    "BindError",
    "ReadError",
]
