"""
Query Domain

Statement building, execution and row collection.
"""

from selectkit.domain.query.builder import StatementBuilder, count_query
from selectkit.domain.query.executor import QueryExecutor, QueryOutcome, Row
from selectkit.domain.query import collectors

__all__ = [
    "StatementBuilder",
    "count_query",
    "QueryExecutor",
    "QueryOutcome",
    "Row",
    "collectors",
]
