"""
Stock collectors for QueryExecutor.select_from().

A collector is any callable taking a Row and returning the value to keep
for that row.
"""

from typing import Any, Callable, Dict, Optional, Tuple

from selectkit.domain.query.executor import Row


def as_tuple(row: Row) -> Tuple[Any, ...]:
    """Every column of the row, as a tuple."""
    return tuple(row.value(i) for i in range(row.column_count))


def as_dict(row: Row) -> Dict[str, Any]:
    """Every column of the row, keyed by column name."""
    return {name: row.value(i) for i, name in enumerate(row.column_names)}


def scalar(index: int = 0, expected_type: Optional[type] = None) -> Callable[[Row], Any]:
    """Collector that keeps a single column."""
    def collect(row: Row) -> Any:
        return row.value(index, expected_type)
    return collect


def columns(*indexes: int) -> Callable[[Row], Tuple[Any, ...]]:
    """Collector that keeps the given columns, in the given order."""
    def collect(row: Row) -> Tuple[Any, ...]:
        return tuple(row.value(i) for i in indexes)
    return collect
