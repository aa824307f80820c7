"""
Database Engines for selectkit

This package provides a unified statement interface over different databases.
Each engine handles:
- Connection management
- Statement preparation and parameter binding
- Row iteration and typed column reads
- Statement cleanup

Supported Engines:
- SQLite (built-in, zero dependencies)
- DuckDB (optional extra)
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
from selectkit.adapters.factory import (
    get_engine,
    register_engine,
    list_engines,
    is_engine_supported,
    close_engine,
    close_all_engines,
)

__all__ = [
    "BaseEngine",
    "BindError",
    "ConnectionError",
    "EngineError",
    "PrepareError",
    "PreparedHandle",
    "ReadError",
    "get_engine",
    "register_engine",
    "list_engines",
    "is_engine_supported",
    "close_engine",
    "close_all_engines",
]
