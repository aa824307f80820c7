"""
Engine Factory for selectkit

Provides a unified interface for getting database engines.
Handles engine registration, caching, and lifecycle management.

Usage:
    from selectkit.adapters import get_engine

    engine = get_engine("sqlite", {"database": "app.db"})
"""

import hashlib
import json
import logging
from typing import Any, Dict, List, Optional, Type

from selectkit.adapters.base import BaseEngine, ConnectionError

logger = logging.getLogger(__name__)


# =============================================================================
# ENGINE REGISTRY
# =============================================================================

# Map of engine name -> engine class
_ENGINE_REGISTRY: Dict[str, Type[BaseEngine]] = {}

# Cache of connected engine instances (keyed by cache key or config hash)
_ENGINE_CACHE: Dict[str, BaseEngine] = {}


def register_engine(name: str, engine_class: Type[BaseEngine]) -> None:
    """
    Register an engine class under a name.

    Args:
        name: Engine identifier (e.g., "sqlite", "duckdb")
        engine_class: Engine class to use for this name
    """
    _ENGINE_REGISTRY[name.lower()] = engine_class
    logger.debug(f"Registered engine: {name}")


def list_engines() -> List[str]:
    """Get list of registered engine names."""
    return list(_ENGINE_REGISTRY.keys())


def is_engine_supported(name: str) -> bool:
    """Check if an engine name is registered."""
    return name.lower() in _ENGINE_REGISTRY


# =============================================================================
# ENGINE FACTORY
# =============================================================================

def get_engine(
    name: str,
    config: Dict[str, Any],
    cache_key: Optional[str] = None,
    use_cache: bool = True
) -> BaseEngine:
    """
    Get a connected engine instance.

    Args:
        name: Engine name (e.g., "sqlite", "duckdb")
        config: Connection configuration dict
        cache_key: Optional key for caching (defaults to a config hash)
        use_cache: Whether to reuse a cached engine (default: True)

    Returns:
        Connected engine instance

    Raises:
        ConnectionError: If engine not supported or connection fails
    """
    name_lower = name.lower()

    if name_lower not in _ENGINE_REGISTRY:
        available = ", ".join(list_engines())
        raise ConnectionError(
            f"Unsupported engine: {name}. Available: {available}",
            engine=name
        )

    key = cache_key or _generate_config_hash(name_lower, config)

    if use_cache and key in _ENGINE_CACHE:
        engine = _ENGINE_CACHE[key]
        if engine.health_check():
            logger.debug(f"Using cached engine for {name} ({key})")
            return engine
        # Cached engine unhealthy - drop it and reconnect
        logger.warning(f"Cached engine unhealthy, reconnecting: {key}")
        engine.disconnect()
        del _ENGINE_CACHE[key]

    engine_class = _ENGINE_REGISTRY[name_lower]
    engine = engine_class(config)
    engine.connect()

    if use_cache:
        _ENGINE_CACHE[key] = engine

    return engine


def close_engine(key: str) -> bool:
    """
    Close and remove a cached engine.

    Args:
        key: Cache key or config hash

    Returns:
        True if engine was found and closed
    """
    if key in _ENGINE_CACHE:
        engine = _ENGINE_CACHE.pop(key)
        engine.disconnect()
        return True
    return False


def close_all_engines() -> int:
    """
    Close all cached engines.

    Returns:
        Number of engines closed
    """
    count = 0
    for key in list(_ENGINE_CACHE.keys()):
        if close_engine(key):
            count += 1
    return count


def _generate_config_hash(name: str, config: Dict[str, Any]) -> str:
    """Generate a hash for engine config (for caching)."""
    # Exclude password so it never ends up in a log line via the key
    safe_config = {k: v for k, v in config.items() if k != "password"}
    config_str = f"{name}:{json.dumps(safe_config, sort_keys=True, default=str)}"

    return hashlib.md5(config_str.encode()).hexdigest()[:12]


# =============================================================================
# AUTO-REGISTER BUILT-IN ENGINES
# =============================================================================

def _register_builtin_engines():
    """Register all built-in engines."""

    # SQLite (built-in, no dependencies)
    from selectkit.adapters.sqlite_adapter import SQLiteEngine
    register_engine("sqlite", SQLiteEngine)
    register_engine("sqlite3", SQLiteEngine)  # Alias

    # DuckDB
    from selectkit.adapters.duckdb_adapter import DuckDBEngine, DUCKDB_AVAILABLE
    if DUCKDB_AVAILABLE:
        register_engine("duckdb", DuckDBEngine)
    else:
        logger.debug("DuckDB engine not available: duckdb is not installed")


_register_builtin_engines()
