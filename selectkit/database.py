"""
Database facade

Bundles a connected engine with a QueryExecutor so callers can write:

    with Database.open("sqlite", {"database": "app.db"}) as db:
        names = db.select_from(QuerySpec(source="users", columns=["name"]), scalar(0, str)).unwrap()
        total = db.count_from(CountSpec(source="users")).unwrap()
"""

import logging
from typing import Any, Dict, List, Optional

from selectkit.adapters.base import BaseEngine, PreparedHandle
from selectkit.adapters.factory import get_engine
from selectkit.core.config import settings
from selectkit.domain.query.executor import Collector, QueryExecutor, QueryOutcome
from selectkit.shared.types.models import CountSpec, QuerySpec

logger = logging.getLogger(__name__)


class Database:
    """
    A connected engine plus the select/count helpers.

    Args:
        engine: Connected engine
        owns_engine: Disconnect the engine on close() (default: False)
        log_sql: Log statement text at DEBUG (default: settings.log_sql)
    """

    def __init__(self, engine: BaseEngine, owns_engine: bool = False, log_sql: Optional[bool] = None):
        self.engine = engine
        self.owns_engine = owns_engine
        self.executor = QueryExecutor(engine, log_sql=log_sql)

    @classmethod
    def open(
        cls,
        engine: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        log_sql: Optional[bool] = None,
    ) -> "Database":
        """
        Connect a new, uncached engine.

        Args:
            engine: Engine name (default: settings.default_engine)
            config: Connection config (default: settings.engine_config())
            log_sql: Log statement text at DEBUG (default: settings.log_sql)
        """
        name = engine or settings.default_engine
        engine_config = config if config is not None else settings.engine_config()
        connected = get_engine(name, engine_config, use_cache=False)
        return cls(connected, owns_engine=True, log_sql=log_sql)

    def prepare_select_from(self, spec: QuerySpec) -> QueryOutcome[PreparedHandle]:
        return self.executor.prepare_select_from(spec)

    def select_from(self, spec: QuerySpec, collector: Collector) -> QueryOutcome[List[Any]]:
        return self.executor.select_from(spec, collector)

    def count_from(self, spec: CountSpec) -> QueryOutcome[int]:
        return self.executor.count_from(spec)

    def close(self) -> None:
        if self.owns_engine:
            self.engine.disconnect()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
