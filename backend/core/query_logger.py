# backend/core/query_logger.py

import logging
import re
import time
from typing import Any, Dict, List

from sqlalchemy import event
from sqlalchemy.engine import Engine

from core.config import get_settings

query_logger = logging.getLogger("query_performance")

settings = get_settings()

_TABLE_PATTERN = re.compile(
    r"\b(?:FROM|JOIN|INTO|UPDATE)\s+[\"`]?([A-Za-z_][A-Za-z0-9_]*)", re.IGNORECASE
)


class QueryLogger:
    """SQL query statistics for development and debugging"""

    def __init__(self, slow_query_threshold: float = 1.0):
        self.enabled = settings.is_development or settings.debug
        self.slow_query_threshold = slow_query_threshold
        self.query_stats: Dict[str, Any] = {}
        self.reset_stats()

    def record(self, statement: str, tables: List[str], elapsed: float) -> None:
        self.query_stats["total_queries"] += 1
        self.query_stats["total_time"] += elapsed

        for table in tables:
            by_table = self.query_stats["queries_by_table"]
            by_table[table] = by_table.get(table, 0) + 1

        if elapsed > self.slow_query_threshold:
            self.query_stats["slow_queries"] += 1
            query_logger.warning(f"SLOW QUERY ({elapsed:.3f}s): {statement[:200]}...")

    def log_query_stats(self):
        """Log accumulated query statistics"""
        if not self.enabled:
            return

        total = max(self.query_stats["total_queries"], 1)
        query_logger.info(
            f"Queries: {self.query_stats['total_queries']}, "
            f"slow: {self.query_stats['slow_queries']}, "
            f"avg: {self.query_stats['total_time'] / total:.3f}s, "
            f"by table: {self.query_stats['queries_by_table']}"
        )

    def reset_stats(self):
        """Reset query statistics"""
        self.query_stats = {
            "total_queries": 0,
            "slow_queries": 0,
            "total_time": 0.0,
            "queries_by_table": {},
        }


# Singleton instance
query_logger_instance = QueryLogger(settings.slow_query_threshold_seconds)


def extract_tables_from_query(statement: str) -> List[str]:
    """Pull table names out of a SQL statement (best effort)."""
    return sorted({match.lower() for match in _TABLE_PATTERN.findall(statement)})


def setup_query_logging(engine: Engine):
    """
    Setup query logging for an SQLAlchemy engine

    Args:
        engine: SQLAlchemy engine instance
    """
    if not query_logger_instance.enabled:
        return

    @event.listens_for(engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start_time", []).append(time.time())

    @event.listens_for(engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        elapsed = time.time() - conn.info["query_start_time"].pop(-1)
        query_logger_instance.record(
            statement, extract_tables_from_query(statement), elapsed
        )

    @event.listens_for(engine, "handle_error")
    def handle_error(exception_context):
        # A failed statement never reaches after_cursor_execute
        conn = exception_context.connection
        if conn is not None and exception_context.cursor is not None:
            start_times = conn.info.get("query_start_time")
            if start_times:
                start_times.pop(-1)
