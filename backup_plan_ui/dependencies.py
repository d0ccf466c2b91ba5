"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging
import threading

from backup_plan_ui.config import Settings, get_settings
from backup_plan_ui.sources import CSVSource, DataSource
from backup_plan_ui.sql import MySQLSource, SQLiteSource

logger = logging.getLogger(__name__)

_data_source: DataSource | None = None
_data_source_lock = threading.Lock()


def build_data_source(settings: Settings) -> DataSource:
    """
    Create the data source selected by the settings.

    Raises ValueError when the selected backend is not fully configured.
    """
    if settings.source == "mysql":
        missing = settings.missing_mysql_settings()
        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
        source = MySQLSource.from_credentials(
            host=settings.mysql_host,
            port=settings.mysql_port,
            user=settings.mysql_user,
            password=settings.mysql_pass,
            database=settings.mysql_database,
            table_name=settings.mysql_table,
        )
        source.create_table()
        logger.info(
            "Using MySQL table %s.%s on %s",
            settings.mysql_database,
            settings.mysql_table,
            settings.mysql_host,
        )
        return source

    if not settings.data_path:
        raise ValueError(f"A data path is required for the {settings.source} source")

    if settings.source == "sqlite":
        source = SQLiteSource(settings.data_path)
        source.create_table()
        logger.info("Using SQLite database: %s", settings.data_path)
        return source

    logger.info("Using CSV file: %s", settings.data_path)
    return CSVSource(settings.data_path)


def get_data_source() -> DataSource:
    """
    Return a singleton data source so every request talks to the same store.
    """
    global _data_source
    if _data_source:
        return _data_source

    # Sync handlers run on a threadpool; build at most one engine.
    with _data_source_lock:
        if _data_source is None:
            _data_source = build_data_source(get_settings())
    return _data_source
