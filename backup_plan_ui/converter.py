"""
Migrates a CSV backup plan into a SQLite or MySQL database.
"""

from __future__ import annotations

import logging

from backup_plan_ui.sources import CSVSource, Entry, Instruction
from backup_plan_ui.sql import DEFAULT_TABLE_NAME, MySQLSource, SQLiteSource, SQLSource

logger = logging.getLogger(__name__)


class WrongEntryError(ValueError):
    """Raised when a CSV row cannot be carried over as is."""


def fix_entry(entry: Entry) -> None:
    """Trim stray spaces and reject entries with an unknown instruction."""
    entry.instruction = entry.instruction.strip(" ")
    if entry.instruction not in Instruction.values():
        raise WrongEntryError(f"invalid instruction for entry {entry!r}")

    entry.match = entry.match.strip(" ")
    entry.ignore = entry.ignore.strip(" ")
    entry.requestor = entry.requestor.strip(" ")
    entry.faculty = entry.faculty.strip(" ")


def read_fixed_entries(csv_path: str) -> list[Entry]:
    entries = CSVSource(csv_path).read_all()
    for entry in entries:
        fix_entry(entry)
    return entries


def convert_csv_to_sqlite(csv_path: str, sqlite_path: str) -> int:
    """
    Copy every entry of the CSV file into a SQLite database.

    All rows are checked before the database is touched. Returns the number
    of entries written.
    """
    entries = read_fixed_entries(csv_path)
    target = SQLiteSource(sqlite_path)
    try:
        target.create_table()
        target.write_entries(entries)
    finally:
        _close(target, "SQLite")
    logger.info("Wrote %d entries to %s", len(entries), sqlite_path)
    return len(entries)


def convert_csv_to_mysql(
    csv_path: str,
    host: str,
    port: str | int,
    user: str,
    password: str,
    database: str,
    table_name: str = DEFAULT_TABLE_NAME,
) -> int:
    """
    Copy every entry of the CSV file into a MySQL table.

    An existing table of the same name is dropped and recreated.
    """
    entries = read_fixed_entries(csv_path)
    target = MySQLSource.from_credentials(
        host, port, user, password, database, table_name
    )
    try:
        if target.has_table():
            logger.info("Dropping existing table %s", table_name)
            target.drop_table()
        target.create_table()
        target.write_entries(entries)
    finally:
        _close(target, "MySQL")
    logger.info(
        "Wrote %d entries to %s.%s", len(entries), database, table_name
    )
    return len(entries)


def _close(source: SQLSource, label: str) -> None:
    try:
        source.close()
    except Exception as err:
        logger.error("Failed to close %s connection: %s", label, err)
