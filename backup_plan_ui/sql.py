"""
SQL implementations of the data source, shared between SQLite and MySQL.
"""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import (
    CheckConstraint,
    Column,
    Integer,
    MetaData,
    Table,
    Text,
    create_engine,
    delete,
    insert,
    inspect,
    select,
    update,
)
from sqlalchemy.engine import URL, Row, make_url

from backup_plan_ui.sources import Entry, EntryNotFoundError, Instruction, next_entry_id

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "entries"


def build_entries_table(table_name: str, metadata: MetaData) -> Table:
    """
    Describe the entries table.

    match and ignore are reserved words in MySQL, so they live in the
    keep and skip columns.
    """
    allowed = ", ".join(f"'{value}'" for value in Instruction.values())
    return Table(
        table_name,
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("reporting_name", Text),
        Column("reporting_root", Text),
        Column("directory", Text),
        Column(
            "instruction",
            Text,
            CheckConstraint(f"instruction IN ({allowed})"),
        ),
        Column("keep", Text, key="match"),
        Column("skip", Text, key="ignore"),
        Column("requestor", Text),
        Column("faculty", Text),
        sqlite_autoincrement=True,
    )


class SQLSource:
    """
    SQLAlchemy-backed data source. Accepts any SQLAlchemy URL.

    You are responsible for releasing the connection pool with close().
    """

    def __init__(
        self,
        database_url: str | URL,
        table_name: str = DEFAULT_TABLE_NAME,
        **engine_kwargs,
    ):
        if not database_url:
            raise ValueError("a database URL is required for SQLSource")
        self.engine = create_engine(
            database_url,
            pool_pre_ping=True,
            pool_recycle=1800,
            **engine_kwargs,
        )
        self.table = build_entries_table(table_name, MetaData())

    @property
    def table_name(self) -> str:
        return self.table.name

    def close(self) -> None:
        self.engine.dispose()

    def create_table(self) -> None:
        self.table.create(self.engine, checkfirst=True)

    def drop_table(self) -> None:
        self.table.drop(self.engine, checkfirst=True)

    def has_table(self) -> bool:
        return inspect(self.engine).has_table(self.table.name)

    def _to_entry(self, row: Row) -> Entry:
        values = {}
        for key, column in self.table.c.items():
            value = row._mapping[column]
            if key != "id" and value is None:
                value = ""
            values[key] = value
        return Entry(**values)

    def read_all(self) -> list[Entry]:
        stmt = select(self.table).order_by(self.table.c.id)
        with self.engine.connect() as conn:
            return [self._to_entry(row) for row in conn.execute(stmt)]

    def get_entry(self, entry_id: int) -> Entry:
        stmt = select(self.table).where(self.table.c.id == entry_id)
        with self.engine.connect() as conn:
            row = conn.execute(stmt).first()
        if row is None:
            raise EntryNotFoundError(entry_id)
        return self._to_entry(row)

    def update_entry(self, entry: Entry) -> None:
        values = entry.as_dict()
        values.pop("id")
        stmt = (
            update(self.table)
            .where(self.table.c.id == entry.id)
            .values(**values)
        )
        with self.engine.begin() as conn:
            result = conn.execute(stmt)
            if result.rowcount == 0:
                raise EntryNotFoundError(entry.id)

    def delete_entry(self, entry_id: int) -> Entry:
        stmt = (
            delete(self.table)
            .where(self.table.c.id == entry_id)
            .returning(*self.table.c)
        )
        with self.engine.begin() as conn:
            row = conn.execute(stmt).first()
            if row is None:
                raise EntryNotFoundError(entry_id)
        return self._to_entry(row)

    def add_entry(self, entry: Entry) -> None:
        with self.engine.begin() as conn:
            used_ids = conn.execute(select(self.table.c.id)).scalars().all()
            entry.id = next_entry_id(used_ids)
            conn.execute(insert(self.table).values(**entry.as_dict()))

    def write_entries(self, entries: Iterable[Entry]) -> None:
        """Insert entries with their current ids in a single transaction."""
        rows = [entry.as_dict() for entry in entries]
        if not rows:
            return
        with self.engine.begin() as conn:
            conn.execute(insert(self.table), rows)


class SQLiteSource(SQLSource):
    def __init__(self, path: str, table_name: str = DEFAULT_TABLE_NAME):
        super().__init__(
            URL.create("sqlite+pysqlite", database=path), table_name
        )
        self.path = path


class MySQLSource(SQLSource):
    """
    MySQL flavour of the SQL source.

    The driver has no DELETE ... RETURNING, so deletion reads the row
    first and removes it inside the same transaction.
    """

    def __init__(
        self, database_url: str | URL, table_name: str = DEFAULT_TABLE_NAME
    ):
        engine_kwargs = {}
        if make_url(database_url).get_backend_name() == "mysql":
            # Gap filling can hand out id 0, which AUTO_INCREMENT would
            # otherwise replace with a fresh value.
            engine_kwargs["connect_args"] = {
                "init_command": "SET SESSION sql_mode = "
                "CONCAT(@@sql_mode, ',NO_AUTO_VALUE_ON_ZERO')"
            }
        super().__init__(database_url, table_name, **engine_kwargs)

    @classmethod
    def from_credentials(
        cls,
        host: str,
        port: str | int,
        user: str,
        password: str,
        database: str,
        table_name: str = DEFAULT_TABLE_NAME,
    ) -> "MySQLSource":
        url = URL.create(
            "mysql+pymysql",
            username=user,
            password=password,
            host=host,
            port=int(port),
            database=database,
        )
        return cls(url, table_name)

    def delete_entry(self, entry_id: int) -> Entry:
        where = self.table.c.id == entry_id
        with self.engine.begin() as conn:
            row = conn.execute(
                select(self.table).where(where).with_for_update()
            ).first()
            if row is None:
                raise EntryNotFoundError(entry_id)
            conn.execute(delete(self.table).where(where))
        logger.debug("Deleted row %s from %s", entry_id, self.table.name)
        return self._to_entry(row)
