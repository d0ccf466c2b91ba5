"""
Data source abstraction for the backup plan and the CSV file implementation.
"""

from __future__ import annotations

import csv
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Iterable, Protocol

from dacite import Config, DaciteError, from_dict


MAX_ENTRY_ID = 0xFFFF

CSV_COLUMNS = (
    "id",
    "reporting_name",
    "reporting_root",
    "directory",
    "instruction",
    "match",
    "ignore",
    "requestor",
    "faculty",
)


class Instruction(str, Enum):
    BACKUP = "backup"
    NOBACKUP = "nobackup"
    TEMPBACKUP = "tempbackup"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


class EntryNotFoundError(LookupError):
    def __init__(self, entry_id: int | None = None):
        message = "entry does not exist"
        if entry_id is not None:
            message = f"{message}: {entry_id}"
        super().__init__(message)
        self.entry_id = entry_id


@dataclass
class Entry:
    """One row of the backup plan."""

    reporting_name: str = ""
    reporting_root: str = ""
    directory: str = ""
    instruction: str = ""
    match: str = ""
    ignore: str = ""
    requestor: str = ""
    faculty: str = ""
    id: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


class DataSource(Protocol):
    """Operations the UI needs from a backup plan store."""

    def read_all(self) -> list[Entry]:
        ...

    def get_entry(self, entry_id: int) -> Entry:
        ...

    def update_entry(self, entry: Entry) -> None:
        ...

    def delete_entry(self, entry_id: int) -> Entry:
        ...

    def add_entry(self, entry: Entry) -> None:
        ...


def next_entry_id(used_ids: Iterable[int]) -> int:
    """
    Return the smallest non-negative integer not present in used_ids.
    """
    used = set(used_ids)
    for candidate in range(min(len(used), MAX_ENTRY_ID) + 1):
        if candidate not in used:
            return candidate
    raise ValueError("no free entry id left")


def find_entry(entries: list[Entry], entry_id: int) -> tuple[Entry, int]:
    for index, entry in enumerate(entries):
        if entry.id == entry_id:
            return entry, index
    raise EntryNotFoundError(entry_id)


_DACITE_CONFIG = Config(type_hooks={int: int})


def entry_from_row(row: dict) -> Entry:
    try:
        entry = from_dict(data_class=Entry, data=row, config=_DACITE_CONFIG)
    except DaciteError as err:
        raise ValueError(f"malformed entry {row!r}: {err}") from err
    if not 0 <= entry.id <= MAX_ENTRY_ID:
        raise ValueError(f"entry id out of range: {entry.id}")
    return entry


@dataclass
class CSVSource:
    """
    Keeps the backup plan in a single CSV file.

    Every operation parses the whole file, and every mutation rewrites it.
    There is no locking, so concurrent writers can clobber each other.
    """

    path: str

    def read_all(self) -> list[Entry]:
        with open(self.path, newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None:
                return []
            missing = [c for c in CSV_COLUMNS if c not in reader.fieldnames]
            if missing:
                raise ValueError(
                    f"{self.path}: missing columns: {', '.join(missing)}"
                )
            entries: list[Entry] = []
            seen: set[int] = set()
            for line_no, row in enumerate(reader, start=2):
                try:
                    entry = entry_from_row(row)
                except ValueError as err:
                    raise ValueError(f"{self.path}:{line_no}: {err}") from err
                if entry.id in seen:
                    raise ValueError(
                        f"{self.path}:{line_no}: duplicate entry id {entry.id}"
                    )
                seen.add(entry.id)
                entries.append(entry)
        return entries

    def get_entry(self, entry_id: int) -> Entry:
        entry, _ = find_entry(self.read_all(), entry_id)
        return entry

    def update_entry(self, entry: Entry) -> None:
        entries = self.read_all()
        _, index = find_entry(entries, entry.id)
        entries[index] = entry
        self.write_entries(entries)

    def delete_entry(self, entry_id: int) -> Entry:
        entries = self.read_all()
        entry, index = find_entry(entries, entry_id)
        del entries[index]
        self.write_entries(entries)
        return entry

    def add_entry(self, entry: Entry) -> None:
        entries = self.read_all()
        entry.id = next_entry_id(e.id for e in entries)
        entries.append(entry)
        self.write_entries(entries)

    def write_entries(self, entries: Iterable[Entry]) -> None:
        with open(self.path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
            writer.writeheader()
            for entry in entries:
                writer.writerow(entry.as_dict())
