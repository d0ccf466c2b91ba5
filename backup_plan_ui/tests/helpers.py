"""
Shared fixtures for the test suite.
"""

from __future__ import annotations

import dataclasses
import os

from backup_plan_ui.schemas import EntryForm
from backup_plan_ui.sources import CSVSource, DataSource, Entry, EntryNotFoundError, Instruction

NUM_TEST_ROWS = 3


def create_test_entries() -> list[Entry]:
    base = Entry(
        reporting_name="test_project",
        reporting_root="/some/path/to/project/dir",
        directory="/some/path/to/project/dir/input",
        instruction=Instruction.BACKUP.value,
        requestor="user",
        faculty="group",
    )
    return [
        dataclasses.replace(base, reporting_name=f"test_project_{i}", id=i)
        for i in range(NUM_TEST_ROWS)
    ]


def create_test_csv(directory: str) -> tuple[list[Entry], str]:
    entries = create_test_entries()
    path = os.path.join(directory, "plan.csv")
    CSVSource(path).write_entries(entries)
    return entries, path


def form_data(entry: Entry) -> dict:
    """Form fields a browser would submit for entry."""
    values = entry.as_dict()
    values.pop("id")
    return EntryForm(**values).model_dump(by_alias=True)


class DataSourceContract:
    """
    Behaviour every data source must share. Mix into a TestCase and
    implement make_source.
    """

    def make_source(self, entries: list[Entry]) -> DataSource:
        raise NotImplementedError

    def setUp(self):
        self.entries = create_test_entries()
        self.source = self.make_source(self.entries)

    def test_read_all_returns_written_entries_in_order(self):
        self.assertEqual(self.source.read_all(), self.entries)

    def test_get_entry(self):
        for entry in self.entries:
            self.assertEqual(self.source.get_entry(entry.id), entry)

    def test_get_missing_entry(self):
        with self.assertRaises(EntryNotFoundError):
            self.source.get_entry(NUM_TEST_ROWS + 10)

    def test_update_entry(self):
        changed = dataclasses.replace(
            self.entries[1],
            reporting_name="renamed",
            instruction=Instruction.NOBACKUP.value,
            match="*.csv *.txt",
        )
        self.source.update_entry(changed)

        self.assertEqual(self.source.get_entry(1), changed)
        self.assertEqual(self.source.get_entry(0), self.entries[0])
        self.assertEqual(self.source.get_entry(2), self.entries[2])

    def test_update_missing_entry_leaves_data_unchanged(self):
        missing = dataclasses.replace(self.entries[0], id=NUM_TEST_ROWS + 10)
        with self.assertRaises(EntryNotFoundError):
            self.source.update_entry(missing)
        self.assertEqual(self.source.read_all(), self.entries)

    def test_delete_entry(self):
        deleted = self.source.delete_entry(1)

        self.assertEqual(deleted, self.entries[1])
        remaining = self.source.read_all()
        self.assertEqual(len(remaining), NUM_TEST_ROWS - 1)
        self.assertEqual([e.id for e in remaining], [0, 2])

    def test_delete_missing_entry(self):
        with self.assertRaises(EntryNotFoundError):
            self.source.delete_entry(NUM_TEST_ROWS + 10)
        self.assertEqual(len(self.source.read_all()), NUM_TEST_ROWS)

    def test_add_entry_appends_next_id(self):
        new_entry = dataclasses.replace(self.entries[0], reporting_name="new", id=0)
        self.source.add_entry(new_entry)

        self.assertEqual(new_entry.id, NUM_TEST_ROWS)
        self.assertEqual(self.source.get_entry(NUM_TEST_ROWS), new_entry)
        self.assertEqual(len(self.source.read_all()), NUM_TEST_ROWS + 1)

    def test_add_entry_fills_gap(self):
        self.source.delete_entry(1)
        new_entry = dataclasses.replace(self.entries[0], reporting_name="new")
        self.source.add_entry(new_entry)

        self.assertEqual(new_entry.id, 1)
        self.assertEqual(self.source.get_entry(1).reporting_name, "new")
        self.assertEqual(
            sorted(e.id for e in self.source.read_all()), [0, 1, 2]
        )
