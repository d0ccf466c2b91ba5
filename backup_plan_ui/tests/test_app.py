import dataclasses
import tempfile
import unittest

from fastapi.testclient import TestClient

from backup_plan_ui.app import create_app
from backup_plan_ui.sources import CSVSource
from backup_plan_ui.tests.helpers import NUM_TEST_ROWS, create_test_csv, form_data
from backup_plan_ui.validation import (
    ERR_BLANK_INPUT,
    ERR_IGNORE_WITHOUT_BACKUP,
    ERR_INVALID_INSTRUCTION,
)


class BackupPlanApiTests(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.entries, path = create_test_csv(tmp.name)
        self.source = CSVSource(path)
        self.client = TestClient(create_app(self.source))

    def test_home_page(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("<table", response.text)
        self.assertIn('hx-get="/entries"', response.text)

    def test_static_assets(self):
        response = self.client.get("/static/style.css")
        self.assertEqual(response.status_code, 200)

    def test_get_entries(self):
        response = self.client.get("/entries")
        self.assertEqual(response.status_code, 200)
        for entry in self.entries:
            self.assertIn(entry.reporting_name, response.text)
            self.assertIn(f'data-id="{entry.id}"', response.text)

    def test_get_entries_storage_failure(self):
        client = TestClient(create_app(CSVSource("/nonexistent/plan.csv")))
        response = client.get("/entries")
        self.assertEqual(response.status_code, 500)

    def test_edit_row(self):
        response = self.client.get("/actions/edit/1")
        self.assertEqual(response.status_code, 200)
        self.assertIn('name="ReportingName"', response.text)
        self.assertIn('value="test_project_1"', response.text)
        self.assertIn('hx-put="/actions/submit/1"', response.text)

    def test_edit_row_bad_id(self):
        for entry_id in ("abc", "-1", "70000", "42"):
            with self.subTest(entry_id=entry_id):
                response = self.client.get(f"/actions/edit/{entry_id}")
                self.assertEqual(response.status_code, 400)

    def test_edit_row_rejects_non_plain_digits(self):
        # "+1", " 1" and the Arabic-Indic digit one all parse with int().
        for entry_id in ("%2B1", "%201", "%D9%A1"):
            with self.subTest(entry_id=entry_id):
                response = self.client.get(f"/actions/edit/{entry_id}")
                self.assertEqual(response.status_code, 400)
                self.assertIn("invalid entry id", response.text)

    def test_submit_edits(self):
        original = self.entries[0]
        cases = [
            ("ReportingName", dataclasses.replace(original, reporting_name="NewName"), "NewName"),
            (
                "ReportingRoot",
                dataclasses.replace(
                    original,
                    reporting_root="/new/root/to/project/dir",
                    directory="/new/root/to/project/dir/nested",
                ),
                "/new/root/to/project/dir",
            ),
            (
                "Directory",
                dataclasses.replace(
                    original, directory="/some/path/to/project/dir/a/new/input"
                ),
                "/some/path/to/project/dir/a/new/input",
            ),
            ("Instruction", dataclasses.replace(original, instruction="nobackup"), "nobackup"),
            ("Match", dataclasses.replace(original, match="*.csv *.txt"), "*.csv *.txt"),
            ("Ignore", dataclasses.replace(original, ignore="*.txt"), "*.txt"),
            ("Requestor", dataclasses.replace(original, requestor="NewRequestor"), "NewRequestor"),
            ("Faculty", dataclasses.replace(original, faculty="NewFaculty"), "NewFaculty"),
        ]
        for field, changed, new_value in cases:
            with self.subTest(field=field):
                response = self.client.put(
                    f"/actions/submit/{changed.id}", data=form_data(changed)
                )
                self.assertEqual(response.status_code, 200)
                self.assertIn(new_value, response.text)
                self.assertIn(f'data-id="{changed.id}"', response.text)

                stored = self.source.get_entry(changed.id)
                self.assertEqual(stored, changed)
                self.assertNotEqual(stored, original)

    def test_submit_invalid_edits(self):
        changed = dataclasses.replace(
            self.entries[0], reporting_name="", instruction="nobackup", ignore="*.txt"
        )
        response = self.client.put("/actions/submit/0", data=form_data(changed))

        self.assertEqual(response.status_code, 200)
        self.assertIn(ERR_BLANK_INPUT, response.text)
        self.assertIn(ERR_IGNORE_WITHOUT_BACKUP, response.text)
        self.assertIn('name="ReportingName"', response.text)
        self.assertEqual(self.source.get_entry(0), self.entries[0])

    def test_submit_unknown_entry(self):
        changed = dataclasses.replace(self.entries[0], id=42)
        response = self.client.put("/actions/submit/42", data=form_data(changed))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.source.read_all(), self.entries)

    def test_cancel_edit(self):
        response = self.client.get("/actions/cancel/2")
        self.assertEqual(response.status_code, 200)
        self.assertIn("test_project_2", response.text)
        self.assertNotIn("<input", response.text)

    def test_cancel_new_entry(self):
        response = self.client.get("/actions/cancel/new")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, "")

    def test_open_delete_dialog(self):
        response = self.client.get("/actions/startDelete/1")
        self.assertEqual(response.status_code, 200)
        self.assertIn('id="modal"', response.text)
        self.assertIn('hx-get="/actions/delete/1"', response.text)

    def test_cancel_delete(self):
        response = self.client.get("/actions/cancelDel")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, "")

    def test_delete_row(self):
        response = self.client.get("/actions/delete/1")
        self.assertEqual(response.status_code, 200)
        self.assertIn('tr[data-id="1"]', response.text)

        remaining = self.source.read_all()
        self.assertEqual(len(remaining), NUM_TEST_ROWS - 1)
        self.assertNotIn(1, [entry.id for entry in remaining])

    def test_delete_unknown_row(self):
        response = self.client.get("/actions/delete/42")
        self.assertEqual(response.status_code, 400)
        self.assertIn("entry does not exist", response.text)
        self.assertEqual(len(self.source.read_all()), NUM_TEST_ROWS)

    def test_show_add_row_form(self):
        response = self.client.get("/actions/add")
        self.assertEqual(response.status_code, 200)
        self.assertIn("<table", response.text)
        self.assertIn('hx-put="/actions/add"', response.text)

    def test_add_new_entry(self):
        new_entry = dataclasses.replace(self.entries[0], reporting_name="brand_new")
        response = self.client.put("/actions/add", data=form_data(new_entry))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["HX-Trigger"], "entriesChanged")

        stored = self.source.get_entry(NUM_TEST_ROWS)
        self.assertEqual(stored, dataclasses.replace(new_entry, id=NUM_TEST_ROWS))

    def test_add_invalid_entry(self):
        new_entry = dataclasses.replace(self.entries[0], instruction="sometimes")
        response = self.client.put("/actions/add", data=form_data(new_entry))

        self.assertEqual(response.status_code, 200)
        self.assertIn(ERR_INVALID_INSTRUCTION, response.text)
        self.assertNotIn("HX-Trigger", response.headers)
        self.assertEqual(len(self.source.read_all()), NUM_TEST_ROWS)


if __name__ == "__main__":
    unittest.main()
