"""
Pydantic schemas for the HTML forms.
"""

from __future__ import annotations

from fastapi import Form
from pydantic import BaseModel, ConfigDict, Field

from backup_plan_ui.sources import Entry

# Form field names as submitted by the templates.
REPORTING_NAME = "ReportingName"
REPORTING_ROOT = "ReportingRoot"
DIRECTORY = "Directory"
INSTRUCTION = "Instruction"
MATCH = "Match"
IGNORE = "Ignore"
REQUESTOR = "Requestor"
FACULTY = "Faculty"

REQUIRED_FIELDS = (
    REPORTING_NAME,
    REPORTING_ROOT,
    DIRECTORY,
    INSTRUCTION,
    REQUESTOR,
    FACULTY,
)


class EntryForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reporting_name: str = Field(default="", alias=REPORTING_NAME)
    reporting_root: str = Field(default="", alias=REPORTING_ROOT)
    directory: str = Field(default="", alias=DIRECTORY)
    instruction: str = Field(default="", alias=INSTRUCTION)
    match: str = Field(default="", alias=MATCH)
    ignore: str = Field(default="", alias=IGNORE)
    requestor: str = Field(default="", alias=REQUESTOR)
    faculty: str = Field(default="", alias=FACULTY)

    def value(self, field_name: str) -> str:
        """Look a value up by its form field name."""
        return self.model_dump(by_alias=True)[field_name]

    def to_entry(self, entry_id: int = 0) -> Entry:
        return Entry(id=entry_id, **self.model_dump())


def entry_form(
    reporting_name: str = Form("", alias=REPORTING_NAME),
    reporting_root: str = Form("", alias=REPORTING_ROOT),
    directory: str = Form("", alias=DIRECTORY),
    instruction: str = Form("", alias=INSTRUCTION),
    match: str = Form("", alias=MATCH),
    ignore: str = Form("", alias=IGNORE),
    requestor: str = Form("", alias=REQUESTOR),
    faculty: str = Form("", alias=FACULTY),
) -> EntryForm:
    return EntryForm(
        reporting_name=reporting_name,
        reporting_root=reporting_root,
        directory=directory,
        instruction=instruction,
        match=match,
        ignore=ignore,
        requestor=requestor,
        faculty=faculty,
    )
