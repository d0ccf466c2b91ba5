"""
Field level validation of submitted entry forms.
"""

from __future__ import annotations

import posixpath

from backup_plan_ui.schemas import (
    DIRECTORY,
    IGNORE,
    INSTRUCTION,
    REPORTING_ROOT,
    REQUIRED_FIELDS,
    EntryForm,
)
from backup_plan_ui.sources import Instruction

ERR_BLANK_INPUT = "You cannot leave this field blank"
ERR_INVALID_INSTRUCTION = "Input must be backup, nobackup or tempbackup"
ERR_IGNORE_WITHOUT_BACKUP = "Ignore can only be used with the backup instruction"
ERR_DIRECTORY_NOT_IN_ROOT = "Directory must be inside Reporting root"
ERR_ROOT_NOT_DEEP_ENOUGH = "Reporting Root must be at least five levels deep"
ERR_ROOT_WITHOUT_SLASH = "Reporting Root must start with a slash (/)"

MIN_ROOT_DEPTH = 5


def validate_form(form: EntryForm) -> dict[str, str]:
    """
    Return a mapping of form field name to error message.

    Each field gets at most one message; the first failing check wins.
    An empty mapping means the form is valid.
    """
    errors: dict[str, str] = {}

    def add_error(field: str, message: str) -> None:
        errors.setdefault(field, message)

    for field in REQUIRED_FIELDS:
        if not form.value(field).strip():
            add_error(field, ERR_BLANK_INPUT)

    if form.instruction not in Instruction.values():
        add_error(INSTRUCTION, ERR_INVALID_INSTRUCTION)

    if form.ignore.strip() and form.instruction != Instruction.BACKUP.value:
        add_error(IGNORE, ERR_IGNORE_WITHOUT_BACKUP)

    root = form.reporting_root
    if not root.startswith("/"):
        add_error(REPORTING_ROOT, ERR_ROOT_WITHOUT_SLASH)

    if path_depth(root) < MIN_ROOT_DEPTH:
        add_error(REPORTING_ROOT, ERR_ROOT_NOT_DEEP_ENOUGH)

    if not is_inside(form.directory, root):
        add_error(DIRECTORY, ERR_DIRECTORY_NOT_IN_ROOT)

    return errors


def path_depth(path: str) -> int:
    return len([part for part in path.split("/") if part])


def is_inside(directory: str, root: str) -> bool:
    """True when directory is root itself or lies below it."""
    if posixpath.isabs(directory) != posixpath.isabs(root):
        return False
    rel = posixpath.relpath(directory or ".", root or ".")
    return rel != ".." and not rel.startswith("../")
