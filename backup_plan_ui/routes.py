"""
HTTP routes for the backup plan UI.

Every handler renders an HTML fragment that htmx swaps into the page.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, NoReturn, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError

from backup_plan_ui.dependencies import get_data_source
from backup_plan_ui.schemas import EntryForm, entry_form
from backup_plan_ui.sources import MAX_ENTRY_ID, DataSource, Entry, Instruction
from backup_plan_ui.validation import validate_form

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

TMPL_INDEX = "index.html"
TMPL_ROW = "row.html"
TMPL_EDIT_ROW = "edit_row.html"
TMPL_ADD_ROW = "add_row.html"
TMPL_DELETE_DIALOG = "delete_modal.html"

# Errors a data source may raise besides the missing entry case.
STORAGE_ERRORS = (OSError, ValueError, SQLAlchemyError)

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter()

T = TypeVar("T")


def _abort(status_code: int, detail: str) -> NoReturn:
    logger.error(detail)
    raise HTTPException(status_code=status_code, detail=detail)


def _call(status_code: int, fn: Callable[..., T], *args) -> T:
    """Run a data source operation, turning its failures into HTTP errors."""
    try:
        return fn(*args)
    except (LookupError, *STORAGE_ERRORS) as err:
        _abort(status_code, str(err))


def _parse_entry_id(raw: str) -> int:
    if not (raw.isascii() and raw.isdigit()):
        _abort(400, f"invalid entry id: {raw!r}")
    entry_id = int(raw)
    if entry_id > MAX_ENTRY_ID:
        _abort(400, f"entry id out of range: {entry_id}")
    return entry_id


def _render(
    request: Request,
    name: str,
    entry: Entry | None = None,
    errors: dict[str, str] | None = None,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        name,
        {
            "entry": entry,
            "errors": errors or {},
            "instructions": Instruction.values(),
        },
    )


@router.get("/", response_class=HTMLResponse)
def serve_home(request: Request):
    return templates.TemplateResponse(request, TMPL_INDEX, {})


@router.get("/entries", response_class=HTMLResponse)
def get_entries(db: DataSource = Depends(get_data_source)):
    entries = _call(500, db.read_all)
    row = templates.get_template(TMPL_ROW)
    return HTMLResponse(
        "".join(row.render(entry=entry, errors={}) for entry in entries)
    )


@router.get("/actions/edit/{entry_id}", response_class=HTMLResponse)
def allow_user_to_edit_row(
    request: Request,
    entry_id: str,
    db: DataSource = Depends(get_data_source),
):
    entry = _call(400, db.get_entry, _parse_entry_id(entry_id))
    return _render(request, TMPL_EDIT_ROW, entry)


@router.put("/actions/submit/{entry_id}", response_class=HTMLResponse)
def submit_edits(
    request: Request,
    entry_id: str,
    form: EntryForm = Depends(entry_form),
    db: DataSource = Depends(get_data_source),
):
    updated = form.to_entry(_parse_entry_id(entry_id))

    errors = validate_form(form)
    if errors:
        return _render(request, TMPL_EDIT_ROW, updated, errors)

    _call(400, db.update_entry, updated)
    logger.info("Updated entry: %r", updated)

    entry = _call(400, db.get_entry, updated.id)
    return _render(request, TMPL_ROW, entry)


@router.get("/actions/cancel/{entry_id}", response_class=HTMLResponse)
def reset_view(
    request: Request,
    entry_id: str,
    db: DataSource = Depends(get_data_source),
):
    if entry_id == "new":
        return HTMLResponse("")

    entry = _call(400, db.get_entry, _parse_entry_id(entry_id))
    return _render(request, TMPL_ROW, entry)


@router.get("/actions/startDelete/{entry_id}", response_class=HTMLResponse)
def open_delete_dialog(
    request: Request,
    entry_id: str,
    db: DataSource = Depends(get_data_source),
):
    entry = _call(400, db.get_entry, _parse_entry_id(entry_id))
    return _render(request, TMPL_DELETE_DIALOG, entry)


@router.get("/actions/delete/{entry_id}", response_class=HTMLResponse)
def delete_row(entry_id: str, db: DataSource = Depends(get_data_source)):
    deleted = _call(400, db.delete_entry, _parse_entry_id(entry_id))
    logger.info("Deleted entry with id %d", deleted.id)

    return HTMLResponse(
        f"""
        <script>
            document.getElementById('modal')?.remove();
            document.querySelector('tr[data-id="{deleted.id}"]')?.remove();
        </script>
        """
    )


@router.get("/actions/cancelDel", response_class=HTMLResponse)
def cancel_delete():
    return HTMLResponse("")


@router.get("/actions/add", response_class=HTMLResponse)
def show_add_row_form(request: Request):
    return _render(request, TMPL_ADD_ROW, Entry())


@router.put("/actions/add", response_class=HTMLResponse)
def add_new_entry(
    request: Request,
    form: EntryForm = Depends(entry_form),
    db: DataSource = Depends(get_data_source),
):
    new_entry = form.to_entry()

    errors = validate_form(form)
    if errors:
        return _render(request, TMPL_ADD_ROW, new_entry, errors)

    _call(500, db.add_entry, new_entry)
    logger.info("Added new entry: %r", new_entry)

    # Tells the page to reload the entry table.
    return Response(headers={"HX-Trigger": "entriesChanged"})
