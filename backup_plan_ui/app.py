"""
FastAPI application entry point for the backup plan UI.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException

from backup_plan_ui.dependencies import get_data_source
from backup_plan_ui.routes import router
from backup_plan_ui.sources import DataSource

STATIC_DIR = Path(__file__).resolve().parent / "static"


async def _plain_text_error(request: Request, exc: HTTPException):
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


def create_app(data_source: DataSource | None = None) -> FastAPI:
    """
    Build the application. When data_source is given it is used instead of
    the one selected by the settings.
    """
    app = FastAPI(title="Backup Plan UI", version="0.1.0")
    app.add_exception_handler(HTTPException, _plain_text_error)
    app.include_router(router)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    if data_source is not None:
        app.dependency_overrides[get_data_source] = lambda: data_source
    return app


app = create_app()
