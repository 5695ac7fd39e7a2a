# ui/app.py
"""Browser-facing page for the employee board.

One EmployeeBoard lives on app.state and is shared by every request this
process serves, so draft and edit mode are not per visitor. The server binds
to 127.0.0.1 for a single local user.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from ..config import get_settings
from ..observability import setup_logging
from .api_client import EmployeeApiClient
from .board import DRAFT_FIELDS, EmployeeBoard

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


def _board(request: Request) -> EmployeeBoard:
    return request.app.state.board


def create_ui_app(board: Optional[EmployeeBoard] = None) -> FastAPI:
    app = FastAPI(title="Employee Management Software", docs_url=None, redoc_url=None)
    app.state.board = board or EmployeeBoard(EmployeeApiClient())

    @app.get("/")
    async def home(request: Request):
        board = _board(request)
        await board.ensure_loaded()
        return templates.TemplateResponse(request, "index.html", {"board": board})

    @app.post("/employees")
    async def submit_employee(request: Request):
        board = _board(request)
        form = await request.form()
        board.update_draft({name: str(form.get(name, "")) for name in DRAFT_FIELDS})
        await board.submit()
        return RedirectResponse("/", status_code=302)

    @app.post("/employees/{employee_id}/edit")
    async def edit_employee(request: Request, employee_id: int):
        _board(request).start_edit(employee_id)
        return RedirectResponse("/", status_code=302)

    @app.post("/edit/cancel")
    async def cancel_edit(request: Request):
        _board(request).cancel_edit()
        return RedirectResponse("/", status_code=302)

    @app.get("/employees/{employee_id}/delete")
    async def confirm_delete(request: Request, employee_id: int):
        board = _board(request)
        employee = board.find(employee_id)
        if employee is None:
            return RedirectResponse("/", status_code=302)
        return templates.TemplateResponse(
            request, "confirm_delete.html", {"board": board, "employee": employee},
        )

    @app.post("/employees/{employee_id}/delete")
    async def delete_employee(request: Request, employee_id: int):
        await _board(request).delete(employee_id)
        return RedirectResponse("/", status_code=302)

    @app.post("/refresh")
    async def refresh(request: Request):
        await _board(request).refresh()
        return RedirectResponse("/", status_code=302)

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    uvicorn.run(create_ui_app(), host="127.0.0.1", port=settings.UI_PORT)
