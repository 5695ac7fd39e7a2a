# tests/test_board.py
import pytest

from employee_records.ui.api_client import ApiError
from employee_records.ui.board import EmployeeBoard, empty_draft, validate_draft

pytestmark = pytest.mark.asyncio

DRAFT = {
    "firstName": "Ann",
    "lastName": "Lee",
    "email": "ann@x.com",
    "phoneNumber": "",
    "city": "Porto",
    "department": "",
    "salary": "5000.5",
}


class UnreachableApi:
    """Fails any call; used to prove nothing reaches the network."""

    calls = 0

    async def _fail(self, *args, **kwargs):
        self.calls += 1
        raise ApiError(None)

    list_employees = create_employee = update_employee = delete_employee = _fail


async def add(board: EmployeeBoard, **overrides):
    board.update_draft({**DRAFT, **overrides})
    assert await board.submit() is True
    return board.employees[-1]


async def test_validate_draft_requires_names_and_email():
    assert validate_draft({**DRAFT, "firstName": ""}) == "First name is required"
    assert validate_draft({**DRAFT, "lastName": "  "}) == "Last name is required"
    assert validate_draft({**DRAFT, "email": ""}) == "Email is required"
    assert validate_draft({**DRAFT, "email": "ann@x"}) == "Please enter a valid email address"
    assert validate_draft({**DRAFT, "email": "a b@x.com"}) == "Please enter a valid email address"
    assert validate_draft(DRAFT) is None


async def test_invalid_draft_sends_no_request(clock):
    api = UnreachableApi()
    board = EmployeeBoard(api, clock=clock)
    board.update_draft({**DRAFT, "email": "not-an-email"})

    assert await board.submit() is False
    assert api.calls == 0
    assert board.message.kind == "error"
    assert board.message.text == "Please enter a valid email address"
    assert board.draft["email"] == "not-an-email"


async def test_create_appends_and_resets_form(board: EmployeeBoard):
    await board.ensure_loaded()
    assert board.employees == []

    employee = await add(board)
    assert employee.first_name == "Ann"
    assert employee.salary == 5000.5
    assert employee.city == "Porto"
    assert board.draft == empty_draft()
    assert board.edit_mode is False
    assert board.message.text == "Employee added successfully!"


async def test_edit_copies_row_and_update_replaces_by_id(board: EmployeeBoard):
    first = await add(board)
    second = await add(board, firstName="Bob")

    assert board.start_edit(first.id) is True
    assert board.edit_mode is True
    assert board.draft["firstName"] == "Ann"
    assert board.draft["phoneNumber"] == ""
    assert board.draft["salary"] == "5000.5"

    board.update_draft({"city": "Braga"})
    assert await board.submit() is True

    assert [e.id for e in board.employees] == [first.id, second.id]
    assert board.employees[0].city == "Braga"
    assert board.edit_mode is False
    assert board.message.text == "Employee updated successfully!"


async def test_start_edit_unknown_row_is_ignored(board: EmployeeBoard):
    assert board.start_edit(123) is False
    assert board.edit_mode is False


async def test_cancel_edit_clears_draft(board: EmployeeBoard):
    employee = await add(board)
    board.start_edit(employee.id)
    board.cancel_edit()
    assert board.edit_mode is False
    assert board.draft == empty_draft()


async def test_delete_removes_row_locally_and_remotely(board: EmployeeBoard, api_client):
    keep = await add(board)
    gone = await add(board, firstName="Bob")

    assert await board.delete(gone.id) is True
    assert [e.id for e in board.employees] == [keep.id]
    assert [e.id for e in await api_client.list_employees()] == [keep.id]
    assert board.message.text == "Employee deleted successfully!"


async def test_stale_row_triggers_full_refetch(board: EmployeeBoard, api_client):
    employee = await add(board)
    # Another client removes the row behind our back.
    await api_client.delete_employee(employee.id)

    assert await board.delete(employee.id) is False
    assert board.message.text == "Failed to delete employee. Please try again."
    assert board.employees == []


async def test_server_error_text_is_shown(board: EmployeeBoard, api_client, monkeypatch):
    async def broken_create(payload):
        raise ApiError(500, "Column 'firstName' cannot be null")

    monkeypatch.setattr(api_client, "create_employee", broken_create)
    board.update_draft(DRAFT)

    assert await board.submit() is False
    assert board.message.text == "Column 'firstName' cannot be null"
    assert board.loading is False


async def test_generic_fallback_when_server_gives_no_text(clock):
    board = EmployeeBoard(UnreachableApi(), clock=clock)
    board.update_draft(DRAFT)

    assert await board.submit() is False
    assert board.message.text == "Failed to save record. Please try again."


async def test_messages_clear_after_five_seconds(clock):
    board = EmployeeBoard(UnreachableApi(), clock=clock)
    board.show_message("hello", "success")

    clock.advance(4.9)
    assert board.message.text == "hello"
    clock.advance(0.2)
    assert board.message is None


async def test_submit_is_refused_while_loading(clock):
    api = UnreachableApi()
    board = EmployeeBoard(api, clock=clock)
    board.update_draft(DRAFT)
    board.loading = True

    assert await board.submit() is False
    assert await board.delete(1) is False
    assert api.calls == 0


async def test_failed_fetch_shows_error(clock):
    board = EmployeeBoard(UnreachableApi(), clock=clock)
    await board.ensure_loaded()
    assert board.loaded is False
    assert board.message.text == "Failed to fetch employees. Please try again."
