# ui/board.py
"""Client-side state for the employee page: the fetched list, the form
draft, edit mode, a transient status message and an advisory loading flag.

The list is a cache of what the API holds. It is refetched in full on first
load, on an explicit reload, and whenever an update or delete comes back 404.
"""

import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..schemas import EmployeeRead, coerce_salary
from .api_client import ApiError, EmployeeApiClient

logger = logging.getLogger(__name__)

MESSAGE_TTL_SECONDS = 5.0
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DRAFT_FIELDS = (
    "firstName",
    "lastName",
    "email",
    "phoneNumber",
    "city",
    "department",
    "salary",
)
REQUIRED_FIELDS = {
    "firstName": "First name",
    "lastName": "Last name",
    "email": "Email",
}


def empty_draft() -> Dict[str, str]:
    return {name: "" for name in DRAFT_FIELDS}


def validate_draft(draft: Dict[str, str]) -> Optional[str]:
    """Return the first problem with the draft, or None if it can be sent."""
    for field, label in REQUIRED_FIELDS.items():
        if not draft.get(field, "").strip():
            return f"{label} is required"
    if not EMAIL_PATTERN.match(draft["email"]):
        return "Please enter a valid email address"
    return None


@dataclass
class StatusMessage:
    text: str
    kind: str  # "success" or "error"
    expires_at: float


class EmployeeBoard:
    def __init__(
        self,
        api: EmployeeApiClient,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api = api
        self._clock = clock
        self.employees: List[EmployeeRead] = []
        self.draft: Dict[str, str] = empty_draft()
        self.edit_id: Optional[int] = None
        self.loading = False
        self.loaded = False
        self._message: Optional[StatusMessage] = None

    @property
    def edit_mode(self) -> bool:
        return self.edit_id is not None

    @property
    def message(self) -> Optional[StatusMessage]:
        if self._message and self._clock() >= self._message.expires_at:
            self._message = None
        return self._message

    def show_message(self, text: str, kind: str) -> None:
        self._message = StatusMessage(text, kind, self._clock() + MESSAGE_TTL_SECONDS)

    # --- list cache ---

    async def refresh(self) -> None:
        try:
            self.employees = await self.api.list_employees()
            self.loaded = True
        except ApiError as exc:
            logger.error(f"Error fetching employees: {exc}")
            self.show_message("Failed to fetch employees. Please try again.", "error")

    async def ensure_loaded(self) -> None:
        if not self.loaded:
            await self.refresh()

    # --- form ---

    def update_draft(self, values: Dict[str, str]) -> None:
        for name in DRAFT_FIELDS:
            if name in values:
                self.draft[name] = values[name]

    def start_edit(self, employee_id: int) -> bool:
        employee = self.find(employee_id)
        if employee is None or self.loading:
            return False

        self.draft = {
            "firstName": employee.first_name,
            "lastName": employee.last_name,
            "email": employee.email,
            "phoneNumber": employee.phone_number or "",
            "city": employee.city or "",
            "department": employee.department or "",
            "salary": str(employee.salary) if employee.salary else "",
        }
        self.edit_id = employee_id
        return True

    def cancel_edit(self) -> None:
        self.draft = empty_draft()
        self.edit_id = None

    def _payload(self) -> dict:
        payload = dict(self.draft)
        payload["salary"] = coerce_salary(self.draft.get("salary"))
        return payload

    async def submit(self) -> bool:
        """Validate, then create or update. Returns True when the API accepted it."""
        if self.loading:
            return False

        problem = validate_draft(self.draft)
        if problem:
            self.show_message(problem, "error")
            return False

        self.loading = True
        try:
            if self.edit_mode:
                saved = await self.api.update_employee(self.edit_id, self._payload())
                self.employees = [saved if e.id == saved.id else e for e in self.employees]
                self.show_message("Employee updated successfully!", "success")
            else:
                saved = await self.api.create_employee(self._payload())
                self.employees.append(saved)
                self.show_message("Employee added successfully!", "success")
        except ApiError as exc:
            logger.error(f"Error saving employee: {exc}")
            self.show_message(exc.message or "Failed to save record. Please try again.", "error")
            if exc.status_code == 404:
                await self.refresh()
            return False
        finally:
            self.loading = False

        self.cancel_edit()
        return True

    async def delete(self, employee_id: int) -> bool:
        """Delete a row. Call only after the user confirmed."""
        if self.loading:
            return False

        self.loading = True
        try:
            await self.api.delete_employee(employee_id)
        except ApiError as exc:
            logger.error(f"Error deleting employee: {exc}")
            self.show_message("Failed to delete employee. Please try again.", "error")
            if exc.status_code == 404:
                await self.refresh()
            return False
        finally:
            self.loading = False

        self.employees = [e for e in self.employees if e.id != employee_id]
        if self.edit_id == employee_id:
            self.cancel_edit()
        self.show_message("Employee deleted successfully!", "success")
        return True

    def find(self, employee_id: int) -> Optional[EmployeeRead]:
        return next((e for e in self.employees if e.id == employee_id), None)
