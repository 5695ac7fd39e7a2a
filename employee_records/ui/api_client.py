# ui/api_client.py
import logging
from typing import List, Optional

import httpx

from ..schemas import EmployeeRead

logger = logging.getLogger(__name__)

API_URL = "http://localhost:5000/api"


class ApiError(Exception):
    """A non-2xx reply, or no reply at all (status_code is None)."""

    def __init__(self, status_code: Optional[int], message: Optional[str] = None):
        super().__init__(message or f"API request failed ({status_code})")
        self.status_code = status_code
        self.message = message


class EmployeeApiClient:
    def __init__(self, base_url: str = API_URL, http: Optional[httpx.AsyncClient] = None):
        self._http = http or httpx.AsyncClient(base_url=base_url)

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error(f"{method} {url} failed: {exc}")
            raise ApiError(None) from exc

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = body.get("error") if isinstance(body, dict) else None
            raise ApiError(response.status_code, message)
        return response

    async def list_employees(self) -> List[EmployeeRead]:
        response = await self._request("GET", "/employees")
        return [EmployeeRead.model_validate(item) for item in response.json()]

    async def create_employee(self, payload: dict) -> EmployeeRead:
        response = await self._request("POST", "/employees", json=payload)
        return EmployeeRead.model_validate(response.json())

    async def update_employee(self, employee_id: int, payload: dict) -> EmployeeRead:
        response = await self._request("PUT", f"/employees/{employee_id}", json=payload)
        return EmployeeRead.model_validate(response.json())

    async def delete_employee(self, employee_id: int) -> None:
        await self._request("DELETE", f"/employees/{employee_id}")

    async def aclose(self) -> None:
        await self._http.aclose()
