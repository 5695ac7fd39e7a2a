# schemas.py
import math
import re
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

# Leading numeric prefix, the way a lenient "parse float" reads "12.5kg" as 12.5.
_NUMBER_PREFIX = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def coerce_salary(value: Any) -> float:
    """Coerce a salary to a float, falling back to 0 for anything unusable."""
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _NUMBER_PREFIX.match(str(value))
        if not match:
            return 0.0
        number = float(match.group())

    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


class EmployeeBase(BaseModel):
    # Wire format is camelCase; python attributes stay snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmployeeWrite(EmployeeBase):
    """Request body for both create and update.

    Nothing is required here: a missing first name, last name or email is
    rejected by the NOT NULL columns, not by the API.
    """
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    city: Optional[str] = None
    department: Optional[str] = None
    salary: float = 0.0

    model_config = ConfigDict(
        # The table takes whatever scalar arrives; only salary is coerced.
        coerce_numbers_to_str=True,
        json_schema_extra={
            "example": {
                "firstName": "Ann",
                "lastName": "Lee",
                "email": "ann@x.com",
                "phoneNumber": "555-0100",
                "city": "Lisbon",
                "department": "Finance",
                "salary": "5000.5",
            }
        },
    )

    @field_validator("salary", mode="before")
    @classmethod
    def parse_salary(cls, v):
        return coerce_salary(v)

    def column_values(self) -> dict:
        """Every mutable column, for a full-replace insert or update."""
        return self.model_dump(by_alias=False)


class EmployeeRead(EmployeeBase):
    id: int
    first_name: str
    last_name: str
    email: str
    phone_number: Optional[str] = None
    city: Optional[str] = None
    department: Optional[str] = None
    salary: float = 0.0
    date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("salary", mode="before")
    @classmethod
    def salary_as_float(cls, v):
        return 0.0 if v is None else v
