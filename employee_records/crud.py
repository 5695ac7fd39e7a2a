# crud.py
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from .models import Employee
from .schemas import EmployeeWrite


def _row_values(employee: EmployeeWrite) -> dict:
    values = employee.column_values()
    values["salary"] = Decimal(str(values["salary"]))
    return values


# --- Employee CRUD ---

async def create_employee(db: AsyncSession, employee: EmployeeWrite) -> Employee:
    db_employee = Employee(**_row_values(employee))

    db.add(db_employee)
    await db.commit()
    # Re-read so the server-assigned id and date come back.
    await db.refresh(db_employee)
    return db_employee


async def get_employee(db: AsyncSession, employee_id: int) -> Optional[Employee]:
    statement = select(Employee).where(Employee.id == employee_id)
    result = await db.execute(statement)
    return result.scalars().first()


async def get_all_employees(db: AsyncSession) -> List[Employee]:
    statement = select(Employee).order_by(Employee.id.asc())
    result = await db.execute(statement)
    return list(result.scalars().all())


async def update_employee(
        db: AsyncSession,
        employee_id: int,
        employee: EmployeeWrite
) -> Optional[Employee]:
    """Full replace: every mutable column is written, omitted ones included."""
    statement = (
        update(Employee)
        .where(Employee.id == employee_id)
        .values(**_row_values(employee))
    )
    result = await db.execute(statement)
    await db.commit()

    if result.rowcount == 0:
        return None
    return await get_employee(db, employee_id)


async def delete_employee(db: AsyncSession, employee_id: int) -> bool:
    result = await db.execute(delete(Employee).where(Employee.id == employee_id))
    await db.commit()
    return result.rowcount > 0
