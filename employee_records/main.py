# main.py
import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import crud, schemas
from .config import Settings, get_settings
from .database import EmployeeStore, get_store
from .errors import EmployeeNotFoundError, register_error_handlers
from .observability import setup_logging

logger = logging.getLogger(__name__)


async def log_request(request: Request) -> None:
    """Log method, path and raw body before the handler runs."""
    body = await request.body()
    logger.info(
        f"{request.method} {request.url.path} {body.decode('utf-8', errors='replace') or '{}'}",
        extra={"method": request.method, "path": request.url.path},
    )


router = APIRouter(
    prefix="/api/employees",
    tags=["Employees"],
    dependencies=[Depends(log_request)],
)


# --- API Endpoints ---

@router.post(
    "",
    response_model=schemas.EmployeeRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_employee_endpoint(
        employee_input: schemas.EmployeeWrite,
        store: EmployeeStore = Depends(get_store),
):
    """Create a new employee record."""
    async with store.session() as db:
        employee = await crud.create_employee(db=db, employee=employee_input)
    logger.info(f"Employee inserted successfully: id={employee.id}")
    return schemas.EmployeeRead.model_validate(employee)


@router.get("", response_model=List[schemas.EmployeeRead])
async def get_all_employees_endpoint(store: EmployeeStore = Depends(get_store)):
    """Retrieve all employees, ordered by id."""
    async with store.session() as db:
        employees = await crud.get_all_employees(db=db)
    return [schemas.EmployeeRead.model_validate(e) for e in employees]


@router.get("/{employee_id}", response_model=schemas.EmployeeRead)
async def get_employee_endpoint(
        employee_id: int,
        store: EmployeeStore = Depends(get_store),
):
    async with store.session() as db:
        employee = await crud.get_employee(db, employee_id)
    if not employee:
        raise EmployeeNotFoundError(employee_id)
    return schemas.EmployeeRead.model_validate(employee)


@router.put("/{employee_id}", response_model=schemas.EmployeeRead)
async def update_employee_endpoint(
        employee_id: int,
        updated_details: schemas.EmployeeWrite,
        store: EmployeeStore = Depends(get_store),
):
    """
    Replaces every mutable field of an employee.
    Fields left out of the body are reset to their defaults, not kept.
    """
    async with store.session() as db:
        employee = await crud.update_employee(
            db=db,
            employee_id=employee_id,
            employee=updated_details,
        )
    if not employee:
        raise EmployeeNotFoundError(employee_id)
    return schemas.EmployeeRead.model_validate(employee)


@router.delete("/{employee_id}")
async def delete_employee_endpoint(
        employee_id: int,
        store: EmployeeStore = Depends(get_store),
):
    async with store.session() as db:
        deleted = await crud.delete_employee(db=db, employee_id=employee_id)
    if not deleted:
        raise EmployeeNotFoundError(employee_id)
    return {"message": "Employee deleted successfully"}


health_router = APIRouter(prefix="/api/health", tags=["System"])


@health_router.get("")
async def readiness_check(store: EmployeeStore = Depends(get_store)):
    """Ready once the bootstrap finished and the database answers."""
    if not store.ready or not await store.ping():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    store: EmployeeStore = app.state.store
    bootstrap = None
    if not store.ready:
        # Serve requests while the table bootstrap keeps retrying.
        bootstrap = asyncio.create_task(store.initialize())

    yield

    if bootstrap is not None and not bootstrap.done():
        bootstrap.cancel()
        with suppress(asyncio.CancelledError):
            await bootstrap
    await store.dispose()


def create_app(
        store: Optional[EmployeeStore] = None,
        settings: Optional[Settings] = None,
) -> FastAPI:
    settings = settings or get_settings()
    if store is None:
        store = EmployeeStore(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            retry_delay=settings.DB_INIT_RETRY_SECONDS,
        )

    app = FastAPI(
        title="Employee Records API",
        description="CRUD over a single employees table.",
        lifespan=lifespan,
    )
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(router)
    app.include_router(health_router)
    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    logger.info(f"Server running on port {settings.PORT}")
    uvicorn.run(create_app(settings=settings), host="0.0.0.0", port=settings.PORT)
