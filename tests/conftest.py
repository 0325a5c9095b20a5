"""Pytest configuration and fixtures."""
import os
import uuid
from datetime import date
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

TEST_DB_PATH = Path("test_app.db")
if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()

TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("LOG_FORMAT", "text")

from worktrack.main import app  # noqa: E402
from worktrack.config import settings  # noqa: E402
from worktrack.database import Base, get_db  # noqa: E402
from worktrack.core.security import Principal  # noqa: E402
from worktrack.models.employee import Employee, EmployeeRole, EmployeeStatus  # noqa: E402
from worktrack.models.task import Task, TaskPriority, TaskStatus  # noqa: E402


# Create test engine
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create a test database session."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory():
    """Factory for additional sessions on the test database."""
    return TestSessionLocal


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession):
    """Create an async test client overriding database dependency."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def workflow_settings(monkeypatch):
    """Restore workflow switches after a test flips them."""
    monkeypatch.setattr(settings, "ENFORCE_CAPABILITIES", True)
    monkeypatch.setattr(settings, "STRICT_REQUEST_RESPONSES", False)
    return settings


async def _create_employee(db_session: AsyncSession, *, first_name: str, role: EmployeeRole) -> Employee:
    username = f"{first_name.lower()}-{uuid.uuid4().hex[:6]}"
    employee = Employee(
        id=uuid.uuid4(),
        first_name=first_name,
        last_name="Tester",
        email=f"{username}@example.com",
        username=username,
        position=role.value,
        department="Engineering",
        joining_date=date(2024, 1, 15),
        status=EmployeeStatus.ACTIVE,
        role=role,
    )
    db_session.add(employee)
    await db_session.commit()
    await db_session.refresh(employee)
    return employee


@pytest_asyncio.fixture
async def director(db_session: AsyncSession) -> Employee:
    return await _create_employee(db_session, first_name="Diana", role=EmployeeRole.DIRECTOR)


@pytest_asyncio.fixture
async def project_head(db_session: AsyncSession) -> Employee:
    return await _create_employee(db_session, first_name="Paul", role=EmployeeRole.PROJECT_HEAD)


@pytest_asyncio.fixture
async def staff(db_session: AsyncSession) -> Employee:
    return await _create_employee(db_session, first_name="Erin", role=EmployeeRole.EMPLOYEE)


def principal_for(employee: Employee) -> Principal:
    return Principal(role=employee.role, id=str(employee.id), name=employee.full_name)


@pytest.fixture
def headers_for():
    """Gateway headers identifying an employee."""

    def _headers(employee: Employee) -> dict:
        return {
            "X-Principal-Id": str(employee.id),
            "X-Principal-Role": employee.role.value,
            "X-Principal-Name": employee.full_name,
        }

    return _headers


@pytest.fixture
def director_principal(director: Employee) -> Principal:
    return principal_for(director)


@pytest.fixture
def head_principal(project_head: Employee) -> Principal:
    return principal_for(project_head)


@pytest.fixture
def staff_principal(staff: Employee) -> Principal:
    return principal_for(staff)


@pytest_asyncio.fixture
async def make_task(db_session: AsyncSession, director: Employee, staff: Employee):
    """Factory inserting tasks assigned by the director to the staff member."""

    async def _make_task(**overrides) -> Task:
        values = {
            "id": uuid.uuid4(),
            "title": "Prepare site survey",
            "description": "Collect measurements",
            "assigned_to_id": str(staff.id),
            "assigned_to_name": staff.full_name,
            "assigned_by_id": str(director.id),
            "assigned_by_name": director.full_name,
            "priority": TaskPriority.URGENT,
            "status": TaskStatus.PENDING,
        }
        values.update(overrides)
        task = Task(**values)
        db_session.add(task)
        await db_session.commit()
        await db_session.refresh(task)
        await db_session.refresh(task, attribute_names=["comments"])
        return task

    return _make_task
