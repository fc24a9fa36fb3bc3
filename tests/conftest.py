import os

# Settings are read at import time; point them at throwaway values before importing app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENV"] = "test"
os.environ["ADMIN_EMAILS"] = "admin@nxlbeautybar.co.za"
os.environ["SMTP_HOST"] = ""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import app.models  # noqa: F401 - register tables
from app.core.db import get_session
from app.main import app as fastapi_app
from app.models.appointment import Appointment
from app.services.appointment_service import AppointmentLifecycle
from app.services.slot_service import ConflictChecker
from tests.fakes import InMemoryAppointmentStore, InMemorySlotStore

ADMIN_EMAIL = "admin@nxlbeautybar.co.za"


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_engine):
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as c:
        yield c
    fastapi_app.dependency_overrides.clear()


async def _auth_headers(client: AsyncClient, email: str, first_name: str) -> dict[str, str]:
    resp = await client.post(
        "/api/v1/auth/signup",
        json={"email": email, "password": "secret123", "first_name": first_name, "last_name": "Test"},
    )
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest_asyncio.fixture
async def admin_headers(client):
    return await _auth_headers(client, ADMIN_EMAIL, "Admin")


@pytest_asyncio.fixture
async def customer_headers(client):
    return await _auth_headers(client, "thandi@example.com", "Thandi")


@pytest.fixture
def slot_store():
    return InMemorySlotStore()


@pytest.fixture
def appointment_store():
    return InMemoryAppointmentStore()


@pytest.fixture
def checker(slot_store, appointment_store):
    return ConflictChecker(slot_store, appointment_store)


@pytest.fixture
def lifecycle(appointment_store, checker):
    return AppointmentLifecycle(appointment_store, checker)


@pytest.fixture
def make_appointment(appointment_store):
    """Seed the in-memory appointment store directly."""

    async def _make(staff_id=1, date="2024-06-01", time="10:00 am", status="Booked", customer_id=1):
        return await appointment_store.insert(
            Appointment(
                customer_id=customer_id,
                staff_id=staff_id,
                date=date,
                time=time,
                service_ids=[1],
                total_price=350.0,
                status=status,
            )
        )

    return _make
