"""
Shared fixtures

Every test gets its own file-backed SQLite database; concurrent tests
open one session per task from session_factory.
"""

import os
import tempfile

# console logging only, uploads away from the working tree
os.environ.setdefault("LOG_DIR", "")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="freight-uploads-"))

from httpx import ASGITransport, AsyncClient
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from freight.core.deps import get_db
from freight.db.base import Base
from freight.main import app
from freight.models import Driver, Trader, TransportCompany
from freight.models.enums import AccountStatus
from freight.schemas.order import OrderCreate
from freight.services import lifecycle
from freight.services.storage import BlobStorage, get_blob_storage


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'freight-test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def blob_storage(tmp_path):
    return BlobStorage(str(tmp_path / "uploads"), "http://test/files")


@pytest_asyncio.fixture(scope="function")
async def client(session_factory, blob_storage):
    """API client with one session per request, like production"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_storage] = lambda: blob_storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_trader(db):
    async def _make(full_name="Omar Traders", status=AccountStatus.ACTIVE.value, **fields):
        trader = Trader(full_name=full_name, status=status, **fields)
        db.add(trader)
        await db.commit()
        return trader
    return _make


@pytest.fixture
def make_company(db):
    async def _make(company_name="Gulf Haulage", status=AccountStatus.AVAILABLE.value, **fields):
        company = TransportCompany(company_name=company_name, status=status, **fields)
        db.add(company)
        await db.commit()
        return company
    return _make


@pytest.fixture
def make_driver(db):
    async def _make(
        full_name="Driver",
        vehicle_cat="3-tonn",
        status=AccountStatus.AVAILABLE.value,
        trailer_length=None,
        trailer_type=None,
        company_id=None,
        **fields,
    ):
        driver = Driver(
            full_name=full_name,
            vehicle_cat=vehicle_cat,
            status=status,
            trailer_length=trailer_length,
            trailer_type=trailer_type,
            company_id=company_id,
            **fields,
        )
        db.add(driver)
        await db.commit()
        return driver
    return _make


def order_payload(trader_id: str, **overrides) -> dict:
    payload = {
        "trader_id": trader_id,
        "origin": "Dubai, Jebel Ali",
        "destination": "Abu Dhabi, Mussafah",
        "weight": 2.5,
        "material": "Ceramic tiles",
        "vehicle_type": "3-tonn",
        "price": 300,
        "toll_paid_by_sender": True,
        "waiting_charges_paid_by_sender": False,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_order(db):
    """Create an order through the lifecycle service; returns (order, notified_count)"""
    async def _make(trader_id: str, **overrides):
        return await lifecycle.create_order(db, OrderCreate(**order_payload(trader_id, **overrides)))
    return _make


@pytest.fixture
def new_order_payload():
    return order_payload
