import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import timedelta
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from jobboard.main import app
from jobboard.models.base import Base, get_db
from jobboard.models.job import Job
from jobboard.services import account_service
from jobboard.services.auth_service import create_access_token
from jobboard.services.job_filters import today_utc

PASSWORD = "secret123"

DESCRIPTION = (
    "Work with the campus engineering team on internal tools used by students and staff. "
    "You will write Python services, review pull requests and ship features every week."
)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy emit BEGIN
    @event.listens_for(engine.sync_engine, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    """Create a committed account and return its role record."""

    async def _make(role="student", email=None, is_active=True, **profile):
        profile.setdefault("first_name", role.title())
        profile.setdefault("last_name", "Tester")
        async with session_factory() as session:
            _, record = await account_service.create_account(
                session,
                email or f"{role}-{uuid4().hex[:8]}@university.edu",
                PASSWORD,
                role,
                is_active=is_active,
                **profile,
            )
            await session.commit()
        return record

    return _make


@pytest.fixture
def make_job(session_factory):
    """Insert a posting directly, bypassing validation (e.g. past deadlines)."""

    async def _make(owner=None, **overrides):
        values = {
            "title": "Software Engineering Intern",
            "company": "Acme Corp",
            "industry": "Technology",
            "job_type": "Internship",
            "location": "Austin, TX",
            "description": DESCRIPTION,
            "requirements": ["Enrolled student"],
            "skills": ["Python", "SQL"],
            "deadline": today_utc() + timedelta(days=30),
            "apply_url": "https://careers.acme.example/apply",
            "status": "active",
            "created_by": owner.user_id if owner else None,
        }
        values.update(overrides)
        async with session_factory() as session:
            job = Job(**values)
            session.add(job)
            await session.commit()
        return job

    return _make


@pytest.fixture
def job_payload():
    def _payload(**overrides):
        payload = {
            "title": "Data Analyst",
            "company": "Globex",
            "industry": "Finance",
            "job_type": "Full-Time",
            "location": "Dallas, TX",
            "salary_range": "$60k - $70k",
            "description": DESCRIPTION,
            "requirements": ["Bachelor's degree", "SQL experience"],
            "skills": "Python, SQL, python",
            "deadline": (today_utc() + timedelta(days=20)).isoformat(),
            "apply_url": "https://globex.example/jobs/1",
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def auth_headers():
    def _headers(record):
        return {"Authorization": f"Bearer {create_access_token(record.user_id)}"}

    return _headers
