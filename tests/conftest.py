# tests/conftest.py
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.models import Repair
from app.services.record_store import RecordStore, StoreError
from app.services.session_provider import SessionProvider
from main import app as application

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    application.dependency_overrides[get_db] = override_get_db
    with TestClient(application) as c:
        yield c
    application.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    client.post("/api/auth/users", json={
        "name": "Sam",
        "email": "sam@example.com",
        "password": "repairs123",
    })
    res = client.post("/api/auth/login", json={"email": "sam@example.com", "password": "repairs123"})
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


class FakeSessionProvider(SessionProvider):
    def __init__(self, session=None):
        self.session = session
        self.signed_out = False

    def get_session(self):
        return self.session

    def sign_out(self):
        self.signed_out = True
        self.session = None


class FakeRecordStore(RecordStore):
    """Repairs kept in a list; set fail_on to make an operation raise StoreError"""

    def __init__(self):
        self.rows = []
        self.calls = []
        self.fail_on = set()
        self._next_id = 1

    def _fail(self, op):
        if op in self.fail_on:
            raise StoreError(f"{op} failed")

    def list_repairs(self, start=None, end=None):
        self.calls.append(("list", start, end))
        self._fail("list")
        rows = [
            r for r in self.rows
            if (start is None or (r.date_sold is not None and r.date_sold >= start))
            and (end is None or (r.date_sold is not None and r.date_sold <= end))
        ]
        floor = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(rows, key=lambda r: r.date_sold or floor, reverse=True)

    def insert_repair(self, repair):
        self.calls.append(("insert", repair))
        self._fail("insert")
        if any(r.listing_id == repair.listing_id for r in self.rows):
            raise StoreError('duplicate key value violates unique constraint "repairs_listing_id_key"')
        row = Repair(id=self._next_id, **repair.model_dump())
        self._next_id += 1
        self.rows.append(row)
        return row

    def upsert_repairs(self, repairs, conflict_key="listing_id"):
        self.calls.append(("upsert", list(repairs), conflict_key))
        self._fail("upsert")
        for repair in repairs:
            data = repair.model_dump()
            existing = next((r for r in self.rows if getattr(r, conflict_key) == data[conflict_key]), None)
            if existing is None:
                self.rows.append(Repair(id=self._next_id, **data))
                self._next_id += 1
            else:
                for field, value in data.items():
                    setattr(existing, field, value)
        return len(repairs)


@pytest.fixture
def store():
    return FakeRecordStore()


@pytest.fixture
def signed_in():
    return FakeSessionProvider({"user_id": 1, "email": "sam@example.com", "name": "Sam", "jti": "abc"})
