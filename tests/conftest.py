# tests/conftest.py

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from datetime import date, datetime  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
import redis  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from starlette.testclient import TestClient  # noqa: E402

from app.core.cache import ReportCache, get_cache  # noqa: E402
from app.database import get_session  # noqa: E402
from app.main import app  # noqa: E402
from app.models.reporting_models import Approval, Click  # noqa: E402


class InMemoryRedis:
    """Dict-backed stand-in for the handful of Redis calls the cache uses."""

    def __init__(self, fail: bool = False):
        self.store = {}
        self.fail = fail

    def _check(self):
        if self.fail:
            raise redis.ConnectionError("redis is down")

    def get(self, key):
        self._check()
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self._check()
        self.store[key] = value
        return True

    def incr(self, key):
        self._check()
        self.store[key] = str(int(self.store.get(key, 0)) + 1)
        return int(self.store[key])


# --- Test Database Setup ---


@pytest.fixture(scope="function")
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    SQLModel.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def session(engine):
    with Session(engine) as db:
        yield db


@pytest.fixture(scope="function")
def fake_redis():
    return InMemoryRedis()


@pytest.fixture(scope="function")
def cache(fake_redis):
    return ReportCache(fake_redis, ttl=60)


@pytest.fixture(scope="function")
def broken_cache():
    return ReportCache(InMemoryRedis(fail=True), ttl=60)


@pytest.fixture(scope="function")
def client(engine, cache):
    """TestClient with the database and cache swapped for test doubles.

    Used without the context manager so the lifespan (scheduler, table
    creation on the real engine) never runs.
    """

    def override_get_session():
        with Session(engine) as db:
            yield db

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


# --- Row factories ---


@pytest.fixture
def add_approval(session):
    def _add(created_at: datetime, **fields) -> Approval:
        revenue = fields.pop("revenue", Decimal("10.00"))
        row = Approval(
            campaign_name=fields.pop("campaign_name", "[AB12] Summer Sale"),
            offer_id=fields.pop("offer_id", "offer-1"),
            country=fields.pop("country", "AF"),
            revenue=Decimal(str(revenue)) if revenue is not None else None,
            sub_id=fields.pop("sub_id", "sub-1"),
            created_at=created_at,
            **fields,
        )
        session.add(row)
        session.commit()
        session.refresh(row)
        return row

    return _add


@pytest.fixture
def add_click(session):
    def _add(campaign_id: str, day: date, click_count: int = 1, **fields) -> Click:
        row = Click(
            campaign_id=campaign_id,
            date=day,
            campaign_name=fields.pop("campaign_name", f"Campaign {campaign_id}"),
            click_count=click_count,
            **fields,
        )
        session.add(row)
        session.commit()
        return row

    return _add
