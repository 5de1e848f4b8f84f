"""
Shared fixtures for the provisioning tests.

Tests run against mongomock, an in-memory pymongo-compatible store, so no
MongoDB server is needed.
"""
from datetime import datetime, timezone

import mongomock
import pytest

from utils.timezone import fixed_clock

FIXED_NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def mongo_db():
    """Fresh empty database per test"""
    client = mongomock.MongoClient()
    db = client["delivery_test"]
    yield db
    client.close()


@pytest.fixture
def clock():
    return fixed_clock(FIXED_NOW)


def as_naive_utc(dt: datetime) -> datetime:
    """BSON datetimes come back naive UTC; normalize for comparisons."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt
