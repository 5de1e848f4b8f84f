"""
Seed Engine Tests

Tests verify:
1. Fixtures are created in dependency order with ids threaded into children
2. Fixture values come from the injected clock
3. A step with an unresolved parent is refused before anything is inserted
4. A failing step aborts the run and reports the committed steps
"""
from datetime import timedelta
from unittest.mock import patch

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from db.errors import MissingParentReferenceError, SeedAbortedError
from services.seed_engine import SeedEngine, SeedStep, default_seed_steps
from services import seed_fixtures

from conftest import FIXED_NOW, as_naive_utc


class TestSeedOrder:

    def test_default_steps_are_parents_first(self):
        steps = default_seed_steps()
        seen = set()
        for step in steps:
            assert set(step.requires) <= seen, f"{step.name} runs before its parents"
            seen.add(step.name)

        assert [s.name for s in steps] == [
            "customer", "courier", "delivery", "tracking_1", "tracking_2", "notification"
        ]

    def test_ids_threaded_into_children(self, mongo_db, clock):
        report = SeedEngine(mongo_db, clock=clock).run()
        ids = report.ids

        delivery = mongo_db["deliveries"].find_one({"_id": ids["delivery"]})
        assert delivery["customerId"] == ids["customer"]
        assert delivery["courierId"] is None

        for name in ("tracking_1", "tracking_2"):
            event = mongo_db["tracking_events"].find_one({"_id": ids[name]})
            assert event["deliveryId"] == ids["delivery"]

        notification = mongo_db["notifications"].find_one({"_id": ids["notification"]})
        assert notification["userId"] == ids["customer"]

    def test_first_run_creates_every_fixture(self, mongo_db, clock):
        report = SeedEngine(mongo_db, clock=clock).run()

        assert report.created == report.committed
        assert len(report.outcomes) == 6


class TestSeedFixtureValues:

    def test_users(self, mongo_db, clock):
        SeedEngine(mongo_db, clock=clock).run()

        customer = mongo_db["users"].find_one({"email": "customer@example.com"})
        courier = mongo_db["users"].find_one({"email": "courier@example.com"})
        assert customer["role"] == "customer"
        assert customer["passwordHash"].startswith("$2b$10$")
        assert customer["name"] == "Seed Customer"
        assert courier["role"] == "courier"
        assert courier["phone"] == "+15550000002"
        assert as_naive_utc(customer["createdAt"]) == as_naive_utc(FIXED_NOW)

    def test_delivery_nested_records(self, mongo_db, clock):
        SeedEngine(mongo_db, clock=clock).run()

        delivery = mongo_db["deliveries"].find_one({"seedMarker": "seed_delivery_1"})
        assert delivery["pickupAddress"] == {
            "line1": "123 Pickup St",
            "city": "San Francisco",
            "state": "CA",
            "postalCode": "94103",
            "country": "US",
        }
        assert delivery["dropoffAddress"]["postalCode"] == "94107"
        assert delivery["packageDetails"] == {"description": "Small box", "weightKg": 1.2, "fragile": False}
        assert delivery["price"] == 19.99
        assert delivery["status"] == "requested"
        assert as_naive_utc(delivery["updatedAt"]) == as_naive_utc(delivery["createdAt"])

    def test_tracking_timestamps_from_clock(self, mongo_db, clock):
        SeedEngine(mongo_db, clock=clock).run()

        first = mongo_db["tracking_events"].find_one({"seedMarker": "seed_tracking_1"})
        second = mongo_db["tracking_events"].find_one({"seedMarker": "seed_tracking_2"})
        assert as_naive_utc(first["createdAt"]) == as_naive_utc(FIXED_NOW - timedelta(minutes=2))
        assert as_naive_utc(second["createdAt"]) == as_naive_utc(FIXED_NOW - timedelta(minutes=1))
        assert first["location"] == {"lat": 37.7749, "lng": -122.4194}
        assert second["speed"] == 4.2

    def test_tracking_integers_stay_integers(self, mongo_db, clock):
        SeedEngine(mongo_db, clock=clock).run()

        first = mongo_db["tracking_events"].find_one({"seedMarker": "seed_tracking_1"})
        assert first["heading"] == 90 and isinstance(first["heading"], int)
        assert first["speed"] == 0 and isinstance(first["speed"], int)

    def test_notification(self, mongo_db, clock):
        SeedEngine(mongo_db, clock=clock).run()

        notification = mongo_db["notifications"].find_one({"seedMarker": "seed_notification_1"})
        assert notification["type"] == "delivery_requested"
        assert notification["read"] is False

    def test_clock_read_once_per_run(self, mongo_db):
        calls = []

        def counting_clock():
            calls.append(1)
            return FIXED_NOW

        SeedEngine(mongo_db, clock=counting_clock).run()

        assert len(calls) == 1


class TestSeedAborts:

    def test_missing_parent_refused_before_insert(self, mongo_db, clock):
        steps = [
            SeedStep(
                name="orphan_event",
                collection="tracking_events",
                key={"seedMarker": "seed_tracking_1"},
                build_defaults=seed_fixtures.first_tracking_defaults,
                requires=["delivery"],
            )
        ]

        with pytest.raises(SeedAbortedError) as exc_info:
            SeedEngine(mongo_db, clock=clock, steps=steps).run()

        assert isinstance(exc_info.value.cause, MissingParentReferenceError)
        assert exc_info.value.cause.missing == ["delivery"]
        assert mongo_db["tracking_events"].count_documents({}) == 0

    def test_failure_keeps_committed_steps(self, mongo_db, clock):
        from db import upsert

        real_find_or_create = upsert.find_or_create

        def flaky(collection, key, defaults):
            if collection.name == "deliveries":
                raise ServerSelectionTimeoutError("connection lost")
            return real_find_or_create(collection, key, defaults)

        with patch("services.seed_engine.find_or_create", side_effect=flaky):
            with pytest.raises(SeedAbortedError) as exc_info:
                SeedEngine(mongo_db, clock=clock).run()

        assert exc_info.value.step == "delivery"
        assert exc_info.value.report.committed == ["customer", "courier"]
        assert mongo_db["users"].count_documents({}) == 2
        assert mongo_db["deliveries"].count_documents({}) == 0
        assert mongo_db["tracking_events"].count_documents({}) == 0
        assert mongo_db["notifications"].count_documents({}) == 0

    def test_rerun_after_abort_completes_graph(self, mongo_db, clock):
        with patch("services.seed_engine.find_or_create", side_effect=ServerSelectionTimeoutError("down")):
            with pytest.raises(SeedAbortedError):
                SeedEngine(mongo_db, clock=clock).run()

        report = SeedEngine(mongo_db, clock=clock).run()

        assert len(report.committed) == 6
        assert mongo_db["tracking_events"].count_documents({}) == 2
