"""
Seed Fixtures
Deterministic fixture documents: 1 customer, 1 courier, 1 delivery linked to
the customer, 2 tracking events for the delivery, 1 notification for the
customer.

Every builder takes the ids of the parents it references and the run's clock
value, so the same inputs always produce the same documents.
"""
from datetime import datetime
from typing import Any, Dict

from bson import ObjectId

from config import (
    CUSTOMER_EMAIL,
    COURIER_EMAIL,
    SEED_DELIVERY_MARKER,
    SEED_TRACKING_MARKERS,
    SEED_NOTIFICATION_MARKER,
)
from db.schemas.users import User, UserRole
from db.schemas.deliveries import Address, Delivery, DeliveryStatus, PackageDetails
from db.schemas.tracking_events import Location, TrackingEvent
from db.schemas.notifications import Notification
from utils.timezone import minutes_before


Parents = Dict[str, ObjectId]


# ============================================================================
# USERS
# ============================================================================

def customer_defaults(parents: Parents, now: datetime) -> Dict[str, Any]:
    return User(
        email=CUSTOMER_EMAIL,
        # Placeholder hash; the auth service manages real hashing
        password_hash="$2b$10$seed.placeholder.hash.for.customer",
        role=UserRole.CUSTOMER,
        name="Seed Customer",
        phone="+15550000001",
        created_at=now,
    ).to_document()


def courier_defaults(parents: Parents, now: datetime) -> Dict[str, Any]:
    return User(
        email=COURIER_EMAIL,
        password_hash="$2b$10$seed.placeholder.hash.for.courier",
        role=UserRole.COURIER,
        name="Seed Courier",
        phone="+15550000002",
        created_at=now,
    ).to_document()


# ============================================================================
# DELIVERY
# ============================================================================

def delivery_defaults(parents: Parents, now: datetime) -> Dict[str, Any]:
    """Unassigned delivery for the seed customer"""
    return Delivery(
        seed_marker=SEED_DELIVERY_MARKER,
        customer_id=parents["customer"],
        courier_id=None,
        pickup_address=Address(
            line1="123 Pickup St",
            city="San Francisco",
            state="CA",
            postal_code="94103",
            country="US",
        ),
        dropoff_address=Address(
            line1="987 Dropoff Ave",
            city="San Francisco",
            state="CA",
            postal_code="94107",
            country="US",
        ),
        package_details=PackageDetails(
            description="Small box",
            weight_kg=1.2,
            fragile=False,
        ),
        price=19.99,
        status=DeliveryStatus.REQUESTED,
        created_at=now,
        updated_at=now,
    ).to_document()


# ============================================================================
# TRACKING EVENTS
# ============================================================================

def first_tracking_defaults(parents: Parents, now: datetime) -> Dict[str, Any]:
    return TrackingEvent(
        seed_marker=SEED_TRACKING_MARKERS[0],
        delivery_id=parents["delivery"],
        location=Location(lat=37.7749, lng=-122.4194),
        heading=90,
        speed=0,
        created_at=minutes_before(now, 2),
    ).to_document()


def second_tracking_defaults(parents: Parents, now: datetime) -> Dict[str, Any]:
    return TrackingEvent(
        seed_marker=SEED_TRACKING_MARKERS[1],
        delivery_id=parents["delivery"],
        location=Location(lat=37.7765, lng=-122.4172),
        heading=95,
        speed=4.2,
        created_at=minutes_before(now, 1),
    ).to_document()


# ============================================================================
# NOTIFICATION
# ============================================================================

def notification_defaults(parents: Parents, now: datetime) -> Dict[str, Any]:
    return Notification(
        seed_marker=SEED_NOTIFICATION_MARKER,
        user_id=parents["customer"],
        type="delivery_requested",
        title="Delivery requested",
        message="Your delivery request has been created.",
        read=False,
        created_at=now,
    ).to_document()
