"""
Delivery Schema
A customer's package request, optionally assigned to a courier.
"""
from datetime import datetime
from enum import Enum
from typing import Optional
from bson import ObjectId
from pydantic import Field

from db.schemas.common import DocumentModel


class DeliveryStatus(str, Enum):
    """Lifecycle states. Services other than provisioning own all transitions."""
    REQUESTED = "requested"
    ASSIGNED = "assigned"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Address(DocumentModel):
    line1: str
    city: str
    state: str
    postal_code: str
    country: str


class PackageDetails(DocumentModel):
    description: str
    weight_kg: float
    fragile: bool = False


class Delivery(DocumentModel):
    seed_marker: Optional[str] = Field(default=None, description="Stable fixture key; absent on real deliveries")
    customer_id: ObjectId = Field(..., description="users._id of the requesting customer")
    courier_id: Optional[ObjectId] = Field(default=None, description="users._id of the assigned courier")
    pickup_address: Address
    dropoff_address: Address
    package_details: PackageDetails
    price: float
    status: DeliveryStatus = DeliveryStatus.REQUESTED
    created_at: datetime
    updated_at: datetime
