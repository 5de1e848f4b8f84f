"""
Tracking Event Schema
Courier position samples for a delivery.
"""
from datetime import datetime
from typing import Optional, Union
from bson import ObjectId

from db.schemas.common import DocumentModel


class Location(DocumentModel):
    lat: float
    lng: float


class TrackingEvent(DocumentModel):
    seed_marker: Optional[str] = None
    delivery_id: ObjectId
    location: Location
    heading: Union[int, float]  # degrees clockwise from north
    speed: Union[int, float]
    created_at: datetime
