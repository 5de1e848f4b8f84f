"""
Notification Schema
In-app messages addressed to a user.
"""
from datetime import datetime
from typing import Optional
from bson import ObjectId
from pydantic import Field

from db.schemas.common import DocumentModel


class Notification(DocumentModel):
    seed_marker: Optional[str] = None
    user_id: ObjectId
    type: str = Field(..., description="Event kind, e.g. delivery_requested")
    title: str
    message: str
    read: bool = False
    created_at: datetime
