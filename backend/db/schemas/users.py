"""
User Schema
Customers and couriers. Email is the unique identifying key.
"""
from datetime import datetime
from enum import Enum
from pydantic import Field

from db.schemas.common import DocumentModel


class UserRole(str, Enum):
    CUSTOMER = "customer"
    COURIER = "courier"


class User(DocumentModel):
    """
    Platform account.

    Created once per email and never mutated by provisioning afterwards.
    """
    email: str = Field(..., description="Unique login email")
    password_hash: str = Field(..., description="bcrypt hash; seeds carry a placeholder")
    role: UserRole
    name: str
    phone: str
    created_at: datetime
