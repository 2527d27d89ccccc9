"""Principal and user records supplied by the identity provider."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Role(str, Enum):
    CUSTOMER = "customer"
    THERAPIST = "therapist"
    ADMIN = "admin"


class User(BaseModel):
    """Authenticated user record. The core trusts ids and roles as given."""
    id: str
    name: str
    email: str
    role: Role
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
