from sqlmodel import SQLModel, Field
from uuid import uuid4, UUID
from datetime import datetime
from typing import Optional

from app.core.config import DEFAULT_TIMEZONE

class User(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(index=True, unique=True)
    hashed_password: str
    name: Optional[str] = None
    timezone: str = Field(default=DEFAULT_TIMEZONE)  # IANA, used for month boundaries
    created_at: datetime = Field(default_factory=datetime.utcnow)
