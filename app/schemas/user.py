from pydantic import AfterValidator, BaseModel, EmailStr
from uuid import UUID
from typing import Annotated, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.config import DEFAULT_TIMEZONE


def _check_timezone(v: str) -> str:
    try:
        ZoneInfo(v)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {v}")
    return v


Timezone = Annotated[str, AfterValidator(_check_timezone)]


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    name: Optional[str] = None
    timezone: Timezone = DEFAULT_TIMEZONE


class UserRead(BaseModel):
    id: UUID
    email: EmailStr
    name: Optional[str] = None
    timezone: str

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    name: Optional[str] = None
    timezone: Optional[Timezone] = None
