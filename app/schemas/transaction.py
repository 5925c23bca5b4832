from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
import datetime as dt

from app.models.enums import TransactionType

class TransactionCreate(BaseModel):
    type: TransactionType
    amount: float = Field(..., gt=0, le=10_000_000)
    category: str = Field(..., min_length=1, max_length=50)
    description: str = Field(default="", max_length=200)
    date: Optional[dt.date] = None
    budget_id: Optional[int] = None

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: str) -> str:
        return v.strip().lower()

class TransactionUpdate(BaseModel):
    amount: Optional[float] = Field(default=None, gt=0, le=10_000_000)
    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=200)
    date: Optional[dt.date] = None
    budget_id: Optional[int] = None

class TransactionRead(BaseModel):
    id: int
    type: TransactionType
    amount: float
    category: str
    description: str
    date: dt.date
    budget_id: Optional[int] = None
    budget_name: Optional[str] = None  # resolved at read time, None if dangling

    model_config = ConfigDict(from_attributes=True)
