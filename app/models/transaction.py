from uuid import UUID
from sqlmodel import SQLModel, Field
from typing import Optional
import datetime as dt

from app.models.enums import TransactionType

class Transaction(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    type: TransactionType
    amount: float
    category: str
    description: str = ""
    date: dt.date = Field(index=True)

    # Weak reference to the budget; it stays as-is when the budget is deleted
    budget_id: Optional[int] = Field(default=None, index=True)

    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)
    updated_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)
