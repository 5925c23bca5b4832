# app/models/budget.py

from sqlmodel import SQLModel, Field
from uuid import UUID
from typing import Optional
from datetime import date, datetime

class Budget(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    name: str
    description: Optional[str] = None
    expense_allocation: float = 0.0
    savings_allocation: float = 0.0
    expense_spent: float = 0.0

    # Weak reference: the goal can be deleted on its own, so no FK here
    linked_savings_goal_id: Optional[int] = Field(default=None, index=True)
    last_reset: Optional[date] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
