# app/models/savings_goal.py

from sqlmodel import SQLModel, Field
from uuid import UUID
from typing import Optional
from datetime import date, datetime

from app.models.enums import GoalStatus

class SavingsGoal(SQLModel, table=True):
    __tablename__ = "savings_goal"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    name: str
    description: Optional[str] = None
    current_amount: float = 0.0
    target_amount: float
    target_date: Optional[date] = None
    status: GoalStatus = Field(default=GoalStatus.active)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
